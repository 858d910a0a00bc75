from sqlmodel import SQLModel, Field, Relationship
from pydantic import field_validator
from typing import Optional, TYPE_CHECKING
from datetime import datetime
import base64
import binascii
import uuid
from decimal import Decimal
from .timestamps import as_utc, utc_now, utc_datetime_type

if TYPE_CHECKING:
    from .product_category import ProductCategory
    from .product_model import ProductModel


def decode_base64_image(value: str) -> bytes:
    """Decode standard-alphabet base64 text, raising ``ValueError`` when it is not."""
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("Thumbnail must be base64 encoded") from e


class ProductBase(SQLModel):
    name: str = Field(max_length=50, unique=True, index=True)
    productNumber: str = Field(max_length=25, unique=True)
    color: Optional[str] = Field(default=None, max_length=15)
    standardCost: Decimal = Field(ge=0, max_digits=19, decimal_places=4)
    listPrice: Decimal = Field(ge=0, max_digits=19, decimal_places=4)
    size: Optional[str] = Field(default=None, max_length=5)
    weight: Optional[Decimal] = Field(default=None, gt=0, max_digits=8, decimal_places=2)
    productCategoryId: Optional[int] = Field(
        default=None, foreign_key="ProductCategory.productCategoryId", index=True
    )
    productModelId: Optional[int] = Field(default=None, foreign_key="ProductModel.productModelId")
    sellStartDate: datetime = Field(default_factory=utc_now, sa_type=utc_datetime_type())
    sellEndDate: Optional[datetime] = Field(default=None, sa_type=utc_datetime_type())
    discontinuedDate: Optional[datetime] = Field(default=None, sa_type=utc_datetime_type())
    thumbnailPhotoFileName: Optional[str] = None

    @field_validator("sellStartDate", "sellEndDate", "discontinuedDate")
    @classmethod
    def normalize_to_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class Product(ProductBase, table=True):
    __tablename__ = "Product"

    productId: Optional[int] = Field(default=None, primary_key=True)
    thumbNailPhoto: Optional[bytes] = None
    rowguid: uuid.UUID = Field(default_factory=uuid.uuid4, unique=True)
    modifiedDate: datetime = Field(default_factory=utc_now, sa_type=utc_datetime_type())
    # Optimistic concurrency token, bumped on every update
    rowVersion: int = Field(default=1, nullable=False)

    # Relationships
    productCategory: Optional["ProductCategory"] = Relationship(back_populates="products")
    productModel: Optional["ProductModel"] = Relationship(back_populates="products")


class ProductCreate(ProductBase):
    """Incoming product. ``thumbnailPhotoFileName`` carries the thumbnail as base64 text."""
    pass


class ProductUpdate(ProductBase):
    """Full replacement of a stored product, checked against ``rowVersion``.

    ``thumbNailPhoto`` arrives as base64 text and is held as the decoded image bytes.
    """
    productId: int
    rowVersion: int
    thumbNailPhoto: Optional[bytes] = None

    @field_validator("thumbNailPhoto", mode="before")
    @classmethod
    def decode_thumbnail(cls, value):
        if isinstance(value, str):
            return decode_base64_image(value) if value else None
        return value
