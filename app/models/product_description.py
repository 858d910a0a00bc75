from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from .timestamps import utc_now, utc_datetime_type
import uuid

if TYPE_CHECKING:
    from .product_model import ProductModel


class ProductDescriptionBase(SQLModel):
    description: str = Field(max_length=400)


class ProductDescription(ProductDescriptionBase, table=True):
    __tablename__ = "ProductDescription"

    productDescriptionId: Optional[int] = Field(default=None, primary_key=True)
    rowguid: uuid.UUID = Field(default_factory=uuid.uuid4, unique=True)
    modifiedDate: datetime = Field(default_factory=utc_now, sa_type=utc_datetime_type())

    # Relationships
    productModelProductDescriptions: List["ProductModelProductDescription"] = Relationship(
        back_populates="productDescription"
    )


class ProductModelProductDescription(SQLModel, table=True):
    """Join table linking a product model to its descriptions, one per culture."""
    __tablename__ = "ProductModelProductDescription"

    productModelId: int = Field(foreign_key="ProductModel.productModelId", primary_key=True)
    productDescriptionId: int = Field(
        foreign_key="ProductDescription.productDescriptionId", primary_key=True
    )
    culture: str = Field(max_length=6, primary_key=True)
    rowguid: uuid.UUID = Field(default_factory=uuid.uuid4, unique=True)
    modifiedDate: datetime = Field(default_factory=utc_now, sa_type=utc_datetime_type())

    # Relationships
    productModel: Optional["ProductModel"] = Relationship(
        back_populates="productModelProductDescriptions"
    )
    productDescription: Optional[ProductDescription] = Relationship(
        back_populates="productModelProductDescriptions"
    )
