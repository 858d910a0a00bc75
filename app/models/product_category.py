from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from .timestamps import utc_now, utc_datetime_type
import uuid

if TYPE_CHECKING:
    from .product import Product


class ProductCategoryBase(SQLModel):
    name: str = Field(max_length=50, unique=True, index=True)
    parentProductCategoryId: Optional[int] = Field(
        default=None, foreign_key="ProductCategory.productCategoryId"
    )


class ProductCategory(ProductCategoryBase, table=True):
    __tablename__ = "ProductCategory"

    productCategoryId: Optional[int] = Field(default=None, primary_key=True)
    rowguid: uuid.UUID = Field(default_factory=uuid.uuid4, unique=True)
    modifiedDate: datetime = Field(default_factory=utc_now, sa_type=utc_datetime_type())

    # Relationships
    products: List["Product"] = Relationship(back_populates="productCategory")
