from pydantic import BaseModel, Field, PlainSerializer
from pydantic.alias_generators import to_camel
from typing import Annotated, Optional, List
from decimal import Decimal
from datetime import datetime
import base64

# Money and weights go out as JSON numbers
JsonDecimal = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
# Image bytes go out as standard-alphabet base64, the same alphabet PUT accepts
Base64Image = Annotated[
    bytes,
    PlainSerializer(lambda value: base64.b64encode(value).decode("ascii"), return_type=str, when_used="json"),
]


class ProductCategoryResponse(BaseModel):
    productCategoryId: int
    parentProductCategoryId: Optional[int] = None
    name: str
    modifiedDate: datetime

    class Config:
        from_attributes = True


class ProductDescriptionResponse(BaseModel):
    productDescriptionId: int
    description: str

    class Config:
        from_attributes = True


class ProductModelDescriptionResponse(BaseModel):
    culture: str
    productDescription: ProductDescriptionResponse

    class Config:
        from_attributes = True


class ProductModelResponse(BaseModel):
    productModelId: int
    name: str
    catalogDescription: Optional[str] = None
    productModelProductDescriptions: List[ProductModelDescriptionResponse] = []

    class Config:
        from_attributes = True


class ProductResponse(BaseModel):
    """Product with its category, model and localized model descriptions."""
    productId: int
    name: str
    productNumber: str
    color: Optional[str]
    standardCost: JsonDecimal
    listPrice: JsonDecimal
    size: Optional[str]
    weight: Optional[JsonDecimal]
    productCategoryId: Optional[int]
    productModelId: Optional[int]
    sellStartDate: datetime
    sellEndDate: Optional[datetime]
    discontinuedDate: Optional[datetime]
    thumbNailPhoto: Optional[Base64Image]
    thumbnailPhotoFileName: Optional[str]
    modifiedDate: datetime
    rowVersion: int
    productCategory: Optional[ProductCategoryResponse] = None
    productModel: Optional[ProductModelResponse] = None

    class Config:
        from_attributes = True


class InfoProduct(BaseModel):
    """Reduced view of a product for search result listings."""
    product_name: str
    product_id: int
    product_price: JsonDecimal
    thumb_nail_photo: Optional[Base64Image] = None
    category_name: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class InfoProductPage(BaseModel):
    products: List[InfoProduct]
    page_number: int
    total_pages: int
    total_items: int
    page_size: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ProductSearchRequest(BaseModel):
    """Body of the category-aware search. An empty category list means no category filter."""
    categories: List[str] = Field(default_factory=list, description="Category names to keep")
    search_data: str = Field("", description="Case-insensitive product name fragment")
    page_number: int = Field(1, description="1-based page number")

    class Config:
        alias_generator = to_camel
        populate_by_name = True
