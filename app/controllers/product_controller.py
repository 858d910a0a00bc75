from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.core.database import get_async_session
from app.services.product_service import product_service
from app.models.product import ProductCreate, ProductUpdate
from app.schemas.product_schemas import InfoProductPage, ProductResponse, ProductSearchRequest
from typing import List


router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=List[ProductResponse])
async def get_products(db: AsyncSession = Depends(get_async_session)):
    """Get all products with their category, model and model descriptions"""
    products = await product_service.get_products(db)
    return [ProductResponse.model_validate(product) for product in products]


# Search routes are declared before /{product_id} so "search" is never parsed as an id
@router.post("/search", response_model=InfoProductPage)
async def search_products_by_category(
    search: ProductSearchRequest,
    db: AsyncSession = Depends(get_async_session)
):
    """Search products by name within a set of categories, six per page"""
    return await product_service.search_info_products(
        db,
        search_data=search.search_data,
        page_number=search.page_number,
        page_size=settings.category_search_page_size,
        categories=search.categories,
    )


@router.get("/search", response_model=InfoProductPage)
async def search_products_by_name(
    search_data: str = Query("", alias="searchData", description="Case-insensitive product name fragment"),
    page_number: int = Query(1, alias="pageNumber", description="1-based page number"),
    db: AsyncSession = Depends(get_async_session)
):
    """Search products by name across all categories, twelve per page"""
    return await product_service.search_info_products(
        db,
        search_data=search_data,
        page_number=page_number,
        page_size=settings.name_search_page_size,
    )


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: AsyncSession = Depends(get_async_session)):
    """Get a specific product by ID"""
    product = await product_service.get_product(db, product_id)
    return ProductResponse.model_validate(product)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product: ProductCreate,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_async_session)
):
    """Create a product; the thumbnail is sent base64 encoded in thumbnailPhotoFileName"""
    created_product = await product_service.create_product(db, product)
    response.headers["Location"] = str(
        request.url_for("get_product", product_id=created_product.productId)
    )
    return ProductResponse.model_validate(created_product)


@router.put("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def update_product(
    product_id: int,
    product: ProductUpdate,
    db: AsyncSession = Depends(get_async_session)
):
    """Replace a product, rejecting stale rowVersion tokens"""
    await product_service.update_product(db, product_id, product)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_product(product_id: int, db: AsyncSession = Depends(get_async_session)):
    """Delete a product"""
    await product_service.delete_product(db, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
