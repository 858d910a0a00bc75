from typing import List, Optional, Sequence
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import is_store_unavailable
from app.core.pagination import count_pages, is_page_available, page_offset
from app.dao.product_dao import product_dao
from app.models.product import Product, ProductCreate, ProductUpdate, decode_base64_image
from app.models.timestamps import utc_now
from app.schemas.product_schemas import InfoProduct, InfoProductPage
import structlog

logger = structlog.get_logger()


def decode_thumbnail(encoded: Optional[str]) -> Optional[bytes]:
    """Decode a base64 thumbnail sent in the file name field."""
    if not encoded:
        return None
    try:
        return decode_base64_image(encoded)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="thumbnailPhotoFileName must contain base64 encoded image data"
        )


class ProductService:
    def __init__(self):
        self.product_dao = product_dao

    @staticmethod
    def _store_failure(detail: str, error: Exception) -> HTTPException:
        if is_store_unavailable(error):
            return HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Product store is unavailable"
            )
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail
        )

    async def get_products(self, db: AsyncSession) -> List[Product]:
        try:
            products = await self.product_dao.get_all_with_details(db)
            logger.info("Retrieved products", count=len(products))
            return products
        except Exception as e:
            logger.error("Error getting products", error=str(e))
            raise self._store_failure("Could not retrieve products", e)

    async def get_product(self, db: AsyncSession, product_id: int) -> Product:
        try:
            product = await self.product_dao.get_with_details(db, product_id)
        except Exception as e:
            logger.error("Error getting product", product_id=product_id, error=str(e))
            raise self._store_failure("Could not retrieve product", e)

        if not product:
            logger.warning("Product not found", product_id=product_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found"
            )
        return product

    async def search_info_products(
        self,
        db: AsyncSession,
        search_data: str,
        page_number: int,
        page_size: int,
        categories: Optional[Sequence[str]] = None,
    ) -> InfoProductPage:
        """
        Return one page of InfoProduct rows whose name contains ``search_data``.

        An empty match is a successful empty page whatever ``page_number`` is;
        otherwise a page outside ``1..total_pages`` is reported as not found.
        """
        try:
            total_items = await self.product_dao.count_search(db, search_data, categories)
            total_pages = count_pages(total_items, page_size)

            if total_pages == 0:
                logger.info("Product search matched nothing", search_data=search_data, categories=categories)
                return InfoProductPage(
                    products=[], page_number=page_number, total_pages=0,
                    total_items=0, page_size=page_size
                )

            if not is_page_available(page_number, total_pages):
                logger.warning("Requested product page does not exist",
                               page_number=page_number, total_pages=total_pages)
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Page {page_number} does not exist. Last page is {total_pages}."
                )

            rows = await self.product_dao.search_info(
                db, search_data, categories,
                skip=page_offset(page_number, page_size), limit=page_size
            )
            products = [
                InfoProduct(
                    product_name=row.productName,
                    product_id=row.productId,
                    product_price=row.listPrice,
                    thumb_nail_photo=row.thumbNailPhoto,
                    category_name=row.categoryName,
                )
                for row in rows
            ]
            logger.info("Searched products", search_data=search_data, categories=categories,
                        page_number=page_number, count=len(products))
            return InfoProductPage(
                products=products, page_number=page_number, total_pages=total_pages,
                total_items=total_items, page_size=page_size
            )

        except HTTPException:
            raise
        except Exception as e:
            logger.error("Error searching products", search_data=search_data, error=str(e))
            raise self._store_failure("Could not search products", e)

    async def create_product(self, db: AsyncSession, product_create: ProductCreate) -> Product:
        product_data = product_create.model_dump(exclude={"thumbnailPhotoFileName"})
        product_data["thumbNailPhoto"] = decode_thumbnail(product_create.thumbnailPhotoFileName)
        product_data["modifiedDate"] = utc_now()

        try:
            product = await self.product_dao.create(db, obj_in=product_data)
            logger.info("Product created successfully", product_id=product.productId)
        except IntegrityError as e:
            logger.warning("Product violates a catalog constraint", name=product_create.name, error=str(e))
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A product with this name or product number already exists"
            )
        except Exception as e:
            logger.error("Error creating product", name=product_create.name, error=str(e))
            raise self._store_failure("Product creation failed", e)

        return await self.get_product(db, product.productId)

    async def update_product(self, db: AsyncSession, product_id: int, product_update: ProductUpdate) -> None:
        if product_id != product_update.productId:
            logger.warning("Product id mismatch", path_id=product_id, body_id=product_update.productId)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product id in path does not match request body"
            )

        try:
            update_data = product_update.model_dump(exclude={"productId", "rowVersion", "thumbNailPhoto"})
            update_data["thumbNailPhoto"] = product_update.thumbNailPhoto
            update_data["modifiedDate"] = utc_now()
            updated = await self.product_dao.update_versioned(
                db, product_id, product_update.rowVersion, update_data
            )
            if updated:
                logger.info("Product updated successfully", product_id=product_id)
                return

            if not await self.product_dao.exists(db, product_id):
                logger.warning("Product not found for update", product_id=product_id)
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Product not found"
                )
            logger.warning("Concurrent product update rejected",
                           product_id=product_id, row_version=product_update.rowVersion)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Product was modified by another request"
            )

        except HTTPException:
            raise
        except IntegrityError as e:
            logger.warning("Product update violates a catalog constraint", product_id=product_id, error=str(e))
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A product with this name or product number already exists"
            )
        except Exception as e:
            logger.error("Error updating product", product_id=product_id, error=str(e))
            raise self._store_failure("Product update failed", e)

    async def delete_product(self, db: AsyncSession, product_id: int) -> None:
        try:
            deleted_product = await self.product_dao.delete(db, id=product_id)
        except Exception as e:
            logger.error("Error deleting product", product_id=product_id, error=str(e))
            raise self._store_failure("Product deletion failed", e)

        if not deleted_product:
            logger.warning("Product not found for delete", product_id=product_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found"
            )
        logger.info("Product deleted successfully", product_id=product_id)


product_service = ProductService()
