from typing import Any, Dict, List, Optional, Sequence
from sqlmodel import select
from sqlalchemy import func, update
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from app.dao.base_dao import BaseDAO
from app.models.product import Product
from app.models.product_category import ProductCategory
from app.models.product_model import ProductModel
from app.models.product_description import ProductModelProductDescription
import structlog

logger = structlog.get_logger()


class ProductDAO(BaseDAO[Product]):
    def __init__(self):
        super().__init__(Product)

    @staticmethod
    def _with_details(query):
        return query.options(
            selectinload(Product.productCategory),
            selectinload(Product.productModel)
            .selectinload(ProductModel.productModelProductDescriptions)
            .selectinload(ProductModelProductDescription.productDescription),
        )

    @staticmethod
    def _search_conditions(search_data: str, categories: Optional[Sequence[str]]) -> list:
        conditions = [Product.name.icontains(search_data, autoescape=True)]
        if categories:
            conditions.append(ProductCategory.name.in_(list(categories)))
        return conditions

    @staticmethod
    def _join_category(query):
        return query.outerjoin(
            ProductCategory,
            Product.productCategoryId == ProductCategory.productCategoryId,
        )

    async def get_all_with_details(self, db: AsyncSession) -> List[Product]:
        try:
            result = await db.execute(
                self._with_details(select(Product)).order_by(Product.productId)
            )
            return result.scalars().all()
        except Exception as e:
            logger.error("Error getting products with details", error=str(e))
            raise

    async def get_with_details(self, db: AsyncSession, product_id: int) -> Optional[Product]:
        try:
            result = await db.execute(
                self._with_details(select(Product))
                .where(Product.productId == product_id)
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error("Error getting product with details", product_id=product_id, error=str(e))
            raise

    async def count_search(
        self, db: AsyncSession, search_data: str, categories: Optional[Sequence[str]] = None
    ) -> int:
        try:
            query = self._join_category(
                select(func.count(Product.productId)).select_from(Product)
            ).where(*self._search_conditions(search_data, categories))
            result = await db.execute(query)
            return result.scalar_one()
        except Exception as e:
            logger.error("Error counting product search", search_data=search_data, error=str(e))
            raise

    async def search_info(
        self,
        db: AsyncSession,
        search_data: str,
        categories: Optional[Sequence[str]] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Row]:
        """Rows of (productId, productName, listPrice, thumbNailPhoto, categoryName) ordered by id."""
        try:
            query = (
                self._join_category(
                    select(
                        Product.productId,
                        Product.name.label("productName"),
                        Product.listPrice,
                        Product.thumbNailPhoto,
                        ProductCategory.name.label("categoryName"),
                    )
                )
                .where(*self._search_conditions(search_data, categories))
                .order_by(Product.productId)
                .offset(skip)
                .limit(limit)
            )
            result = await db.execute(query)
            return result.all()
        except Exception as e:
            logger.error("Error searching products", search_data=search_data, error=str(e))
            raise

    async def update_versioned(
        self, db: AsyncSession, product_id: int, expected_version: int, values: Dict[str, Any]
    ) -> bool:
        """Replace the product's columns only if its rowVersion still matches.

        Returns False when no row was updated, either because the product is
        gone or because another writer bumped the version first.
        """
        try:
            result = await db.execute(
                update(Product)
                .where(Product.productId == product_id)
                .where(Product.rowVersion == expected_version)
                .values(**values, rowVersion=expected_version + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await db.rollback()
                logger.info("Versioned product update matched no rows",
                            product_id=product_id, expected_version=expected_version)
                return False
            await db.commit()
            logger.info("Updated Product", id=str(product_id), row_version=expected_version + 1)
            return True
        except Exception as e:
            await db.rollback()
            logger.error("Error updating product", product_id=product_id, error=str(e))
            raise


product_dao = ProductDAO()
