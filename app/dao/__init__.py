# Export all DAO classes
from .base_dao import BaseDAO
from .product_dao import ProductDAO, product_dao

__all__ = [
    "BaseDAO",
    "ProductDAO",
    "product_dao",
]
