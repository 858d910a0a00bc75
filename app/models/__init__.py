# Import all models for easy access
from .product_category import ProductCategory
from .product_model import ProductModel
from .product_description import ProductDescription, ProductModelProductDescription
from .product import Product, ProductCreate, ProductUpdate

# Export all models
__all__ = [
    # Catalog lookup tables
    "ProductCategory",
    "ProductModel",
    "ProductDescription", "ProductModelProductDescription",

    # Product
    "Product", "ProductCreate", "ProductUpdate",
]
