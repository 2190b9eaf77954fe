# Database modules

from .products import (
    CatalogError,
    CatalogReadError,
    CatalogWriteError,
    ProductDatabase,
    get_product_db,
)

__all__ = [
    "CatalogError",
    "CatalogReadError",
    "CatalogWriteError",
    "ProductDatabase",
    "get_product_db",
]
