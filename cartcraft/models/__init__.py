# CartCraft Models

from .product import (
    LOW_STOCK_THRESHOLD,
    InventoryStats,
    Product,
    ProductCreate,
    ProductPage,
    ProductUpdate,
    StockStatus,
    missing_fields,
    product_path,
)
from .cart import CartLine, CartTotals, CustomerDetails, Receipt
from .revalidate import ErrorResponse, RevalidateResponse

__all__ = [
    "LOW_STOCK_THRESHOLD",
    "InventoryStats",
    "Product",
    "ProductCreate",
    "ProductPage",
    "ProductUpdate",
    "StockStatus",
    "missing_fields",
    "product_path",
    "CartLine",
    "CartTotals",
    "CustomerDetails",
    "Receipt",
    "ErrorResponse",
    "RevalidateResponse",
]
