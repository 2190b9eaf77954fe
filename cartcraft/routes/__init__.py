# API Routes

from .products import router as products_router
from .revalidate import router as revalidate_router

__all__ = ["products_router", "revalidate_router"]
