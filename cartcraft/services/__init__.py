# Services

from .page_cache import CachedPage, PageCache, get_page_cache
from .revalidation import (
    HTTPInvalidator,
    Invalidator,
    LocalInvalidator,
    dispatch_invalidation,
    get_invalidator,
)

__all__ = [
    "CachedPage",
    "PageCache",
    "get_page_cache",
    "HTTPInvalidator",
    "Invalidator",
    "LocalInvalidator",
    "dispatch_invalidation",
    "get_invalidator",
]
