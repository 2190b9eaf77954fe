"""
Page invalidation dispatch

After a product is created or updated its page is invalidated so readers
see fresh data. Invalidation either talks to the page cache in-process or
calls the revalidate endpoint of a (possibly remote) instance over HTTP.
"""

import logging
from functools import lru_cache
from typing import Optional, Protocol, runtime_checkable

import httpx

from ..core.config import get_settings
from ..security.api_key import API_KEY_HEADER
from .page_cache import PageCache, get_page_cache

logger = logging.getLogger(__name__)


@runtime_checkable
class Invalidator(Protocol):
    async def invalidate(self, path: str, credential: Optional[str] = None) -> None:
        ...

    async def close(self) -> None:
        ...


class LocalInvalidator:
    """Invalidates pages in this process's page cache"""

    def __init__(self, page_cache: PageCache):
        self.page_cache = page_cache

    async def invalidate(self, path: str, credential: Optional[str] = None) -> None:
        self.page_cache.invalidate(path)

    async def close(self) -> None:
        pass


class HTTPInvalidator:
    """
    Client for the revalidate endpoint.

    Forwards the caller's API key so the endpoint applies the same
    authorization as the originating mutation.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize revalidation client.

        Args:
            base_url: Base URL of the service exposing /revalidate
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def invalidate(self, path: str, credential: Optional[str] = None) -> None:
        url = f"{self.base_url}/revalidate"
        response = await self._http_client.post(
            url,
            params={"path": path},
            headers={API_KEY_HEADER: credential or ""},
        )

        if response.status_code >= 400:
            logger.error(f"Revalidation failed: {response.status_code} - {response.text}")
            response.raise_for_status()

        logger.debug(f"Revalidated {path} via {url}")


async def dispatch_invalidation(
    invalidator: Invalidator,
    path: str,
    credential: Optional[str] = None,
) -> None:
    """
    Invalidate ``path`` without letting failures escape.

    Runs after the mutation has committed; catalog writes never depend on
    the page cache being reachable.
    """
    try:
        await invalidator.invalidate(path, credential)
    except Exception as e:
        logger.warning(f"Invalidation of {path} failed: {e}")


@lru_cache()
def get_invalidator() -> Invalidator:
    """Create the invalidator selected by settings"""
    settings = get_settings()
    if settings.remote_revalidation:
        logger.info(f"Invalidating pages via {settings.revalidate_base_url}")
        return HTTPInvalidator(
            settings.revalidate_base_url,
            timeout=settings.revalidate_timeout,
        )
    return LocalInvalidator(get_page_cache())
