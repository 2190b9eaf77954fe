"""
Rendered page cache

In-process stand-in for incremental static regeneration: a page is
rendered on first access, served from cache until it is older than the
revalidation interval, and dropped immediately when invalidated.
"""

import logging
import threading
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Optional

from ..core.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class CachedPage:
    """A rendered page and when it was generated"""
    path: str
    content: Any
    generated_at: float

    def age(self, now: Optional[float] = None) -> float:
        return (now if now is not None else time.monotonic()) - self.generated_at


class PageCache:
    """Path-keyed cache of rendered pages"""

    def __init__(self, revalidate_seconds: int = 60, clock: Callable[[], float] = time.monotonic):
        self.revalidate_seconds = revalidate_seconds
        self._clock = clock
        self._pages: dict[str, CachedPage] = {}
        self._invalidated: dict[str, float] = {}
        # Bumped on every invalidation of a path
        self._generations: dict[str, int] = {}
        self._lock = threading.Lock()

    def get_or_render(self, path: str, render: Callable[[], Any]) -> Any:
        """
        Return the cached render for ``path``.

        Renders again when the page is missing or stale. A render that
        returns None (page not found) is not cached.
        """
        now = self._clock()
        with self._lock:
            page = self._pages.get(path)
            if page and page.age(now) < self.revalidate_seconds:
                return page.content
            generation = self._generations.get(path, 0)

        content = render()
        if content is None:
            return None

        with self._lock:
            if self._generations.get(path, 0) != generation:
                # Invalidated while rendering; the render may predate the change
                logger.debug(f"Discarded render of {path} invalidated mid-render")
                return content
            self._pages[path] = CachedPage(path=path, content=content, generated_at=now)
        logger.debug(f"Rendered {path}")
        return content

    def invalidate(self, path: str) -> bool:
        """
        Drop the cached render for ``path``.

        Returns:
            True if a cached page was dropped
        """
        with self._lock:
            dropped = self._pages.pop(path, None) is not None
            self._invalidated[path] = time.time()
            self._generations[path] = self._generations.get(path, 0) + 1

        logger.info(f"Invalidated {path} ({'cached' if dropped else 'not cached'})")
        return dropped

    def is_cached(self, path: str) -> bool:
        with self._lock:
            return path in self._pages

    def last_invalidated(self, path: str) -> Optional[float]:
        """Epoch seconds of the last invalidation of ``path``"""
        with self._lock:
            return self._invalidated.get(path)

    def clear(self) -> None:
        with self._lock:
            self._pages.clear()
            self._invalidated.clear()


@lru_cache()
def get_page_cache() -> PageCache:
    """Get the process-wide page cache"""
    return PageCache(revalidate_seconds=get_settings().page_revalidate_seconds)
