"""On-demand page revalidation route"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..models.revalidate import RevalidateResponse
from ..security.api_key import require_api_key
from ..services.page_cache import PageCache, get_page_cache

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Revalidate"])


@router.post("/revalidate", response_model=RevalidateResponse)
async def revalidate(
    path: Optional[str] = Query(None, description="Page path to invalidate"),
    api_key: str = Depends(require_api_key),
    page_cache: PageCache = Depends(get_page_cache),
):
    """
    Drop the cached render of a page (protected).

    The page is regenerated on its next request.
    """
    if not path:
        raise HTTPException(status_code=400, detail="Missing path parameter")

    try:
        page_cache.invalidate(path)
    except Exception as e:
        logger.error(f"Error revalidating {path}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to revalidate")

    return RevalidateResponse(path=path, timestamp=int(time.time() * 1000))
