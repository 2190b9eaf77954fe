"""Product API routes"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from ..database.products import CatalogError, ProductDatabase, get_product_db
from ..models.product import (
    InventoryStats,
    Product,
    ProductCreate,
    ProductPage,
    ProductUpdate,
    missing_fields,
    product_path,
)
from ..security.api_key import require_api_key
from ..services.page_cache import PageCache, get_page_cache
from ..services.revalidation import Invalidator, dispatch_invalidation, get_invalidator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])


async def _read_json_object(request: Request) -> dict[str, Any]:
    """Parse the request body as a JSON object"""
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")

    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    return body


@router.get("", response_model=list[Product])
def list_products(
    query: Optional[str] = Query(None, description="Text to match in name or description"),
    category: Optional[str] = Query(None, description="Filter by category"),
    db: ProductDatabase = Depends(get_product_db),
):
    """
    List the catalog.

    Without filters every product is returned in file order.
    """
    try:
        return db.search(query=query, category=category)
    except CatalogError as e:
        logger.error(f"Error listing products: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch products")


@router.get("/categories", response_model=list[str])
def list_categories(db: ProductDatabase = Depends(get_product_db)):
    """List the categories present in the catalog"""
    try:
        return db.categories()
    except CatalogError as e:
        logger.error(f"Error listing categories: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")


@router.get("/stats", response_model=InventoryStats)
def inventory_stats(db: ProductDatabase = Depends(get_product_db)):
    """Inventory totals with low-stock and out-of-stock products"""
    try:
        return db.inventory_stats()
    except CatalogError as e:
        logger.error(f"Error computing inventory stats: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch inventory stats")


@router.get("/{slug}", response_model=ProductPage)
def get_product_page(
    slug: str,
    db: ProductDatabase = Depends(get_product_db),
    page_cache: PageCache = Depends(get_page_cache),
):
    """
    Product detail page.

    Served from the page cache; the page is regenerated once it expires
    or after it has been invalidated.
    """

    def render() -> Optional[ProductPage]:
        product = db.get_by_slug(slug)
        if not product:
            return None
        return ProductPage(
            product=product,
            stock_status=product.stock_status,
            generated_at=datetime.now(timezone.utc),
        )

    try:
        page = page_cache.get_or_render(product_path(slug), render)
    except CatalogError as e:
        logger.error(f"Error rendering product {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch product")

    if page is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return page


@router.post("", response_model=Product, status_code=201)
async def create_product(
    request: Request,
    background_tasks: BackgroundTasks,
    api_key: str = Depends(require_api_key),
    db: ProductDatabase = Depends(get_product_db),
    invalidator: Invalidator = Depends(get_invalidator),
):
    """
    Add a product (protected).

    The new product's page is invalidated after the response is sent.
    """
    body = await _read_json_object(request)

    missing = missing_fields(body)
    if missing:
        logger.info(f"Create rejected, missing fields: {missing}")
        raise HTTPException(status_code=400, detail="Missing required fields")

    try:
        fields = ProductCreate.model_validate({**body, "image": body.get("image") or None})
    except ValidationError as e:
        logger.info(f"Create rejected, invalid fields: {e.error_count()} error(s)")
        raise HTTPException(status_code=400, detail="Invalid product fields")

    try:
        product = await run_in_threadpool(db.insert, fields)
    except CatalogError as e:
        logger.error(f"Error creating product: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create product")

    background_tasks.add_task(
        dispatch_invalidation, invalidator, product_path(product.slug), api_key
    )
    return product


@router.put("/update/{product_id}", response_model=Product)
async def update_product(
    product_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    api_key: str = Depends(require_api_key),
    db: ProductDatabase = Depends(get_product_db),
    invalidator: Invalidator = Depends(get_invalidator),
):
    """
    Update an existing product (protected).

    Only supplied fields change. The product's page is invalidated after
    the response is sent, and so is its old page when the slug changed.
    """
    body = await _read_json_object(request)

    try:
        existing = await run_in_threadpool(db.get_by_id, product_id)
    except CatalogError as e:
        logger.error(f"Error loading product {product_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update product")

    if not existing:
        logger.warning(f"Product {product_id} not found for update")
        raise HTTPException(status_code=404, detail="Product not found")

    try:
        changes = ProductUpdate.model_validate(body).changes()
    except ValidationError as e:
        logger.info(f"Update of {product_id} rejected: {e.error_count()} invalid field(s)")
        raise HTTPException(status_code=400, detail="Invalid product fields")

    try:
        product = await run_in_threadpool(db.update, product_id, changes)
    except CatalogError as e:
        logger.error(f"Error updating product {product_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update product")

    if product is None:
        # Removed between the lookup and the write
        logger.error(f"Product {product_id} disappeared during update")
        raise HTTPException(status_code=500, detail="Failed to update product")

    background_tasks.add_task(
        dispatch_invalidation, invalidator, product_path(product.slug), api_key
    )
    if existing.slug != product.slug:
        background_tasks.add_task(
            dispatch_invalidation, invalidator, product_path(existing.slug), api_key
        )
    return product
