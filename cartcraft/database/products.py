"""
Flat-file product catalog.

The catalog is one JSON array rewritten wholesale on every mutation.
Mutations hold the store lock across the read-modify-write, and writes
are moved into place with os.replace so concurrent readers always parse
a complete snapshot.
"""

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional

from pydantic import ValidationError

from ..core.config import get_settings
from ..models.product import InventoryStats, Product, ProductCreate

logger = logging.getLogger(__name__)

# Fields owned by the store; never taken from an update payload
PROTECTED_FIELDS = ("id", "last_updated", "lastUpdated")


class CatalogError(Exception):
    """Base error for catalog persistence failures"""


class CatalogReadError(CatalogError):
    """The catalog file could not be read or parsed"""


class CatalogWriteError(CatalogError):
    """The catalog file could not be written"""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _next_timestamp(previous: Optional[datetime] = None) -> datetime:
    """Current time, nudged past ``previous`` so stamps always advance"""
    now = _utcnow()
    if previous is None:
        return now
    if previous.tzinfo is None:
        previous = previous.replace(tzinfo=timezone.utc)
    return max(now, previous + timedelta(microseconds=1))


def _next_id(products: list[Product]) -> str:
    """One past the largest numeric id; non-numeric ids are skipped"""
    numeric_ids = [
        int(product.id)
        for product in products
        if product.id.isascii() and product.id.isdigit()
    ]
    return str(max(numeric_ids, default=0) + 1)


class ProductDatabase:
    """JSON-file product database"""

    def __init__(self, data_file: str):
        self.data_file = data_file
        self._lock = threading.RLock()

    def _load(self) -> list[Product]:
        """Parse the full catalog from disk"""
        if not os.path.exists(self.data_file):
            logger.info(f"Catalog file {self.data_file} not found, treating as empty")
            return []

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, ValueError) as e:
            raise CatalogReadError(f"Could not read catalog {self.data_file}: {e}") from e

        if not isinstance(records, list):
            raise CatalogReadError(f"Catalog {self.data_file} is not a list of products")

        try:
            return [Product.model_validate(record) for record in records]
        except ValidationError as e:
            raise CatalogReadError(f"Malformed product in {self.data_file}: {e}") from e

    def _save(self, products: list[Product]) -> None:
        """Write the full catalog atomically"""
        directory = os.path.dirname(os.path.abspath(self.data_file))
        payload = [
            product.model_dump(mode="json", by_alias=True, exclude_none=True)
            for product in products
        ]

        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=".products-",
                suffix=".json",
                delete=False,
            ) as f:
                tmp_path = f.name
                json.dump(payload, f, indent=2, allow_nan=False)
                f.write("\n")
            os.replace(tmp_path, self.data_file)
        except (OSError, ValueError) as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise CatalogWriteError(f"Could not write catalog {self.data_file}: {e}") from e

    # ==================== Reads ====================

    def list_all(self) -> list[Product]:
        """Get all products in file order"""
        return self._load()

    def get_by_slug(self, slug: str) -> Optional[Product]:
        """Get the first product with this slug"""
        return next((p for p in self._load() if p.slug == slug), None)

    def get_by_id(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return next((p for p in self._load() if p.id == product_id), None)

    def search(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
    ) -> list[Product]:
        """Filter products by text in name/description and by category"""
        results = self._load()

        if query:
            query_lower = query.lower()
            results = [
                p for p in results
                if query_lower in p.name.lower() or query_lower in p.description.lower()
            ]

        if category:
            results = [p for p in results if p.category == category]

        return results

    def categories(self) -> list[str]:
        """Distinct categories in file order"""
        return list(dict.fromkeys(p.category for p in self._load()))

    def inventory_stats(self) -> InventoryStats:
        products = self._load()
        return InventoryStats(
            total_products=len(products),
            low_stock_items=[p for p in products if p.is_low_stock],
            out_of_stock_items=[p for p in products if p.is_out_of_stock],
            total_inventory=sum(p.inventory for p in products),
            total_value=round(sum(p.price * p.inventory for p in products), 2),
        )

    # ==================== Writes ====================

    def insert(self, fields: ProductCreate) -> Product:
        """
        Create a product.

        Assigns the next id and stamps lastUpdated, then persists the
        whole catalog.
        """
        with self._lock:
            products = self._load()
            product = Product(
                **fields.model_dump(),
                id=_next_id(products),
                last_updated=_next_timestamp(),
            )
            products.append(product)
            self._save(products)

        logger.info(f"Inserted product {product.id} ({product.slug})")
        return product

    def update(self, product_id: str, changes: dict[str, Any]) -> Optional[Product]:
        """
        Shallow-merge ``changes`` over an existing product.

        Returns:
            The updated product, or None if no product has this id
        """
        changes = {k: v for k, v in changes.items() if k not in PROTECTED_FIELDS}

        with self._lock:
            products = self._load()
            index = next(
                (i for i, p in enumerate(products) if p.id == product_id),
                None,
            )
            if index is None:
                return None

            existing = products[index]
            merged = {**existing.model_dump(), **changes}
            merged["last_updated"] = _next_timestamp(existing.last_updated)
            product = Product.model_validate(merged)

            products[index] = product
            self._save(products)

        logger.info(f"Updated product {product_id}: {sorted(changes)}")
        return product


@lru_cache()
def get_product_db() -> ProductDatabase:
    """Get the catalog configured in settings"""
    return ProductDatabase(get_settings().data_file)
