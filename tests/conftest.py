"""Shared fixtures: a temporary catalog file and an app wired to it."""

import json
import logging
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from cartcraft.database.products import ProductDatabase, get_product_db
from cartcraft.main import app
from cartcraft.security.api_key import SharedSecretVerifier, get_verifier
from cartcraft.services.page_cache import PageCache, get_page_cache
from cartcraft.services.revalidation import LocalInvalidator, get_invalidator

logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

API_KEY = "test-admin-key"

SEED_PRODUCTS = [
    {
        "id": "1",
        "name": "Wireless Headphones",
        "slug": "wireless-headphones",
        "description": "Noise cancelling over-ear headphones.",
        "price": 199.99,
        "category": "Electronics",
        "inventory": 45,
        "image": "https://example.com/headphones.jpg",
        "lastUpdated": "2025-01-15T10:30:00Z",
    },
    {
        "id": "2",
        "name": "Smart Watch",
        "slug": "smart-watch",
        "description": "Fitness tracking on your wrist.",
        "price": 299.99,
        "category": "Electronics",
        "inventory": 12,
        "lastUpdated": "2025-01-15T10:30:00Z",
    },
    {
        "id": "7",
        "name": "Leather Backpack",
        "slug": "leather-backpack",
        "description": "Full-grain leather with a laptop sleeve.",
        "price": 149.5,
        "category": "Accessories",
        "inventory": 0,
        "lastUpdated": "2025-01-15T10:30:00Z",
    },
]


class RecordingInvalidator(LocalInvalidator):
    """Local invalidator that remembers every call"""

    def __init__(self, page_cache: PageCache):
        super().__init__(page_cache)
        self.calls: list[tuple[str, Optional[str]]] = []

    async def invalidate(self, path: str, credential: Optional[str] = None) -> None:
        self.calls.append((path, credential))
        await super().invalidate(path, credential)


class FailingInvalidator:
    """Invalidator whose cache layer is unavailable"""

    def __init__(self):
        self.attempts = 0

    async def invalidate(self, path: str, credential: Optional[str] = None) -> None:
        self.attempts += 1
        raise RuntimeError("page cache unavailable")

    async def close(self) -> None:
        pass


@pytest.fixture
def data_file(tmp_path):
    """Catalog file seeded with SEED_PRODUCTS"""
    path = tmp_path / "products.json"
    path.write_text(json.dumps(SEED_PRODUCTS, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def product_db(data_file):
    return ProductDatabase(str(data_file))


@pytest.fixture
def page_cache():
    return PageCache(revalidate_seconds=60)


@pytest.fixture
def invalidator(page_cache):
    return RecordingInvalidator(page_cache)


@pytest.fixture
def client(product_db, page_cache, invalidator):
    """
    TestClient with the catalog, page cache, invalidator and API key
    replaced by test instances.
    """
    app.dependency_overrides[get_product_db] = lambda: product_db
    app.dependency_overrides[get_page_cache] = lambda: page_cache
    app.dependency_overrides[get_invalidator] = lambda: invalidator
    app.dependency_overrides[get_verifier] = lambda: SharedSecretVerifier(API_KEY)

    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"x-api-key": API_KEY}


@pytest.fixture
def new_product():
    """Valid create payload"""
    return {
        "name": "Ceramic Pour-Over Set",
        "slug": "ceramic-pour-over-set",
        "description": "Hand-glazed dripper and carafe.",
        "price": 42.0,
        "category": "Home",
        "inventory": 30,
    }
