"""Product models for the catalog"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

LOW_STOCK_THRESHOLD = 20

# Fields a create request must carry
REQUIRED_FIELDS = ("name", "slug", "description", "price", "category", "inventory")
# Presence for these means "not null", so zero is accepted
NUMERIC_FIELDS = ("price", "inventory")
# Taken by the aggregate routes under /products
RESERVED_SLUGS = ("categories", "stats")


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class StockStatus(str, Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class Product(CamelModel):
    """Product in the catalog"""
    id: str
    name: str
    slug: str
    description: str
    price: float = Field(ge=0, allow_inf_nan=False)
    category: str
    inventory: int = Field(ge=0)
    image: Optional[str] = None
    last_updated: datetime

    @property
    def is_out_of_stock(self) -> bool:
        return self.inventory == 0

    @property
    def is_low_stock(self) -> bool:
        return self.inventory < LOW_STOCK_THRESHOLD

    @property
    def stock_status(self) -> StockStatus:
        if self.is_out_of_stock:
            return StockStatus.OUT_OF_STOCK
        if self.is_low_stock:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK


class ProductCreate(CamelModel):
    """Fields accepted when creating a product"""
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    description: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)
    category: str = Field(min_length=1)
    inventory: int = Field(ge=0)
    image: Optional[str] = None

    @field_validator("slug")
    @classmethod
    def slug_not_reserved(cls, slug: str) -> str:
        return _check_slug(slug)


class ProductUpdate(CamelModel):
    """Partial product update; unknown keys, id and lastUpdated are ignored"""
    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    category: Optional[str] = Field(None, min_length=1)
    inventory: Optional[int] = Field(None, ge=0)
    image: Optional[str] = None

    @field_validator("slug")
    @classmethod
    def slug_not_reserved(cls, slug: Optional[str]) -> Optional[str]:
        return slug if slug is None else _check_slug(slug)

    def changes(self) -> dict[str, Any]:
        """Fields supplied by the caller. Only image may be cleared with null."""
        return {
            field: value
            for field, value in self.model_dump(exclude_unset=True).items()
            if value is not None or field == "image"
        }


class ProductPage(CamelModel):
    """Rendered product detail page"""
    product: Product
    stock_status: StockStatus
    generated_at: datetime


class InventoryStats(CamelModel):
    """Catalog inventory summary"""
    total_products: int
    low_stock_items: list[Product]
    out_of_stock_items: list[Product]
    total_inventory: int
    total_value: float


def missing_fields(payload: dict[str, Any]) -> list[str]:
    """Return the required fields absent from a create payload"""
    missing = []
    for field in REQUIRED_FIELDS:
        value = payload.get(field)
        if field in NUMERIC_FIELDS:
            if value is None:
                missing.append(field)
        elif not value:
            missing.append(field)
    return missing


def product_path(slug: str) -> str:
    """Public page path for a product"""
    return f"/products/{slug}"


def _check_slug(slug: str) -> str:
    if slug in RESERVED_SLUGS:
        raise ValueError(f"slug '{slug}' is reserved")
    return slug
