"""Cart models for the storefront"""

from pydantic import BaseModel, Field
from datetime import datetime

from .product import Product


class CartLine(BaseModel):
    """Product snapshot and quantity held in a cart"""
    product: Product
    quantity: int = Field(ge=1)

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def line_total(self) -> float:
        return self.product.price * self.quantity


class CartTotals(BaseModel):
    """Derived cart totals"""
    item_count: int = 0
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0


class CustomerDetails(BaseModel):
    """Contact details collected at checkout"""
    name: str
    email: str
    phone: str
    address: str


class Receipt(BaseModel):
    """Checkout summary; never persisted"""
    order_number: str
    created_at: datetime
    customer: CustomerDetails
    items: list[CartLine]
    subtotal: float
    tax: float
    total: float
