"""
Shopping cart

Client-held cart for one shopping session. Lines keep a snapshot of the
product taken when it was added; the cart never reads or writes the
catalog.
"""

import time
from datetime import datetime, timezone
from typing import Optional

from .models.cart import CartLine, CartTotals, CustomerDetails, Receipt
from .models.product import Product


class EmptyCartError(Exception):
    """Checkout was attempted with no items"""


class ShoppingCart:
    """In-memory cart of product lines"""

    TAX_RATE = 0.10  # 10% tax

    def __init__(self):
        self.lines: list[CartLine] = []

    def __len__(self) -> int:
        return len(self.lines)

    def get_line(self, product_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.product_id == product_id), None)

    def add(self, product: Product) -> Optional[CartLine]:
        """
        Add one unit of a product.

        Increments the existing line for the product, never beyond its
        inventory. Out-of-stock products are not added.

        Returns:
            The product's line, or None if nothing could be added
        """
        line = self.get_line(product.id)

        if line:
            if line.quantity < line.product.inventory:
                line.quantity += 1
            return line

        if product.inventory < 1:
            return None

        line = CartLine(product=product.model_copy(), quantity=1)
        self.lines.append(line)
        return line

    def remove(self, product_id: str) -> bool:
        """Remove a product's line"""
        remaining = [line for line in self.lines if line.product_id != product_id]
        removed = len(remaining) != len(self.lines)
        self.lines = remaining
        return removed

    def set_quantity(self, product_id: str, quantity: int) -> Optional[CartLine]:
        """
        Set a line's quantity, clamped to the product's inventory.

        Quantities below one are ignored; use remove() to drop a line.
        """
        line = self.get_line(product_id)
        if not line or quantity < 1:
            return line

        line.quantity = min(quantity, line.product.inventory)
        return line

    def clear(self) -> None:
        self.lines = []

    def compute_totals(self) -> CartTotals:
        """Subtotal, tax and total, rounded to cents"""
        subtotal = round(sum(line.line_total for line in self.lines), 2)
        tax = round(subtotal * self.TAX_RATE, 2)
        return CartTotals(
            item_count=sum(line.quantity for line in self.lines),
            subtotal=subtotal,
            tax=tax,
            total=round(subtotal + tax, 2),
        )

    def checkout(self, customer: CustomerDetails) -> Receipt:
        """Summarize the cart as a receipt and empty it"""
        if not self.lines:
            raise EmptyCartError("Cart is empty")

        totals = self.compute_totals()
        receipt = Receipt(
            order_number=f"CC-{int(time.time() * 1000)}",
            created_at=datetime.now(timezone.utc),
            customer=customer,
            items=[line.model_copy() for line in self.lines],
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
        )

        self.clear()
        return receipt
