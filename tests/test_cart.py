"""Tests for the client-side shopping cart."""

from datetime import datetime, timezone

import pytest

from cartcraft.cart import EmptyCartError, ShoppingCart
from cartcraft.models.cart import CustomerDetails
from cartcraft.models.product import Product


def make_product(product_id="1", price=10.0, inventory=50, **overrides) -> Product:
    fields = {
        "id": product_id,
        "name": f"Product {product_id}",
        "slug": f"product-{product_id}",
        "description": "Test product",
        "price": price,
        "category": "Test",
        "inventory": inventory,
        "last_updated": datetime(2025, 1, 15, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return Product(**fields)


@pytest.fixture
def cart():
    return ShoppingCart()


@pytest.fixture
def customer():
    return CustomerDetails(
        name="Ada Lovelace",
        email="ada@example.com",
        phone="555-0100",
        address="12 Analytical Row",
    )


def test_add_same_product_increments_line(cart):
    product = make_product(inventory=5)

    cart.add(product)
    cart.add(product)

    assert len(cart) == 1
    assert cart.get_line("1").quantity == 2


def test_add_clamps_to_inventory(cart):
    product = make_product(inventory=2)
    for _ in range(4):
        cart.add(product)
    assert cart.get_line("1").quantity == 2


def test_add_out_of_stock_product(cart):
    product = make_product(inventory=0)

    assert cart.add(product) is None
    assert cart.add(product) is None

    assert len(cart) == 0
    assert cart.compute_totals().item_count == 0


def test_remove(cart):
    cart.add(make_product("1"))
    cart.add(make_product("2"))

    assert cart.remove("1") is True
    assert cart.remove("1") is False
    assert [line.product_id for line in cart.lines] == ["2"]


def test_set_quantity(cart):
    cart.add(make_product(inventory=10))

    cart.set_quantity("1", 4)
    assert cart.get_line("1").quantity == 4

    cart.set_quantity("1", 25)
    assert cart.get_line("1").quantity == 10


@pytest.mark.parametrize("quantity", [0, -1])
def test_set_quantity_below_one_is_ignored(cart, quantity):
    cart.add(make_product())
    cart.set_quantity("1", 3)

    cart.set_quantity("1", quantity)

    assert cart.get_line("1").quantity == 3


def test_set_quantity_unknown_product(cart):
    assert cart.set_quantity("missing", 2) is None


def test_clear(cart):
    cart.add(make_product("1"))
    cart.add(make_product("2"))
    cart.clear()
    assert len(cart) == 0


def test_totals(cart):
    first = make_product("1", price=10.00)
    second = make_product("2", price=5.00)
    cart.add(first)
    cart.add(first)
    cart.add(second)

    totals = cart.compute_totals()

    assert totals.item_count == 3
    assert totals.subtotal == 25.00
    assert totals.tax == 2.50
    assert totals.total == 27.50


def test_totals_round_to_cents(cart):
    cart.add(make_product("1", price=19.99))
    cart.set_quantity("1", 3)

    totals = cart.compute_totals()

    assert totals.subtotal == 59.97
    assert totals.tax == 6.0
    assert totals.total == 65.97


def test_empty_cart_totals(cart):
    totals = cart.compute_totals()
    assert (totals.subtotal, totals.tax, totals.total) == (0, 0, 0)


def test_line_keeps_product_snapshot(cart):
    product = make_product(price=10.0)
    cart.add(product)

    product.price = 99.0
    cart.add(make_product(price=50.0))

    assert cart.compute_totals().subtotal == 20.0


def test_checkout(cart, customer):
    cart.add(make_product("1", price=10.00))
    cart.add(make_product("1", price=10.00))
    cart.add(make_product("2", price=5.00))

    receipt = cart.checkout(customer)

    assert receipt.order_number.startswith("CC-")
    assert receipt.customer.email == "ada@example.com"
    assert [(line.product_id, line.quantity) for line in receipt.items] == [("1", 2), ("2", 1)]
    assert (receipt.subtotal, receipt.tax, receipt.total) == (25.0, 2.5, 27.5)
    assert len(cart) == 0


def test_checkout_empty_cart(cart, customer):
    with pytest.raises(EmptyCartError):
        cart.checkout(customer)
