"""Tests for the in-memory cart aggregate and cart service."""
import random
from decimal import Decimal

import pytest

from common.exceptions import ProductUnavailableError
from config.settings import CART_MAX_LINE_QUANTITY
from modules.cart.models import Cart
from modules.cart.service import cart_service
from modules.catalog.service import catalog_service


def _recomputed(cart: Cart) -> Decimal:
    return sum((it.unit_price * it.quantity for it in cart.items), Decimal("0")).quantize(Decimal("0.01"))


def test_add_item_merges_same_product():
    cart = Cart()
    cart.add_item(1, 2, Decimal("10.00"))
    cart.add_item(1, 3, Decimal("10.00"))

    assert len(cart.items) == 1
    assert cart.get(1).quantity == 5
    assert cart.total() == Decimal("50.00")


def test_readd_keeps_first_captured_price():
    cart = Cart()
    cart.add_item(1, 1, Decimal("10.00"))
    cart.add_item(1, 1, Decimal("12.00"))

    assert cart.get(1).unit_price == Decimal("10.00")
    assert cart.total() == Decimal("20.00")


@pytest.mark.parametrize("qty", [0, -3])
def test_add_item_clamps_quantity_to_one(qty):
    cart = Cart()
    cart.add_item(7, qty, Decimal("4.00"))

    assert cart.get(7).quantity == 1


def test_line_quantity_is_capped():
    cart = Cart()
    cart.add_item(1, 10**20, Decimal("1.00"))
    assert cart.get(1).quantity == CART_MAX_LINE_QUANTITY

    cart.add_item(2, CART_MAX_LINE_QUANTITY - 1, Decimal("1.00"))
    cart.add_item(2, 5, Decimal("1.00"))
    assert cart.get(2).quantity == CART_MAX_LINE_QUANTITY

    cart.set_quantity(2, 10**9)
    assert cart.get(2).quantity == CART_MAX_LINE_QUANTITY


@pytest.mark.parametrize("qty", [0, -1])
def test_set_quantity_below_one_removes_item(qty):
    cart = Cart()
    cart.add_item(1, 2, Decimal("3.00"))
    cart.add_item(2, 1, Decimal("1.00"))

    assert cart.set_quantity(1, qty) is None
    assert cart.get(1) is None
    assert cart.total() == Decimal("1.00")


def test_set_quantity_and_remove_unknown_product_are_noops():
    cart = Cart()
    cart.add_item(1, 1, Decimal("3.00"))

    assert cart.set_quantity(99, 4) is None
    cart.remove_item(99)

    assert [it.product_id for it in cart.items] == [1]


def test_clear_empties_cart():
    cart = Cart()
    cart.add_item(1, 1, Decimal("3.00"))
    cart.clear()

    assert cart.is_empty
    assert cart.total() == Decimal("0.00")
    assert cart.item_count == 0


def test_total_matches_recomputation_over_random_edits():
    rng = random.Random(1234)
    cart = Cart()
    prices = {pid: Decimal(rng.randint(1, 5000)) / 100 for pid in range(1, 8)}

    for _ in range(500):
        pid = rng.randint(1, 7)
        op = rng.choice(["add", "set", "remove"])
        if op == "add":
            cart.add_item(pid, rng.randint(-1, 4), prices[pid])
        elif op == "set":
            cart.set_quantity(pid, rng.randint(-2, 6))
        else:
            cart.remove_item(pid)

        assert cart.total() == _recomputed(cart)
        assert all(it.quantity >= 1 for it in cart.items)


def test_to_dict_shape():
    cart = Cart(owner_id=1)
    cart.add_item(3, 2, Decimal("1.25"))

    data = cart.to_dict()
    assert data["total"] == "2.50"
    assert data["itemCount"] == 2
    assert data["items"] == [{"productId": 3, "quantity": 2, "unitPrice": "1.25", "lineTotal": "2.50"}]


# ==========================================
# CartService
# ==========================================

def test_service_captures_catalog_price(db, products):
    cart_service.add_item(db, 1, products["A"], 2)
    cart = cart_service.get_or_create_cart(1)

    assert cart.get(products["A"]).unit_price == Decimal("10.00")
    assert cart.total() == Decimal("20.00")


def test_service_does_not_check_stock_on_add(db, products):
    item = cart_service.add_item(db, 1, products["B"], 50)

    assert item.quantity == 50


def test_service_rejects_unknown_and_inactive_products(db, products):
    with pytest.raises(ProductUnavailableError):
        cart_service.add_item(db, 1, 9999, 1)

    catalog_service.deactivate_product(db, products["C"])
    db.commit()
    with pytest.raises(ProductUnavailableError):
        cart_service.add_item(db, 1, products["C"], 1)


def test_carts_are_per_user(db, products):
    cart_service.add_item(db, 1, products["A"], 1)
    cart_service.add_item(db, 2, products["C"], 4)
    cart_service.clear_cart(1)

    assert cart_service.get_or_create_cart(1).is_empty
    assert cart_service.get_or_create_cart(2).item_count == 4
