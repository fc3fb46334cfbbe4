"""Tests for catalog lookup, management and the stock reservation primitive."""
from decimal import Decimal

import pytest

from common.exceptions import (
    InsufficientStockError, ProductNotFoundError, ProductUnavailableError,
)
from modules.catalog.service import catalog_service


def test_get_product(db, products):
    product = catalog_service.get_product(db, products["A"])

    assert product.name == "Product A"
    assert product.price == Decimal("10.00")
    assert product.stock == 5


def test_get_product_not_found(db, products):
    with pytest.raises(ProductNotFoundError):
        catalog_service.get_product(db, 9999)


def test_reserve_decrements_and_returns_remaining(db, products, stock_of):
    remaining = catalog_service.try_reserve_stock(db, products["A"], 2)
    db.commit()

    assert remaining == 3
    assert stock_of(products["A"]) == 3


def test_reserve_exact_stock_reaches_zero(db, products):
    assert catalog_service.try_reserve_stock(db, products["B"], 1) == 0


def test_reserve_insufficient_leaves_stock(db, products, stock_of):
    with pytest.raises(InsufficientStockError) as exc:
        catalog_service.try_reserve_stock(db, products["A"], 6)
    db.rollback()

    assert exc.value.product_id == products["A"]
    assert exc.value.requested == 6
    assert exc.value.available == 5
    assert stock_of(products["A"]) == 5


def test_reserve_unknown_product(db, products):
    with pytest.raises(ProductUnavailableError) as exc:
        catalog_service.try_reserve_stock(db, 9999, 1)

    assert exc.value.to_dict() == {"kind": "ProductUnavailable", "productId": 9999}


def test_reserve_deactivated_product(db, products):
    catalog_service.deactivate_product(db, products["C"])
    db.commit()

    with pytest.raises(ProductUnavailableError):
        catalog_service.try_reserve_stock(db, products["C"], 1)


def test_reserve_rejects_non_positive_quantity(db, products):
    with pytest.raises(ValueError):
        catalog_service.try_reserve_stock(db, products["A"], 0)


def test_reservation_undone_by_rollback(db, products, stock_of):
    catalog_service.try_reserve_stock(db, products["A"], 4)
    db.rollback()

    assert stock_of(products["A"]) == 5


def test_restock_and_soft_delete(db, products):
    assert catalog_service.restock(db, products["B"], 4) == 5

    catalog_service.deactivate_product(db, products["B"])
    db.commit()

    active_ids = [p.id for p in catalog_service.list_products(db)]
    all_ids = [p.id for p in catalog_service.list_products(db, active_only=False)]
    assert products["B"] not in active_ids
    assert products["B"] in all_ids
    # Still readable for order history
    assert catalog_service.get_product(db, products["B"]).is_active is False


def test_update_product_price(db, products):
    product = catalog_service.update_product(db, products["A"], price="12.345")
    db.commit()

    assert product.price == Decimal("12.35")


def test_create_product_validates(db):
    with pytest.raises(ValueError):
        catalog_service.create_product(db, "Bad", "-1.00", 1)
    with pytest.raises(ValueError):
        catalog_service.create_product(db, "Bad", "1.00", -1)
