"""Pytest fixtures: throwaway SQLite database per test, seeded catalog."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

import pytest  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from config.database import Base, build_engine  # noqa: E402
from modules.catalog.models import Product  # noqa: E402,F401
from modules.catalog.service import catalog_service  # noqa: E402
from modules.cart.service import cart_service  # noqa: E402
from modules.order.models import Order, OrderItem, OrderStatusLog  # noqa: E402,F401


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'storefront_test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def products(db) -> dict:
    """
    A: 10.00, stock 5
    B:  5.00, stock 1
    C:  2.50, stock 10

    Ids are captured before commit so the session holds no open transaction
    (SQLite transactions take the write lock).
    """
    a = catalog_service.create_product(db, "Product A", "10.00", 5)
    b = catalog_service.create_product(db, "Product B", "5.00", 1)
    c = catalog_service.create_product(db, "Product C", "2.50", 10)
    ids = {"A": a.id, "B": b.id, "C": c.id}
    db.commit()
    return ids


@pytest.fixture(autouse=True)
def reset_carts():
    cart_service.reset()
    yield
    cart_service.reset()


@pytest.fixture
def stock_of(db):
    """
    Read committed stock through the test session, then end its transaction
    so the SQLite write lock is free for other sessions.
    """
    def _read(product_id: int) -> int:
        try:
            return catalog_service.get_stock(db, product_id)
        finally:
            db.commit()
    return _read
