"""
Storefront - Database Seeder
=============================
Creates tables and inserts demo products, then prints demo bearer tokens.

Usage:
    python scripts/seed.py          # Seed (skips products that already exist)
    python scripts/seed.py --reset  # Drop all tables and reseed
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.database import SessionLocal, Base, engine
from common.security import create_token
from modules.catalog.models import Product
from modules.catalog.service import catalog_service
from modules.order.models import Order, OrderItem, OrderStatusLog  # noqa: F401

DEMO_PRODUCTS = [
    ("Espresso Beans 1kg", "24.90", 40),
    ("Pour-over Kettle", "59.00", 12),
    ("Paper Filters (100)", "5.50", 200),
    ("Ceramic Dripper", "18.00", 1),
]


def seed(reset: bool = False):
    if reset:
        print("Dropping all tables...")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        existing = {name for (name,) in db.query(Product.name).all()}
        created = 0
        for name, price, stock in DEMO_PRODUCTS:
            if name in existing:
                continue
            catalog_service.create_product(db, name, price, stock)
            created += 1
        db.commit()
        print(f"Products created: {created} (skipped {len(DEMO_PRODUCTS) - created})")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    print("\nDemo tokens:")
    print(f"  customer (user 1): {create_token({'sub': '1'})}")
    print(f"  admin    (user 99): {create_token({'sub': '99', 'is_admin': True})}")


if __name__ == "__main__":
    seed(reset="--reset" in sys.argv)
