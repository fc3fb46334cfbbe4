"""
Catalog Module - Service Layer
================================
Product lookup, management, and the atomic stock reservation used by checkout.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from common.exceptions import (
    ProductNotFoundError, ProductUnavailableError, InsufficientStockError,
)
from common.helpers import to_money
from modules.catalog.models import Product

logger = logging.getLogger("storefront.catalog")


class CatalogService:

    # ==========================================
    # Query
    # ==========================================

    def get_product(self, db: Session, product_id: int) -> Product:
        """Return the product or raise ProductNotFoundError. Includes deactivated products."""
        product = db.query(Product).filter(Product.id == product_id).populate_existing().first()
        if not product:
            raise ProductNotFoundError(product_id)
        return product

    def get_active_product(self, db: Session, product_id: int) -> Product:
        """Return a sellable product or raise ProductUnavailableError."""
        product = db.query(Product).filter(Product.id == product_id).first()
        if not product or not product.is_active:
            raise ProductUnavailableError(product_id)
        return product

    def list_products(self, db: Session, active_only: bool = True) -> List[Product]:
        q = db.query(Product).order_by(Product.id)
        if active_only:
            q = q.filter(Product.is_active == True)  # noqa: E712
        return q.all()

    def get_stock(self, db: Session, product_id: int) -> int:
        """Read stock straight from the database (bypasses the identity map)."""
        stock = db.query(Product.stock).filter(Product.id == product_id).scalar()
        if stock is None:
            raise ProductNotFoundError(product_id)
        return stock

    # ==========================================
    # Reservation
    # ==========================================

    def try_reserve_stock(self, db: Session, product_id: int, quantity: int) -> int:
        """
        Atomically decrement stock by `quantity` if enough is available.

        Single conditional UPDATE (stock >= quantity), so two callers racing
        for the same units cannot both succeed. The decrement joins the
        caller's transaction; rolling it back releases the reservation.

        Returns remaining stock. Raises InsufficientStockError or
        ProductUnavailableError.
        """
        if quantity < 1:
            raise ValueError("quantity must be >= 1")

        updated = (
            db.query(Product)
            .filter(
                Product.id == product_id,
                Product.is_active == True,  # noqa: E712
                Product.stock >= quantity,
            )
            .update({Product.stock: Product.stock - quantity}, synchronize_session=False)
        )

        if updated != 1:
            row = db.query(Product.stock, Product.is_active).filter(Product.id == product_id).first()
            if row is None or not row.is_active:
                raise ProductUnavailableError(product_id)
            raise InsufficientStockError(product_id, requested=quantity, available=row.stock)

        remaining = self.get_stock(db, product_id)
        logger.debug(f"Reserved product={product_id} qty={quantity} (remaining={remaining})")
        return remaining

    # ==========================================
    # Management
    # ==========================================

    def create_product(self, db: Session, name: str, price, stock: int = 0) -> Product:
        price = to_money(price)
        if price < 0:
            raise ValueError("price must be >= 0")
        if stock < 0:
            raise ValueError("stock must be >= 0")
        product = Product(name=name.strip(), price=price, stock=stock, is_active=True)
        db.add(product)
        db.flush()
        logger.info(f"Created product {product.id} '{product.name}' price={price} stock={stock}")
        return product

    def update_product(
        self,
        db: Session,
        product_id: int,
        name: Optional[str] = None,
        price: Optional[Decimal] = None,
    ) -> Product:
        """Edit name/price. Committed order items keep their own price snapshot."""
        product = self.get_product(db, product_id)
        if name is not None:
            product.name = name.strip()
        if price is not None:
            price = to_money(price)
            if price < 0:
                raise ValueError("price must be >= 0")
            product.price = price
        db.flush()
        return product

    def restock(self, db: Session, product_id: int, quantity: int) -> int:
        """Add units to stock. Returns the new stock count."""
        if quantity < 1:
            raise ValueError("quantity must be >= 1")
        updated = (
            db.query(Product)
            .filter(Product.id == product_id)
            .update({Product.stock: Product.stock + quantity}, synchronize_session=False)
        )
        if updated != 1:
            raise ProductNotFoundError(product_id)
        stock = self.get_stock(db, product_id)
        logger.info(f"Restocked product={product_id} qty={quantity} (stock={stock})")
        return stock

    def deactivate_product(self, db: Session, product_id: int) -> Product:
        """Soft delete: hides the product from sale, keeps it for order history."""
        product = self.get_product(db, product_id)
        product.is_active = False
        db.flush()
        logger.info(f"Deactivated product {product_id}")
        return product

    def reactivate_product(self, db: Session, product_id: int) -> Product:
        product = self.get_product(db, product_id)
        product.is_active = True
        db.flush()
        return product


# Singleton
catalog_service = CatalogService()
