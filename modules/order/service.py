"""
Order Module - Service Layer
===============================
Checkout (cart -> order commit), status transitions, expiration cleanup.
"""

import logging
import time
from datetime import timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import desc, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config.settings import (
    ORDER_COMMIT_MAX_ATTEMPTS, ORDER_COMMIT_RETRY_BACKOFF,
    ORDER_COMMIT_TIMEOUT_SECONDS, ORDER_PENDING_EXPIRE_MINUTES,
)
from common.exceptions import (
    CommitError, EmptyCartError, TransactionFailedError,
    OrderNotFoundError, InvalidTransitionError,
)
from common.helpers import CENT, now_utc, to_money
from modules.cart.models import Cart
from modules.catalog.service import catalog_service
from modules.order.models import (
    Order, OrderItem, OrderStatus, OrderStatusLog, ORDER_TRANSITIONS,
)

logger = logging.getLogger("storefront.order")


class OrderService:

    # ==========================================
    # Checkout
    # ==========================================

    def checkout(self, db: Session, cart: Cart, user_id: int) -> Order:
        """
        Turn the cart into a committed Pending order:
        1. Reject an empty cart
        2. Reserve stock per product (conditional decrement, ascending id)
        3. Snapshot live catalog name + price into order items
        4. Commit order, items and stock decrements in one transaction

        Any failure rolls the whole attempt back and raises a CommitError;
        stock is left exactly as it was. TransactionFailedError is retried
        up to ORDER_COMMIT_MAX_ATTEMPTS times when it came from the database,
        since each attempt re-checks stock from scratch.

        Commits (or rolls back) `db`. The cart itself is not modified.
        """
        if cart.is_empty:
            raise EmptyCartError()

        # Frozen copy so a concurrent cart edit can't change a retry
        lines = sorted(((it.product_id, it.quantity) for it in cart.items), key=lambda line: line[0])

        attempts = max(1, ORDER_COMMIT_MAX_ATTEMPTS)
        for attempt in range(1, attempts + 1):
            try:
                return self._commit_once(db, lines, user_id)
            except TransactionFailedError as e:
                # Only database faults are transient
                if attempt >= attempts or not isinstance(e.__cause__, SQLAlchemyError):
                    logger.error(f"[user={user_id}] checkout failed after {attempt} attempts: {e.message}")
                    raise
                logger.warning(f"[user={user_id}] checkout attempt {attempt} failed, retrying: {e.message}")
                time.sleep(ORDER_COMMIT_RETRY_BACKOFF * attempt)

    def _commit_once(self, db: Session, lines: List[tuple], user_id: int) -> Order:
        try:
            self._apply_statement_timeout(db)

            order_items = []
            for product_id, quantity in lines:
                catalog_service.try_reserve_stock(db, product_id, quantity)
                product = catalog_service.get_product(db, product_id)
                order_items.append(build_order_item(product, quantity))

            new_order = Order(
                user_id=user_id,
                status=OrderStatus.PENDING.value,
                total_amount=sum((oi.line_total for oi in order_items), Decimal("0")).quantize(CENT),
            )
            new_order.items = order_items
            new_order.status_logs.append(OrderStatusLog(from_status=None, to_status=OrderStatus.PENDING.value, note="checkout"))
            db.add(new_order)
            db.commit()
        except CommitError as e:
            db.rollback()
            logger.warning(f"[user={user_id}] checkout rejected: {e.kind} product={e.product_id}")
            raise
        except SQLAlchemyError as e:
            db.rollback()
            raise TransactionFailedError(e.__class__.__name__) from e
        except Exception as e:
            db.rollback()
            logger.exception(f"[user={user_id}] checkout aborted by unexpected error")
            raise TransactionFailedError(e.__class__.__name__) from e

        logger.info(
            f"[order={new_order.id}] committed user={user_id} items={len(lines)} total={new_order.total_amount}"
        )
        return new_order

    def _apply_statement_timeout(self, db: Session):
        """Bound each commit attempt on PostgreSQL; a timeout surfaces as TransactionFailed."""
        if db.get_bind().dialect.name == "postgresql":
            ms = int(ORDER_COMMIT_TIMEOUT_SECONDS * 1000)
            db.execute(text(f"SET LOCAL statement_timeout = {ms}"))

    # ==========================================
    # Status transitions
    # ==========================================

    def mark_paid(self, db: Session, order_id: int, payment_ref: Optional[str] = None) -> Order:
        """Called by the payment collaborator after successful capture."""
        order = self._transition(db, order_id, OrderStatus.PAID, note=payment_ref)
        order.payment_ref = payment_ref
        order.paid_at = now_utc()
        db.flush()
        return order

    def mark_fulfilled(self, db: Session, order_id: int) -> Order:
        order = self._transition(db, order_id, OrderStatus.FULFILLED)
        order.fulfilled_at = now_utc()
        db.flush()
        return order

    def cancel_order(
        self,
        db: Session,
        order_id: int,
        reason: str = "",
        user_id: Optional[int] = None,
    ) -> Order:
        """
        Cancel an order. Order items are kept for audit and stock is not
        returned; restocking goes through catalog_service.restock.

        With `user_id` (customer request) only the owner's Pending orders
        can be cancelled; paid orders need an operator refund.
        """
        if user_id is not None:
            order = self.get_order(db, order_id, user_id=user_id)
            if order.status != OrderStatus.PENDING.value:
                raise InvalidTransitionError(order_id, order.status, OrderStatus.CANCELLED.value)

        order = self._transition(db, order_id, OrderStatus.CANCELLED, note=reason or None)
        order.cancellation_reason = reason or None
        order.cancelled_at = now_utc()
        db.flush()
        return order

    def _transition(self, db: Session, order_id: int, to_status: OrderStatus, note: Optional[str] = None) -> Order:
        order = db.query(Order).filter(Order.id == order_id).with_for_update().first()
        if not order:
            raise OrderNotFoundError(order_id)

        current = OrderStatus(order.status)
        if to_status not in ORDER_TRANSITIONS[current]:
            raise InvalidTransitionError(order_id, current.value, to_status.value)

        order.status = to_status.value
        db.add(OrderStatusLog(order_id=order.id, from_status=current.value, to_status=to_status.value, note=note))
        db.flush()
        logger.info(f"[order={order_id}] {current.value} -> {to_status.value}")
        return order

    # ==========================================
    # Expiration Cleanup
    # ==========================================

    def cancel_expired_orders(self, db: Session, expire_minutes: Optional[int] = None) -> int:
        """Cancel all Pending orders older than the expiry window. Returns count."""
        minutes = ORDER_PENDING_EXPIRE_MINUTES if expire_minutes is None else expire_minutes
        limit_time = now_utc() - timedelta(minutes=minutes)

        expired_ids = [
            row.id for row in db.query(Order.id).filter(
                Order.status == OrderStatus.PENDING.value,
                Order.created_at < limit_time,
            ).all()
        ]

        count = 0
        for order_id in expired_ids:
            try:
                self.cancel_order(db, order_id, reason=f"Not paid within {minutes} minutes")
                count += 1
            except InvalidTransitionError:
                # Paid between the scan and the lock
                continue

        if count:
            db.commit()
            logger.info(f"Cancelled {count} expired orders")

        return count

    # ==========================================
    # Query
    # ==========================================

    def get_order(self, db: Session, order_id: int, user_id: Optional[int] = None) -> Order:
        """Fetch an order; with `user_id` other users' orders read as not found."""
        q = db.query(Order).filter(Order.id == order_id)
        if user_id is not None:
            q = q.filter(Order.user_id == user_id)
        order = q.first()
        if not order:
            raise OrderNotFoundError(order_id)
        return order

    def get_user_orders(self, db: Session, user_id: int) -> List[Order]:
        return db.query(Order).filter(
            Order.user_id == user_id,
        ).order_by(desc(Order.id)).all()

    def get_all_orders(self, db: Session, status: str = None) -> List[Order]:
        q = db.query(Order).order_by(desc(Order.id))
        if status:
            q = q.filter(Order.status == status)
        return q.all()


def build_order_item(product, quantity: int) -> OrderItem:
    """Create an OrderItem with name and price snapshot from the catalog row."""
    unit_price = to_money(product.price)
    return OrderItem(
        product_id=product.id,
        product_name=product.name,
        quantity=quantity,
        unit_price=unit_price,
        line_total=(unit_price * quantity).quantize(CENT),
    )


# Singleton
order_service = OrderService()
