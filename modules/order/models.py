"""
Order Module - Models
======================
Order with price snapshot per item for audit trail, plus status history.
"""

import enum
from sqlalchemy import (
    Column, Integer, String, Numeric, Text, ForeignKey, DateTime, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from config.database import Base


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"


# Allowed status changes; fulfilled and cancelled are terminal
ORDER_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.FULFILLED, OrderStatus.CANCELLED},
    OrderStatus.FULFILLED: set(),
    OrderStatus.CANCELLED: set(),
}


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    total_amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String, default=OrderStatus.PENDING.value, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Payment (set by the payment collaborator)
    payment_ref = Column(String, nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    fulfilled_at = Column(DateTime(timezone=True), nullable=True)

    # Cancellation
    cancellation_reason = Column(String, nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    items = relationship("OrderItem", back_populates="order", order_by="OrderItem.product_id")
    status_logs = relationship("OrderStatusLog", back_populates="order", order_by="OrderStatusLog.id")

    @property
    def items_total(self):
        """Sum of item snapshots; equals total_amount for every committed order."""
        return sum((oi.line_total for oi in self.items), 0)

    def to_dict(self) -> dict:
        return {
            "orderId": self.id,
            "userId": self.user_id,
            "status": self.status,
            "total": str(self.total_amount),
            "items": [oi.to_dict() for oi in self.items],
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="RESTRICT"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)

    # Snapshot at time of purchase
    product_name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    line_total = Column(Numeric(12, 2), nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_item_qty"),
    )

    def to_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "name": self.product_name,
            "quantity": self.quantity,
            "unitPrice": str(self.unit_price),
        }


class OrderStatusLog(Base):
    __tablename__ = "order_status_logs"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    from_status = Column(String, nullable=True)
    to_status = Column(String, nullable=False)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    order = relationship("Order", back_populates="status_logs")
