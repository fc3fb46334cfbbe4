"""
Order Module - Admin API Routes
=================================
Order listing and status transitions driven by the payment gateway webhook,
the fulfillment system, or an operator.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from config.database import get_db
from common.exceptions import StorefrontError, raise_http
from modules.auth.deps import require_admin
from modules.order.service import order_service

router = APIRouter(prefix="/admin/api/orders", tags=["orders-admin"])


class PaymentRequest(BaseModel):
    payment_ref: Optional[str] = Field(None, max_length=100)


class CancelRequest(BaseModel):
    reason: Optional[str] = Field("", max_length=500)


@router.get("")
def admin_orders_list(
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    return {"orders": [o.to_dict() for o in order_service.get_all_orders(db, status=status)]}


@router.post("/{order_id}/pay")
def admin_mark_paid(
    order_id: int,
    body: Optional[PaymentRequest] = None,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    try:
        order = order_service.mark_paid(db, order_id, payment_ref=body.payment_ref if body else None)
    except StorefrontError as e:
        db.rollback()
        raise_http(e)
    db.commit()
    return order.to_dict()


@router.post("/{order_id}/fulfill")
def admin_mark_fulfilled(order_id: int, db: Session = Depends(get_db), admin=Depends(require_admin)):
    try:
        order = order_service.mark_fulfilled(db, order_id)
    except StorefrontError as e:
        db.rollback()
        raise_http(e)
    db.commit()
    return order.to_dict()


@router.post("/{order_id}/cancel")
def admin_cancel(
    order_id: int,
    body: Optional[CancelRequest] = None,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    try:
        order = order_service.cancel_order(db, order_id, reason=body.reason if body else "")
    except StorefrontError as e:
        db.rollback()
        raise_http(e)
    db.commit()
    return order.to_dict()
