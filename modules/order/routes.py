"""
Order Module - Customer Routes
================================
Order history, order detail, and customer cancellation of pending orders.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from config.database import get_db
from common.exceptions import StorefrontError, raise_http
from modules.auth.deps import require_user
from modules.order.service import order_service

router = APIRouter(prefix="/api/orders", tags=["orders"])


class CancelRequest(BaseModel):
    reason: Optional[str] = Field("", max_length=500)


@router.get("")
def my_orders(db: Session = Depends(get_db), me=Depends(require_user)):
    return {"orders": [o.to_dict() for o in order_service.get_user_orders(db, me.id)]}


@router.get("/{order_id}")
def order_detail(order_id: int, db: Session = Depends(get_db), me=Depends(require_user)):
    try:
        order = order_service.get_order(db, order_id, user_id=me.id)
    except StorefrontError as e:
        raise_http(e)
    return order.to_dict()


@router.post("/{order_id}/cancel")
def cancel_my_order(
    order_id: int,
    body: Optional[CancelRequest] = None,
    db: Session = Depends(get_db),
    me=Depends(require_user),
):
    reason = body.reason if body else ""
    try:
        order = order_service.cancel_order(db, order_id, reason=reason, user_id=me.id)
    except StorefrontError as e:
        db.rollback()
        raise_http(e)
    db.commit()
    return order.to_dict()
