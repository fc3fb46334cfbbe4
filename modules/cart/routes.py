"""
Cart & Checkout Routes
========================
Cart view, item add/update/remove (JSON API), checkout.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from config.database import get_db
from config.settings import CART_MAX_LINE_QUANTITY
from common.exceptions import CommitError, StorefrontError, raise_http
from modules.auth.deps import require_user
from modules.cart.service import cart_service
from modules.order.service import order_service

router = APIRouter(prefix="/api", tags=["cart"])


# ==========================================
# Schemas
# ==========================================

class AddItemRequest(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, le=CART_MAX_LINE_QUANTITY)


class SetQuantityRequest(BaseModel):
    quantity: int = Field(..., le=CART_MAX_LINE_QUANTITY)


# ==========================================
# 🛒 Cart
# ==========================================

@router.get("/cart")
async def view_cart(me=Depends(require_user)):
    return cart_service.get_or_create_cart(me.id).to_dict()


@router.post("/cart/items")
def add_cart_item(body: AddItemRequest, db: Session = Depends(get_db), me=Depends(require_user)):
    try:
        cart_service.add_item(db, me.id, body.product_id, body.quantity)
    except StorefrontError as e:
        raise_http(e)
    return cart_service.get_or_create_cart(me.id).to_dict()


@router.patch("/cart/items/{product_id}")
async def set_cart_item_quantity(product_id: int, body: SetQuantityRequest, me=Depends(require_user)):
    cart_service.set_quantity(me.id, product_id, body.quantity)
    return cart_service.get_or_create_cart(me.id).to_dict()


@router.delete("/cart/items/{product_id}")
async def remove_cart_item(product_id: int, me=Depends(require_user)):
    cart_service.remove_item(me.id, product_id)
    return cart_service.get_or_create_cart(me.id).to_dict()


@router.delete("/cart")
async def clear_cart(me=Depends(require_user)):
    cart_service.clear_cart(me.id)
    return cart_service.get_or_create_cart(me.id).to_dict()


# ==========================================
# ✅ Checkout
# ==========================================

@router.post("/checkout")
def checkout(db: Session = Depends(get_db), me=Depends(require_user)):
    """Commit the cart. Cart is cleared only when an order was created."""
    cart = cart_service.get_or_create_cart(me.id)
    try:
        order = order_service.checkout(db, cart, me.id)
    except CommitError as e:
        raise_http(e)

    cart_service.clear_cart(me.id)
    return JSONResponse(order.to_dict(), status_code=201)
