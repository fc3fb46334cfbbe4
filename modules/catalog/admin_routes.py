"""
Catalog Module - Admin API Routes
===================================
Product create/edit, restock and soft delete for operators.
"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from config.database import get_db
from common.exceptions import StorefrontError, raise_http
from modules.auth.deps import require_admin
from modules.catalog.service import catalog_service

router = APIRouter(prefix="/admin/api/products", tags=["catalog-admin"])


# ==========================================
# Schemas
# ==========================================

class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    stock: int = Field(0, ge=0)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)


class RestockRequest(BaseModel):
    quantity: int = Field(..., ge=1)


# ==========================================
# Routes
# ==========================================

@router.get("")
def admin_list_products(db: Session = Depends(get_db), admin=Depends(require_admin)):
    return {"products": [p.to_dict() for p in catalog_service.list_products(db, active_only=False)]}


@router.post("", status_code=201)
def admin_create_product(body: ProductCreate, db: Session = Depends(get_db), admin=Depends(require_admin)):
    try:
        product = catalog_service.create_product(db, body.name, body.price, body.stock)
    except ValueError as e:
        raise HTTPException(400, str(e))
    db.commit()
    return product.to_dict()


@router.patch("/{product_id}")
def admin_update_product(
    product_id: int,
    body: ProductUpdate,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    try:
        product = catalog_service.update_product(db, product_id, name=body.name, price=body.price)
    except StorefrontError as e:
        raise_http(e)
    db.commit()
    return product.to_dict()


@router.post("/{product_id}/restock")
def admin_restock(
    product_id: int,
    body: RestockRequest,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    try:
        stock = catalog_service.restock(db, product_id, body.quantity)
    except StorefrontError as e:
        raise_http(e)
    db.commit()
    return {"productId": product_id, "stock": stock}


@router.post("/{product_id}/deactivate")
def admin_deactivate(product_id: int, db: Session = Depends(get_db), admin=Depends(require_admin)):
    try:
        product = catalog_service.deactivate_product(db, product_id)
    except StorefrontError as e:
        raise_http(e)
    db.commit()
    return product.to_dict()


@router.post("/{product_id}/reactivate")
def admin_reactivate(product_id: int, db: Session = Depends(get_db), admin=Depends(require_admin)):
    try:
        product = catalog_service.reactivate_product(db, product_id)
    except StorefrontError as e:
        raise_http(e)
    db.commit()
    return product.to_dict()
