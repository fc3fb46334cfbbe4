"""
Catalog Module - Public API Routes
====================================
Read-only product listing for the storefront.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from config.database import get_db
from common.exceptions import ProductUnavailableError
from modules.catalog.service import catalog_service

router = APIRouter(prefix="/api/products", tags=["catalog"])


@router.get("")
def list_products(db: Session = Depends(get_db)):
    return {"products": [p.to_dict() for p in catalog_service.list_products(db)]}


@router.get("/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db)):
    """Deactivated products read as not found, same as the listing."""
    try:
        product = catalog_service.get_active_product(db, product_id)
    except ProductUnavailableError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return product.to_dict()
