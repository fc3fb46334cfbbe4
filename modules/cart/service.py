"""
Cart Module - Service Layer
==============================
Cart management: get/create, add/remove items, per-user in-process storage.
"""

import logging
from typing import Dict

from sqlalchemy.orm import Session

from modules.cart.models import Cart, CartItem
from modules.catalog.service import catalog_service

logger = logging.getLogger("storefront.cart")


class CartService:

    def __init__(self):
        self._carts: Dict[int, Cart] = {}

    def get_or_create_cart(self, user_id: int) -> Cart:
        """Get existing cart or create new one for user."""
        cart = self._carts.get(user_id)
        if cart is None:
            cart = Cart(owner_id=user_id)
            self._carts[user_id] = cart
        return cart

    def add_item(self, db: Session, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
        """
        Add `quantity` units at the current catalog price.
        Raises ProductUnavailableError for unknown or deactivated products;
        stock is only checked at checkout.
        """
        product = catalog_service.get_active_product(db, product_id)
        item = self.get_or_create_cart(user_id).add_item(product.id, quantity, product.price)
        logger.debug(f"[user={user_id}] cart add product={product_id} qty={item.quantity}")
        return item

    def set_quantity(self, user_id: int, product_id: int, quantity: int):
        return self.get_or_create_cart(user_id).set_quantity(product_id, quantity)

    def remove_item(self, user_id: int, product_id: int) -> None:
        self.get_or_create_cart(user_id).remove_item(product_id)

    def clear_cart(self, user_id: int) -> None:
        """Remove all items from user's cart."""
        cart = self._carts.get(user_id)
        if cart:
            cart.clear()

    def reset(self) -> None:
        """Drop every cart (tests and process restarts)."""
        self._carts.clear()


# Singleton
cart_service = CartService()
