"""
Cart Module - Models
=====================
In-memory shopping cart: line items keyed by product id, total derived on read.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from config.settings import CART_MAX_LINE_QUANTITY
from common.helpers import CENT, to_money


def _clamp(quantity) -> int:
    return min(max(1, int(quantity)), CART_MAX_LINE_QUANTITY)


@dataclass(slots=True)
class CartItem:
    product_id: int
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class Cart:
    """
    Single-owner cart. No stock checks here; checkout validates against the
    catalog. A product already in the cart keeps the price captured when it
    was first added.
    """

    owner_id: Optional[int] = None
    _items: Dict[int, CartItem] = field(default_factory=dict, repr=False)

    @property
    def items(self) -> List[CartItem]:
        return list(self._items.values())

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items.values())

    def get(self, product_id: int) -> Optional[CartItem]:
        return self._items.get(product_id)

    def add_item(self, product_id: int, quantity: int, unit_price) -> CartItem:
        quantity = _clamp(quantity)
        item = self._items.get(product_id)
        if item:
            item.quantity = _clamp(item.quantity + quantity)
        else:
            item = CartItem(product_id=product_id, quantity=quantity, unit_price=to_money(unit_price))
            self._items[product_id] = item
        return item

    def remove_item(self, product_id: int) -> None:
        self._items.pop(product_id, None)

    def set_quantity(self, product_id: int, quantity: int) -> Optional[CartItem]:
        """Quantity < 1 removes the line, larger values are capped. Unknown products are ignored."""
        item = self._items.get(product_id)
        if not item:
            return None
        if quantity < 1:
            del self._items[product_id]
            return None
        item.quantity = _clamp(quantity)
        return item

    def clear(self) -> None:
        self._items.clear()

    def total(self) -> Decimal:
        return sum((item.line_total for item in self._items.values()), Decimal("0")).quantize(CENT)

    def to_dict(self) -> dict:
        return {
            "items": [
                {
                    "productId": item.product_id,
                    "quantity": item.quantity,
                    "unitPrice": str(item.unit_price),
                    "lineTotal": str(item.line_total.quantize(CENT)),
                }
                for item in self._items.values()
            ],
            "itemCount": self.item_count,
            "total": str(self.total()),
        }
