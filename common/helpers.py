"""
Storefront - Shared Helpers
============================
Pure utility functions with NO database or module dependencies.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def now_utc() -> datetime:
    """Returns current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def to_money(value) -> Decimal:
    """Coerce a number or numeric string to a 2-place Decimal."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
