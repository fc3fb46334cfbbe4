"""
Storefront - Custom Exceptions
===============================
Business-level exceptions that can be caught and converted to HTTP responses.
"""

from typing import Optional

from fastapi import HTTPException, status


class StorefrontError(Exception):
    """Base exception for all business logic errors."""
    def __init__(self, message: str = "Internal error."):
        self.message = message
        super().__init__(self.message)


class NotFoundError(StorefrontError):
    """Raised when a requested resource doesn't exist."""
    pass


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found.")


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found.")


class InvalidTransitionError(StorefrontError):
    """Raised when an order status change is not allowed by the state machine."""
    def __init__(self, order_id: int, from_status: str, to_status: str):
        self.order_id = order_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Order {order_id} cannot move from {from_status} to {to_status}.")


# ==========================================
# Checkout failures
# ==========================================

class CommitError(StorefrontError):
    """
    Structured checkout failure.

    `kind` is one of EmptyCart, ProductUnavailable, InsufficientStock,
    TransactionFailed. Only TransactionFailed is worth retrying as-is; the
    others need the caller to edit the cart.
    """
    kind: str = "TransactionFailed"
    retryable: bool = False

    def __init__(self, message: str, product_id: Optional[int] = None):
        self.product_id = product_id
        super().__init__(message)

    def to_dict(self) -> dict:
        data = {"kind": self.kind}
        if self.product_id is not None:
            data["productId"] = self.product_id
        return data


class EmptyCartError(CommitError):
    kind = "EmptyCart"

    def __init__(self):
        super().__init__("Cart is empty.")


class ProductUnavailableError(CommitError):
    """Product is missing from the catalog or has been deactivated."""
    kind = "ProductUnavailable"

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} is not available.", product_id=product_id)


class InsufficientStockError(CommitError):
    """Raised when product stock is not enough for the requested quantity."""
    kind = "InsufficientStock"

    def __init__(self, product_id: int, requested: int = 0, available: int = 0):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for product {product_id} (requested: {requested}, available: {available})",
            product_id=product_id,
        )


class TransactionFailedError(CommitError):
    """Infrastructure fault during commit; the attempt was rolled back."""
    kind = "TransactionFailed"
    retryable = True

    def __init__(self, detail: str = ""):
        msg = f"Order transaction failed: {detail}" if detail else "Order transaction failed."
        super().__init__(msg)


COMMIT_ERROR_STATUS = {
    EmptyCartError.kind: status.HTTP_400_BAD_REQUEST,
    ProductUnavailableError.kind: status.HTTP_409_CONFLICT,
    InsufficientStockError.kind: status.HTTP_409_CONFLICT,
    TransactionFailedError.kind: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(error: StorefrontError, default: int = 400) -> int:
    """HTTP status for a business exception."""
    if isinstance(error, CommitError):
        return COMMIT_ERROR_STATUS.get(error.kind, default)
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, InvalidTransitionError):
        return status.HTTP_409_CONFLICT
    return default


def raise_http(error: StorefrontError, status_code: int = 400):
    """Convert a business exception to an HTTP exception."""
    detail = error.to_dict() if isinstance(error, CommitError) else error.message
    raise HTTPException(status_code=status_for(error, status_code), detail=detail)
