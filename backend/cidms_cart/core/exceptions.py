"""
Domain exceptions for cart and checkout operations.
"""


class CartError(Exception):
    """Base class for cart errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class CartIndexError(CartError, IndexError):
    """Raised when a line position or product id does not address a cart line."""


class CheckoutError(CartError):
    """Raised when an order could not be placed for the cart."""


class EmptyCartError(CheckoutError):
    """Raised when checkout is attempted on an empty cart."""

    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)
