"""
Domain-specific exceptions for orders app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class OrdersServiceError(Exception):
    """Base exception for all orders service errors."""
    pass


class OrderNotFoundError(OrdersServiceError):
    """Raised when an order does not exist or is not visible to the caller."""
    pass


class InvalidOrderError(OrdersServiceError):
    """Raised when order input breaks a catalog rule (mixed suppliers, below minimum, duplicates)."""
    pass


class ProductUnavailableError(OrdersServiceError):
    """Raised when an ordered product is missing or inactive."""
    pass


class InsufficientStockError(OrdersServiceError):
    """Raised when a supplier cannot cover the requested quantity."""
    pass


class InvalidStatusTransitionError(OrdersServiceError):
    """Raised when an order cannot move to the requested status."""
    pass


class InsufficientPermissionsError(OrdersServiceError):
    """Raised when the caller is neither the vendor nor the supplier allowed to act."""
    pass
