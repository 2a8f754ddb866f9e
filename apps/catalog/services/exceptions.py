"""Domain-specific exceptions for catalog services."""


class CatalogServiceError(Exception):
    """Base exception for catalog services."""
    pass


class ProductNotFoundError(CatalogServiceError):
    """Raised when a product does not exist or is inactive."""
    pass


class DuplicateProductError(CatalogServiceError):
    """Raised when a supplier already lists a near-identical product."""
    pass


class NotProductOwnerError(CatalogServiceError):
    """Raised when a supplier modifies another supplier's product."""
    pass
