"""
Catalog app services layer.

Suppliers own their product listings; other apps read prices through
``get_base_price`` and ``get_product``.
"""

from .exceptions import (
    CatalogServiceError,
    ProductNotFoundError,
    DuplicateProductError,
    NotProductOwnerError,
)

from .product_management import (
    create_product,
    update_product,
    deactivate_product,
    get_product,
    get_base_price,
)

from .product_search import (
    search_products,
    get_categories,
)

from .product_deduplication import find_similar_products


__all__ = [
    # Exceptions
    'CatalogServiceError',
    'ProductNotFoundError',
    'DuplicateProductError',
    'NotProductOwnerError',

    # Product Management
    'create_product',
    'update_product',
    'deactivate_product',
    'get_product',
    'get_base_price',

    # Search
    'search_products',
    'get_categories',
    'find_similar_products',
]
