"""
Orders app services layer.

All state-changing operations use transactions and row locks.
"""

from .exceptions import (
    OrdersServiceError,
    OrderNotFoundError,
    InvalidOrderError,
    ProductUnavailableError,
    InsufficientStockError,
    InvalidStatusTransitionError,
    InsufficientPermissionsError,
)

from .order_placement import (
    place_order,
    create_group_settlement_order,
)

from .order_status import update_order_status

from .order_queries import (
    get_orders_for_user,
    get_order_for_user,
)


__all__ = [
    # Exceptions
    'OrdersServiceError',
    'OrderNotFoundError',
    'InvalidOrderError',
    'ProductUnavailableError',
    'InsufficientStockError',
    'InvalidStatusTransitionError',
    'InsufficientPermissionsError',

    # Placement
    'place_order',
    'create_group_settlement_order',

    # Status
    'update_order_status',

    # Queries
    'get_orders_for_user',
    'get_order_for_user',
]
