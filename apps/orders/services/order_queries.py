"""Read-side helpers for vendor and supplier order lists."""

from typing import Optional
from uuid import UUID

from django.db.models import Q, QuerySet
from django.contrib.auth import get_user_model

from apps.orders.models import Order

from .exceptions import OrderNotFoundError

User = get_user_model()


def get_orders_for_user(*, user: User, status: Optional[str] = None) -> QuerySet[Order]:
    """
    Orders the user placed (vendor) or received (supplier).
    """
    queryset = (
        Order.objects
        .filter(Q(vendor=user) | Q(supplier=user))
        .select_related('vendor', 'supplier')
        .prefetch_related('items')
    )
    if status:
        queryset = queryset.filter(status=status)
    return queryset


def get_order_for_user(*, order_id: UUID, user: User) -> Order:
    """
    Raises:
        OrderNotFoundError: If the order doesn't exist or the user is not a party to it
    """
    try:
        return get_orders_for_user(user=user).get(id=order_id)
    except Order.DoesNotExist:
        raise OrderNotFoundError(f"Order with ID {order_id} not found")
