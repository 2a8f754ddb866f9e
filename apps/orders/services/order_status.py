"""Order status management service."""

from uuid import UUID

from django.db import transaction
from django.db.models import F
from django.contrib.auth import get_user_model
import structlog

from apps.catalog.models import Product
from apps.orders.models import Order, OrderStatus

from .exceptions import (
    OrderNotFoundError,
    InvalidStatusTransitionError,
    InsufficientPermissionsError,
)

User = get_user_model()
logger = structlog.get_logger(__name__)


@transaction.atomic
def update_order_status(*, order_id: UUID, user: User, new_status: str) -> Order:
    """
    Move an order along its lifecycle.

    The supplier drives every transition. The vendor may only cancel an
    order that is still pending. Cancelling a direct order returns its
    quantities to stock.

    Raises:
        OrderNotFoundError: If order doesn't exist
        InsufficientPermissionsError: If user may not perform this transition
        InvalidStatusTransitionError: If the transition is not allowed
    """
    try:
        order = Order.objects.select_for_update().get(id=order_id)
    except Order.DoesNotExist:
        raise OrderNotFoundError(f"Order with ID {order_id} not found")

    is_supplier = order.supplier_id == user.id
    is_vendor = order.vendor_id == user.id

    if not (is_supplier or is_vendor):
        raise InsufficientPermissionsError("You are not a party to this order")

    if is_vendor and not is_supplier:
        if not (new_status == OrderStatus.CANCELLED and order.status == OrderStatus.PENDING):
            raise InsufficientPermissionsError("Vendors can only cancel pending orders")

    if not order.can_transition_to(new_status):
        raise InvalidStatusTransitionError(
            f"Cannot change order from {order.status} to {new_status}"
        )

    previous = order.status
    order.status = new_status
    order.save(update_fields=['status', 'updated_at'])

    if new_status == OrderStatus.CANCELLED and not order.is_group_order:
        _restock(order)

    logger.info(
        "order_status_changed",
        order_id=str(order.id),
        from_status=previous,
        to_status=new_status,
        changed_by=str(user.id),
    )
    return order


def _restock(order):
    for item in order.items.all():
        Product.objects.filter(id=item.product_id).update(
            stock_quantity=F('stock_quantity') + item.quantity
        )
