"""
Order placement service.

Direct orders reserve supplier stock at placement time. Orders produced by
group-order settlement are priced by the settlement and do not touch stock.
"""

from decimal import Decimal
from typing import List, Dict, Any
from uuid import UUID

from django.db import transaction
from django.contrib.auth import get_user_model
import structlog

from apps.catalog.models import Product
from apps.orders.models import Order, OrderItem, OrderStatus

from .exceptions import (
    InvalidOrderError,
    ProductUnavailableError,
    InsufficientStockError,
)

User = get_user_model()
logger = structlog.get_logger(__name__)


@transaction.atomic
def place_order(
    *,
    vendor: User,
    items: List[Dict[str, Any]],
    delivery_address: str = '',
    notes: str = ''
) -> Order:
    """
    Place a direct order with one supplier.

    Products are locked in primary-key order so two vendors buying the same
    products cannot deadlock or oversell.

    Args:
        vendor: Ordering vendor
        items: List of ``{'product_id': UUID, 'quantity': int}``
        delivery_address: Where to deliver; defaults to the vendor's address
        notes: Free-form instructions

    Returns:
        Created Order with its items

    Raises:
        InvalidOrderError: Empty order, repeated product, products from more than
            one supplier, or quantity below the product's minimum
        ProductUnavailableError: If a product is missing or inactive
        InsufficientStockError: If stock cannot cover a line
    """
    if not items:
        raise InvalidOrderError("An order needs at least one item")

    quantities = {}
    for item in items:
        product_id = str(item['product_id'])
        if product_id in quantities:
            raise InvalidOrderError(f"Product {product_id} appears more than once")
        quantities[product_id] = item['quantity']

    products = list(
        Product.objects
        .select_for_update()
        .filter(id__in=quantities.keys(), is_active=True)
        .order_by('id')
    )
    if len(products) != len(quantities):
        found = {str(p.id) for p in products}
        missing = sorted(set(quantities) - found)
        raise ProductUnavailableError(f"Products not available: {', '.join(missing)}")

    suppliers = {p.supplier_id for p in products}
    if len(suppliers) > 1:
        raise InvalidOrderError("All items in an order must come from the same supplier")

    lines = []
    total = Decimal('0.00')
    for product in products:
        quantity = quantities[str(product.id)]
        if quantity < product.min_order_quantity:
            raise InvalidOrderError(
                f"Minimum order for {product.name} is {product.min_order_quantity} {product.unit}"
            )
        if quantity > product.stock_quantity:
            raise InsufficientStockError(
                f"Only {product.stock_quantity} {product.unit} of {product.name} in stock"
            )
        line_total = product.price * quantity
        total += line_total
        lines.append((product, quantity, line_total))

    order = Order.objects.create(
        vendor=vendor,
        supplier_id=suppliers.pop(),
        total_amount=total,
        delivery_address=delivery_address or vendor.address,
        notes=notes,
    )

    for product, quantity, line_total in lines:
        OrderItem.objects.create(
            order=order,
            product=product,
            product_name=product.name,
            quantity=quantity,
            unit_price=product.price,
            line_total=line_total,
        )
        product.stock_quantity -= quantity
        product.save(update_fields=['stock_quantity', 'updated_at'])

    logger.info(
        "order_placed",
        order_id=str(order.id),
        order_number=order.order_number,
        vendor_id=str(vendor.id),
        total=str(total),
    )
    return order


def create_group_settlement_order(
    *,
    group_order_id: UUID,
    vendor: User,
    supplier_id: UUID,
    product: Product,
    quantity: int,
    unit_price: Decimal,
    total_price: Decimal
) -> Order:
    """
    Record the order a vendor owes after a group order is fulfilled.

    Must run inside the caller's transaction so the order exists exactly when
    the fulfilment commits.
    """
    order = Order.objects.create(
        vendor=vendor,
        supplier_id=supplier_id,
        total_amount=total_price,
        status=OrderStatus.PENDING,
        is_group_order=True,
        group_order_id=group_order_id,
        delivery_address=vendor.address,
    )
    OrderItem.objects.create(
        order=order,
        product=product,
        product_name=product.name,
        quantity=quantity,
        unit_price=unit_price,
        line_total=total_price,
    )
    return order
