"""Product CRUD operations service."""

from decimal import Decimal
from typing import Any, Dict
from uuid import UUID

from django.db import transaction
from django.contrib.auth import get_user_model
import structlog

from ..models import Product
from .exceptions import ProductNotFoundError, DuplicateProductError, NotProductOwnerError
from .product_deduplication import find_similar_products

User = get_user_model()
logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = (
    'name',
    'category',
    'description',
    'unit',
    'price',
    'stock_quantity',
    'min_order_quantity',
    'is_active',
)


@transaction.atomic
def create_product(
    *,
    supplier: User,
    name: str,
    price: Decimal,
    category: str = 'other',
    description: str = '',
    unit: str = 'kg',
    stock_quantity: int = 0,
    min_order_quantity: int = 1,
    check_duplicates: bool = True
) -> Product:
    """
    Add a product to a supplier's catalog.

    Raises:
        DuplicateProductError: If the supplier already lists a near-identical product
    """
    if check_duplicates:
        similar = find_similar_products(supplier_id=supplier.id, name=name)
        if similar:
            existing, score = similar[0]
            raise DuplicateProductError(
                f"'{name}' duplicates your existing product '{existing.name}' ({score}% match)"
            )

    product = Product.objects.create(
        supplier=supplier,
        name=name,
        price=price,
        category=category,
        description=description,
        unit=unit,
        stock_quantity=stock_quantity,
        min_order_quantity=min_order_quantity,
    )

    logger.info("product_created", product_id=str(product.id), supplier_id=str(supplier.id))
    return product


@transaction.atomic
def update_product(*, product_id: UUID, supplier: User, data: Dict[str, Any]) -> Product:
    """
    Update a product owned by ``supplier``.

    Unknown keys in ``data`` are ignored.

    Raises:
        ProductNotFoundError: If the product doesn't exist
        NotProductOwnerError: If the product belongs to another supplier
        DuplicateProductError: If a rename collides with another listing
    """
    try:
        product = Product.objects.select_for_update().get(id=product_id)
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product with ID {product_id} not found")

    if product.supplier_id != supplier.id:
        raise NotProductOwnerError("You can only modify your own products")

    if 'name' in data and data['name'] != product.name:
        if find_similar_products(supplier_id=supplier.id, name=data['name'], exclude_id=product.id):
            raise DuplicateProductError(f"'{data['name']}' duplicates one of your existing products")

    update_fields = ['updated_at']
    for field in UPDATABLE_FIELDS:
        if field in data:
            setattr(product, field, data[field])
            update_fields.append(field)
    if 'name' in data:
        update_fields.append('name_normalized')

    product.save(update_fields=update_fields)
    return product


@transaction.atomic
def deactivate_product(*, product_id: UUID, supplier: User) -> None:
    """
    Remove a product from the catalog.

    Products stay in the database because orders and group orders reference
    them; they are hidden by clearing ``is_active``.

    Raises:
        ProductNotFoundError: If the product doesn't exist
        NotProductOwnerError: If the product belongs to another supplier
    """
    try:
        product = Product.objects.select_for_update().get(id=product_id)
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product with ID {product_id} not found")

    if product.supplier_id != supplier.id:
        raise NotProductOwnerError("You can only remove your own products")

    product.is_active = False
    product.save(update_fields=['is_active', 'updated_at'])
    logger.info("product_deactivated", product_id=str(product.id))


def get_product(*, product_id: UUID, only_active: bool = True) -> Product:
    """
    Get a product by ID.

    Raises:
        ProductNotFoundError: If the product doesn't exist (or is inactive)
    """
    queryset = Product.objects.select_related('supplier')
    if only_active:
        queryset = queryset.filter(is_active=True)
    try:
        return queryset.get(id=product_id)
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product with ID {product_id} not found")


def get_base_price(*, product_id: UUID) -> Decimal:
    """Current per-unit list price of a product, used when settling group orders."""
    price = Product.objects.filter(id=product_id).values_list('price', flat=True).first()
    if price is None:
        raise ProductNotFoundError(f"Product with ID {product_id} not found")
    return price
