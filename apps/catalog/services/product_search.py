"""Product search and filtering service."""

from typing import List, Optional

from django.db.models import F, Q, QuerySet

from ..models import Product, ProductCategory


def search_products(
    *,
    search: Optional[str] = None,
    category: Optional[str] = None,
    supplier_id: Optional[str] = None,
    city: Optional[str] = None,
    in_stock: bool = False,
    only_active: bool = True
) -> QuerySet[Product]:
    """
    Search and filter products.

    Args:
        search: Term matched against product name, description and supplier business name
        category: Exact category value
        supplier_id: Restrict to one supplier
        city: Supplier's city (case-insensitive)
        in_stock: Only products with at least one minimum order in stock
        only_active: Only return active products

    Returns:
        Filtered QuerySet of Product
    """
    queryset = Product.objects.select_related('supplier')

    if only_active:
        queryset = queryset.filter(is_active=True)

    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(description__icontains=search) |
            Q(supplier__business_name__icontains=search)
        )

    if category:
        queryset = queryset.filter(category=category)

    if supplier_id:
        queryset = queryset.filter(supplier_id=supplier_id)

    if city:
        queryset = queryset.filter(supplier__city__iexact=city)

    if in_stock:
        queryset = queryset.filter(stock_quantity__gte=F('min_order_quantity'))

    return queryset


def get_categories() -> List[dict]:
    """Return all categories with their labels."""
    return [{'value': value, 'label': label} for value, label in ProductCategory.choices]
