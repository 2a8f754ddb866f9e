"""Supplier directory shown to vendors."""

from datetime import datetime
from typing import Optional

from django.contrib.auth import get_user_model
from django.db.models import Count, Prefetch, Q, QuerySet
from django.utils import timezone

from apps.catalog.models import Product
from apps.group_orders.models import GroupOrderState

from ..models import UserType

User = get_user_model()


def list_suppliers(
    *,
    search: Optional[str] = None,
    city: Optional[str] = None,
    category: Optional[str] = None,
    now: Optional[datetime] = None
) -> QuerySet:
    """
    Active suppliers with their active products, by business name.

    Args:
        search: Term matched against business name, contact name, address and product names
        city: Supplier's city (case-insensitive)
        category: Only suppliers selling at least one active product in this category
        now: Reference time for counting group orders still accepting participants

    Each supplier carries ``active_products`` (prefetched) and
    ``open_group_order_count``.
    """
    now = now or timezone.now()
    active_products = Product.objects.filter(is_active=True)

    queryset = User.objects.filter(user_type=UserType.SUPPLIER, is_active=True)

    if search:
        queryset = queryset.filter(
            Q(business_name__icontains=search) |
            Q(full_name__icontains=search) |
            Q(address__icontains=search) |
            Q(id__in=active_products.filter(name__icontains=search).values('supplier_id'))
        )

    if city:
        queryset = queryset.filter(city__iexact=city)

    if category:
        queryset = queryset.filter(
            id__in=active_products.filter(category=category).values('supplier_id')
        )

    return (
        queryset
        .annotate(
            open_group_order_count=Count(
                'group_orders_offered',
                filter=Q(group_orders_offered__state=GroupOrderState.OPEN, group_orders_offered__expires_at__gt=now),
                distinct=True,
            )
        )
        .prefetch_related(
            Prefetch('products', queryset=active_products.order_by('name'), to_attr='active_products')
        )
        .order_by('business_name', 'email')
    )
