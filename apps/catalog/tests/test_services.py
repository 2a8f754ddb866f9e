"""
Service layer unit tests for catalog app.
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from apps.catalog.models import Product
from apps.catalog.services import (
    create_product,
    update_product,
    deactivate_product,
    get_product,
    get_base_price,
    search_products,
    find_similar_products,
    ProductNotFoundError,
    DuplicateProductError,
    NotProductOwnerError,
)


@pytest.mark.django_db
class TestProductManagement:
    """Tests for product_management.py service functions."""

    def test_create_product(self, supplier):
        product = create_product(
            supplier=supplier,
            name='Cooking Oil',
            price=Decimal('150.00'),
            category='oils',
            unit='litre',
            stock_quantity=40,
        )

        assert product.supplier == supplier
        assert product.name_normalized == 'cooking oil'
        assert product.is_active is True

    def test_create_product_rejects_near_duplicate(self, supplier, rice):
        with pytest.raises(DuplicateProductError):
            create_product(supplier=supplier, name='basmati rice!', price=Decimal('110.00'))

    def test_same_name_allowed_for_other_supplier(self, other_supplier, rice):
        product = create_product(supplier=other_supplier, name='Basmati Rice', price=Decimal('118.00'))

        assert product.supplier == other_supplier

    def test_update_product(self, supplier, rice):
        updated = update_product(
            product_id=rice.id,
            supplier=supplier,
            data={'price': Decimal('125.50'), 'stock_quantity': 450},
        )

        assert updated.price == Decimal('125.50')
        rice.refresh_from_db()
        assert rice.stock_quantity == 450

    def test_update_product_not_owner(self, other_supplier, rice):
        with pytest.raises(NotProductOwnerError):
            update_product(product_id=rice.id, supplier=other_supplier, data={'price': Decimal('1.00')})

    def test_update_product_not_found(self, supplier):
        with pytest.raises(ProductNotFoundError):
            update_product(product_id=uuid4(), supplier=supplier, data={})

    def test_deactivate_product(self, supplier, rice):
        deactivate_product(product_id=rice.id, supplier=supplier)

        rice.refresh_from_db()
        assert rice.is_active is False
        with pytest.raises(ProductNotFoundError):
            get_product(product_id=rice.id)

    def test_get_base_price(self, rice):
        assert get_base_price(product_id=rice.id) == Decimal('120.00')

    def test_get_base_price_unknown_product(self, db):
        with pytest.raises(ProductNotFoundError):
            get_base_price(product_id=uuid4())


@pytest.mark.django_db
class TestProductSearch:
    """Tests for product_search.py and product_deduplication.py."""

    def test_search_by_name(self, rice, onions):
        results = search_products(search='basmati')

        assert list(results) == [rice]

    def test_filter_by_city(self, rice, onions):
        results = search_products(city='mumbai')

        assert list(results) == [onions]

    def test_in_stock_filter(self, rice, onions):
        results = search_products(in_stock=True)

        assert list(results) == [rice]

    def test_inactive_excluded(self, rice):
        Product.objects.filter(id=rice.id).update(is_active=False)

        assert search_products().count() == 0
        assert search_products(only_active=False).count() == 1

    def test_find_similar_products_scores(self, supplier, rice):
        matches = find_similar_products(supplier_id=supplier.id, name='Basmati  Rice')

        assert matches[0][0] == rice
        assert matches[0][1] == 100
