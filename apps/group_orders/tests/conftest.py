import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserType
from apps.catalog.models import Product, ProductCategory
from apps.group_orders.services import create_group_order


STANDARD_TIERS = [(50, Decimal('10')), (100, Decimal('25'))]


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return unauthenticated API client."""
    return APIClient()


@pytest.fixture
def supplier(db):
    """Create and return a supplier."""
    return User.objects.create_user(
        email='kumar@example.com',
        password='TestPass123!',
        user_type=UserType.SUPPLIER,
        business_name='Kumar Wholesale',
    )


@pytest.fixture
def other_supplier(db):
    """Create and return a supplier who doesn't own the group order."""
    return User.objects.create_user(
        email='sharma@example.com',
        password='TestPass123!',
        user_type=UserType.SUPPLIER,
        business_name='Sharma Traders',
    )


@pytest.fixture
def vendor(db):
    """Create and return a vendor."""
    return User.objects.create_user(
        email='rajesh@example.com',
        password='TestPass123!',
        user_type=UserType.VENDOR,
        business_name='Rajesh Street Food',
        address='Connaught Place, New Delhi',
    )


@pytest.fixture
def other_vendor(db):
    """Create and return a second vendor."""
    return User.objects.create_user(
        email='priya@example.com',
        password='TestPass123!',
        user_type=UserType.VENDOR,
        business_name='Priya Chaat',
        address='Lajpat Nagar, New Delhi',
    )


@pytest.fixture
def third_vendor(db):
    """Create and return a third vendor."""
    return User.objects.create_user(
        email='amit@example.com',
        password='TestPass123!',
        user_type=UserType.VENDOR,
        business_name='Amit Pav Bhaji',
    )


@pytest.fixture
def supplier_client(supplier):
    return _client_for(supplier)


@pytest.fixture
def other_supplier_client(other_supplier):
    return _client_for(other_supplier)


@pytest.fixture
def vendor_client(vendor):
    return _client_for(vendor)


@pytest.fixture
def other_vendor_client(other_vendor):
    return _client_for(other_vendor)


@pytest.fixture
def product(db, supplier):
    """Product with base price 200.00 per unit."""
    return Product.objects.create(
        supplier=supplier,
        name='Refined Oil',
        category=ProductCategory.OILS,
        unit='litre',
        price=Decimal('200.00'),
        stock_quantity=1000,
        min_order_quantity=1,
    )


@pytest.fixture
def now():
    return timezone.now()


@pytest.fixture
def make_group_order(supplier, product, now):
    """Factory for open group orders with the standard tiers."""

    def _make(**overrides):
        params = {
            'supplier': supplier,
            'product_id': product.id,
            'target_quantity': 100,
            'min_participants': 1,
            'max_participants': 10,
            'discount_tiers': STANDARD_TIERS,
            'expires_at': now + timedelta(days=2),
            'now': now,
        }
        params.update(overrides)
        return create_group_order(**params)

    return _make


@pytest.fixture
def group_order(make_group_order):
    return make_group_order()
