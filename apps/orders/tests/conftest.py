import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserType
from apps.catalog.models import Product, ProductCategory


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


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
    """Create and return a second supplier."""
    return User.objects.create_user(
        email='sharma@example.com',
        password='TestPass123!',
        user_type=UserType.SUPPLIER,
        business_name='Sharma Traders',
    )


@pytest.fixture
def vendor(db):
    """Create and return a vendor with a delivery address."""
    return User.objects.create_user(
        email='rajesh@example.com',
        password='TestPass123!',
        user_type=UserType.VENDOR,
        business_name='Rajesh Street Food',
        address='Connaught Place, New Delhi',
    )


@pytest.fixture
def other_vendor(db):
    """Create and return a vendor unrelated to the orders under test."""
    return User.objects.create_user(
        email='priya@example.com',
        password='TestPass123!',
        user_type=UserType.VENDOR,
        business_name='Priya Chaat',
    )


@pytest.fixture
def supplier_client(supplier):
    return _client_for(supplier)


@pytest.fixture
def vendor_client(vendor):
    return _client_for(vendor)


@pytest.fixture
def other_vendor_client(other_vendor):
    return _client_for(other_vendor)


@pytest.fixture
def rice(db, supplier):
    return Product.objects.create(
        supplier=supplier,
        name='Basmati Rice',
        category=ProductCategory.GRAINS,
        price=Decimal('120.00'),
        stock_quantity=100,
        min_order_quantity=10,
    )


@pytest.fixture
def oil(db, supplier):
    return Product.objects.create(
        supplier=supplier,
        name='Cooking Oil',
        category=ProductCategory.OILS,
        unit='litre',
        price=Decimal('150.00'),
        stock_quantity=20,
        min_order_quantity=1,
    )


@pytest.fixture
def onions(db, other_supplier):
    return Product.objects.create(
        supplier=other_supplier,
        name='Onions',
        category=ProductCategory.VEGETABLES,
        price=Decimal('35.00'),
        stock_quantity=200,
        min_order_quantity=5,
    )
