import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserType
from apps.catalog.models import Product, ProductCategory


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def supplier(db):
    """Create and return a supplier."""
    return User.objects.create_user(
        email='kumar@example.com',
        password='TestPass123!',
        user_type=UserType.SUPPLIER,
        business_name='Kumar Wholesale',
        city='Delhi',
    )


@pytest.fixture
def other_supplier(db):
    """Create and return a competing supplier."""
    return User.objects.create_user(
        email='sharma@example.com',
        password='TestPass123!',
        user_type=UserType.SUPPLIER,
        business_name='Sharma Traders',
        city='Mumbai',
    )


@pytest.fixture
def vendor(db):
    """Create and return a vendor."""
    return User.objects.create_user(
        email='rajesh@example.com',
        password='TestPass123!',
        user_type=UserType.VENDOR,
        business_name='Rajesh Street Food',
    )


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def supplier_client(supplier):
    """Return API client authenticated as supplier."""
    return _client_for(supplier)


@pytest.fixture
def other_supplier_client(other_supplier):
    """Return API client authenticated as the other supplier."""
    return _client_for(other_supplier)


@pytest.fixture
def vendor_client(vendor):
    """Return API client authenticated as vendor."""
    return _client_for(vendor)


@pytest.fixture
def rice(db, supplier):
    """Create and return a product."""
    return Product.objects.create(
        supplier=supplier,
        name='Basmati Rice',
        category=ProductCategory.GRAINS,
        unit='kg',
        price=Decimal('120.00'),
        stock_quantity=500,
        min_order_quantity=10,
    )


@pytest.fixture
def onions(db, other_supplier):
    """Create and return a product from another supplier."""
    return Product.objects.create(
        supplier=other_supplier,
        name='Onions',
        category=ProductCategory.VEGETABLES,
        unit='kg',
        price=Decimal('35.00'),
        stock_quantity=3,
        min_order_quantity=5,
    )
