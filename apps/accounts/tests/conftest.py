import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from decimal import Decimal
from apps.accounts.models import User, UserType
from apps.catalog.models import Product, ProductCategory


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a vendor account."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        user_type=UserType.VENDOR,
        full_name='Test User',
        business_name='Chaat Corner',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        user_type=UserType.VENDOR,
        is_active=False,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def staff_user(db):
    """Create and return a superuser with no marketplace role."""
    return User.objects.create_superuser(
        email='admin@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def supplier(db):
    """Supplier selling oil and onions in Delhi."""
    supplier = User.objects.create_user(
        email='kumar@example.com',
        password='TestPass123!',
        user_type=UserType.SUPPLIER,
        business_name='Kumar Wholesale',
        address='Azadpur Mandi',
        city='Delhi',
    )
    Product.objects.create(
        supplier=supplier,
        name='Refined Oil',
        category=ProductCategory.OILS,
        unit='litre',
        price=Decimal('140.00'),
        stock_quantity=500,
    )
    Product.objects.create(
        supplier=supplier,
        name='Onions',
        category=ProductCategory.VEGETABLES,
        unit='kg',
        price=Decimal('35.00'),
        stock_quantity=1200,
    )
    return supplier


@pytest.fixture
def spice_supplier(db):
    """Supplier selling spices in Mumbai."""
    supplier = User.objects.create_user(
        email='sharma@example.com',
        password='TestPass123!',
        user_type=UserType.SUPPLIER,
        business_name='Sharma Spices',
        city='Mumbai',
    )
    Product.objects.create(
        supplier=supplier,
        name='Garam Masala',
        category=ProductCategory.SPICES,
        unit='kg',
        price=Decimal('420.00'),
        stock_quantity=80,
    )
    return supplier
