import pytest
from datetime import timedelta
from decimal import Decimal
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from apps.accounts.models import User, UserType
from apps.catalog.models import Product
from apps.group_orders.services import create_group_order


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegistration:
    """Tests for POST /api/auth/register/"""

    def test_register_vendor(self, api_client):
        """Successfully register a vendor."""
        url = reverse('users:register')
        data = {
            'email': 'newvendor@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'user_type': 'vendor',
            'business_name': 'Dosa Corner',
            'phone': '+91 9876543210',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        user = User.objects.get(email='newvendor@example.com')
        assert user.user_type == UserType.VENDOR
        assert user.phone_verified is False

    def test_register_staff_rejected(self, api_client):
        """Staff accounts are created by admins, not by sign-up."""
        url = reverse('users:register')
        data = {
            'email': 'sneaky@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'user_type': 'staff',
            'phone': '+91 9876543210',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'user_type' in response.data
        assert not User.objects.filter(email='sneaky@example.com').exists()

    def test_register_supplier(self, api_client):
        """Suppliers register with the same endpoint."""
        url = reverse('users:register')
        data = {
            'email': 'wholesale@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'user_type': 'supplier',
            'business_name': 'Kumar Wholesale',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['user']['user_type'] == 'supplier'

    def test_register_requires_user_type(self, api_client):
        """user_type is mandatory."""
        url = reverse('users:register')
        data = {
            'email': 'typeless@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'user_type' in response.data

    def test_register_duplicate_email(self, api_client, user):
        """Cannot register with existing email."""
        url = reverse('users:register')
        data = {
            'email': user.email,
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'user_type': 'vendor',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_register_password_mismatch(self, api_client):
        """Registration fails when passwords don't match."""
        url = reverse('users:register')
        data = {
            'email': 'mismatch@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'DifferentPass123!',
            'user_type': 'vendor',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password_confirm' in response.data

    def test_register_invalid_phone(self, api_client):
        """Phone numbers must be numeric."""
        url = reverse('users:register')
        data = {
            'email': 'badphone@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'user_type': 'vendor',
            'phone': 'call-me',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'phone' in response.data


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        user.refresh_from_db()
        assert user.last_login is not None

    def test_login_wrong_password(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'WrongPass123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_unknown_email(self, api_client):
        url = reverse('users:login')
        response = api_client.post(url, {'email': 'nobody@example.com', 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_account(self, api_client, user_inactive):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user_inactive.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_with_matching_role(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!', 'user_type': 'vendor'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['user_type'] == 'vendor'

    def test_login_with_wrong_role(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!', 'user_type': 'supplier'})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert 'vendor' in response.data['error']
        user.refresh_from_db()
        assert user.last_login is None

    def test_staff_cannot_log_into_marketplace(self, api_client, staff_user):
        url = reverse('users:login')
        response = api_client.post(url, {'email': staff_user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert 'tokens' not in response.data


# =============================================================================
# Profile Tests
# =============================================================================

@pytest.mark.django_db
class TestProfile:
    """Tests for /api/auth/user/"""

    def test_get_current_user(self, authenticated_client, user):
        url = reverse('users:current-user')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email
        assert response.data['business_name'] == 'Chaat Corner'

    def test_get_current_user_unauthenticated(self, api_client):
        url = reverse('users:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_update_profile(self, authenticated_client, user):
        url = reverse('users:update-profile')
        response = authenticated_client.patch(url, {'city': 'New Delhi', 'pincode': '110001'})

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.city == 'New Delhi'

    def test_update_profile_cannot_change_user_type(self, authenticated_client, user):
        url = reverse('users:update-profile')
        authenticated_client.patch(url, {'user_type': 'supplier'})

        user.refresh_from_db()
        assert user.user_type == UserType.VENDOR


# =============================================================================
# Health Check Tests
# =============================================================================

@pytest.mark.django_db
class TestHealthCheck:
    """Tests for GET /api/health/"""

    def test_served_over_plain_http(self, api_client):
        response = api_client.get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'status': 'ok'}


# =============================================================================
# Supplier Directory Tests
# =============================================================================

@pytest.mark.django_db
class TestSupplierDirectory:
    """Tests for GET /api/auth/suppliers/"""

    def test_lists_active_suppliers_only(self, authenticated_client, user, supplier, spice_supplier):
        User.objects.filter(id=spice_supplier.id).update(is_active=False)

        response = authenticated_client.get(reverse('users:suppliers'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        card = response.data['results'][0]
        assert card['business_name'] == 'Kumar Wholesale'
        assert card['specialties'] == ['Vegetables', 'Oils & Ghee']
        assert [p['name'] for p in card['products']] == ['Onions', 'Refined Oil']
        assert card['open_group_order_count'] == 0

    def test_search_matches_product_name(self, authenticated_client, supplier, spice_supplier):
        response = authenticated_client.get(reverse('users:suppliers'), {'search': 'masala'})

        assert [s['business_name'] for s in response.data['results']] == ['Sharma Spices']

    def test_search_matches_address(self, authenticated_client, supplier, spice_supplier):
        response = authenticated_client.get(reverse('users:suppliers'), {'search': 'azadpur'})

        assert [s['business_name'] for s in response.data['results']] == ['Kumar Wholesale']

    def test_filter_by_city_and_category(self, authenticated_client, supplier, spice_supplier):
        url = reverse('users:suppliers')

        assert authenticated_client.get(url, {'city': 'mumbai'}).data['count'] == 1
        assert authenticated_client.get(url, {'category': 'oils'}).data['count'] == 1
        assert authenticated_client.get(url, {'category': 'dairy'}).data['count'] == 0

    def test_inactive_products_hidden(self, authenticated_client, supplier):
        Product.objects.filter(supplier=supplier, name='Onions').update(is_active=False)

        response = authenticated_client.get(reverse('users:suppliers'), {'search': 'onion'})

        assert response.data['count'] == 0

    def test_counts_open_group_orders(self, authenticated_client, supplier):
        oil = Product.objects.get(supplier=supplier, name='Refined Oil')
        create_group_order(
            supplier=supplier,
            product_id=oil.id,
            target_quantity=200,
            max_participants=8,
            discount_tiers=[(50, Decimal('5'))],
            expires_at=timezone.now() + timedelta(days=2),
        )

        response = authenticated_client.get(reverse('users:suppliers'))

        assert response.data['results'][0]['open_group_order_count'] == 1

    def test_invalid_category(self, authenticated_client):
        response = authenticated_client.get(reverse('users:suppliers'), {'category': 'bogus'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_authentication(self, api_client, supplier):
        response = api_client.get(reverse('users:suppliers'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
