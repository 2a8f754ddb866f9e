import pytest
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from apps.group_orders.models import GroupOrder, GroupOrderState
from apps.group_orders.services import ContentionError


def _detail(name, group_order_id):
    return reverse(f'group_orders:group-order-{name}', args=[group_order_id])


@pytest.mark.django_db
class TestGroupOrderCreateApi:
    """Tests for POST /api/group-orders/"""

    def _payload(self, product, **overrides):
        payload = {
            'product': str(product.id),
            'target_quantity': 100,
            'min_participants': 2,
            'max_participants': 10,
            'discount_tiers': [
                {'threshold': 50, 'discount_percentage': '10.00'},
                {'threshold': 100, 'discount_percentage': '25.00'},
            ],
            'expires_at': (timezone.now() + timedelta(days=3)).isoformat(),
        }
        payload.update(overrides)
        return payload

    def test_supplier_creates(self, supplier_client, product):
        url = reverse('group_orders:group-order-list')
        response = supplier_client.post(url, self._payload(product), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['state'] == 'open'
        assert response.data['current_quantity'] == 0
        assert response.data['product_name'] == 'Refined Oil'
        assert len(response.data['discount_tiers']) == 2

    def test_vendor_cannot_create(self, vendor_client, product):
        url = reverse('group_orders:group-order-list')
        response = vendor_client.post(url, self._payload(product), format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unauthenticated_cannot_create(self, api_client, product):
        url = reverse('group_orders:group-order-list')
        response = api_client.post(url, self._payload(product), format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_unordered_tiers_rejected(self, supplier_client, product):
        url = reverse('group_orders:group-order-list')
        payload = self._payload(product, discount_tiers=[
            {'threshold': 100, 'discount_percentage': '25.00'},
            {'threshold': 50, 'discount_percentage': '10.00'},
        ])
        response = supplier_client.post(url, payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'InvalidParametersError'

    def test_past_deadline_rejected(self, supplier_client, product):
        url = reverse('group_orders:group-order-list')
        payload = self._payload(product, expires_at=(timezone.now() - timedelta(hours=1)).isoformat())
        response = supplier_client.post(url, payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_other_suppliers_product_rejected(self, other_supplier_client, product):
        url = reverse('group_orders:group-order-list')
        response = other_supplier_client.post(url, self._payload(product), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert GroupOrder.objects.count() == 0


@pytest.mark.django_db
class TestGroupOrderReadApi:
    """Tests for list, retrieve and participants."""

    def test_list_is_public(self, api_client, group_order):
        url = reverse('group_orders:group-order-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1

    def test_list_filter_by_state(self, api_client, group_order):
        url = reverse('group_orders:group-order-list')

        assert api_client.get(url, {'state': 'open'}).data['count'] == 1
        assert api_client.get(url, {'state': 'fulfilled'}).data['count'] == 0

    def test_list_flags_past_deadline(self, api_client, group_order):
        GroupOrder.objects.filter(id=group_order.id).update(
            expires_at=timezone.now() - timedelta(minutes=1)
        )
        url = reverse('group_orders:group-order-list')

        assert api_client.get(url, {'state': 'open'}).data['count'] == 0
        listed = api_client.get(url).data['results']
        assert listed[0]['state'] == 'open'
        assert listed[0]['is_past_deadline'] is True

    def test_list_invalid_filter(self, api_client):
        url = reverse('group_orders:group-order-list')
        response = api_client.get(url, {'state': 'bogus'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_retrieve(self, api_client, group_order):
        response = api_client.get(_detail('detail', group_order.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == str(group_order.id)
        assert response.data['participant_count'] == 0

    def test_retrieve_unknown(self, api_client):
        response = api_client.get(_detail('detail', uuid4()))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['code'] == 'GroupOrderNotFoundError'

    def test_participants(self, api_client, vendor_client, group_order):
        vendor_client.post(_detail('join', group_order.id), {'quantity': 20})

        response = api_client.get(_detail('participants', group_order.id))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['quantity'] == 20
        assert response.data[0]['vendor']['display_name'] == 'Rajesh Street Food'


@pytest.mark.django_db
class TestParticipationApi:
    """Tests for join, update_quantity and leave."""

    def test_join_and_fulfil(self, vendor_client, other_vendor_client, group_order):
        first = vendor_client.post(_detail('join', group_order.id), {'quantity': 60})
        second = other_vendor_client.post(_detail('join', group_order.id), {'quantity': 45})

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_201_CREATED

        detail = vendor_client.get(_detail('detail', group_order.id)).data
        assert detail['state'] == 'fulfilled'
        assert Decimal(detail['applied_discount_percentage']) == Decimal('25')

        settlement = vendor_client.get(_detail('settlement', group_order.id))
        assert settlement.status_code == status.HTTP_200_OK
        totals = sorted(Decimal(line['total_price']) for line in settlement.data)
        assert totals == [Decimal('6750.00'), Decimal('9000.00')]
        assert all(line['order_number'].startswith('ORD-') for line in settlement.data)

    def test_join_zero_quantity(self, vendor_client, group_order):
        response = vendor_client.post(_detail('join', group_order.id), {'quantity': 0})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_join_twice_conflict(self, vendor_client, group_order):
        vendor_client.post(_detail('join', group_order.id), {'quantity': 10})
        response = vendor_client.post(_detail('join', group_order.id), {'quantity': 10})

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'AlreadyParticipatingError'

    def test_supplier_cannot_join(self, supplier_client, group_order):
        response = supplier_client.post(_detail('join', group_order.id), {'quantity': 10})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_join_unknown(self, vendor_client):
        response = vendor_client.post(_detail('join', uuid4()), {'quantity': 10})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_join_expired(self, vendor_client, group_order):
        GroupOrder.objects.filter(id=group_order.id).update(expires_at=timezone.now() - timedelta(minutes=1))

        response = vendor_client.post(_detail('join', group_order.id), {'quantity': 10})

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'GroupOrderExpiredError'
        group_order.refresh_from_db()
        assert group_order.state == GroupOrderState.EXPIRED

    def test_contention_returns_503(self, vendor_client, group_order):
        with patch(
            'apps.group_orders.views.join_group_order',
            side_effect=ContentionError("Group order is busy, please retry"),
        ):
            response = vendor_client.post(_detail('join', group_order.id), {'quantity': 10})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response['Retry-After'] == '1'

    def test_update_quantity(self, vendor_client, group_order):
        vendor_client.post(_detail('join', group_order.id), {'quantity': 10})
        response = vendor_client.post(_detail('update-quantity', group_order.id), {'quantity': 25})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['quantity'] == 25
        group_order.refresh_from_db()
        assert group_order.current_quantity == 25

    def test_update_without_joining(self, vendor_client, group_order):
        response = vendor_client.post(_detail('update-quantity', group_order.id), {'quantity': 25})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_leave(self, vendor_client, group_order):
        vendor_client.post(_detail('join', group_order.id), {'quantity': 10})
        response = vendor_client.post(_detail('leave', group_order.id))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        group_order.refresh_from_db()
        assert group_order.current_quantity == 0


@pytest.mark.django_db
class TestCancelApi:
    """Tests for POST /api/group-orders/{id}/cancel/"""

    def test_owner_cancels(self, supplier_client, group_order):
        response = supplier_client.post(_detail('cancel', group_order.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['state'] == 'cancelled'

    def test_other_supplier_forbidden(self, other_supplier_client, group_order):
        response = other_supplier_client.post(_detail('cancel', group_order.id))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['code'] == 'UnauthorizedError'

    def test_cancel_fulfilled_conflict(self, supplier_client, vendor_client, group_order):
        vendor_client.post(_detail('join', group_order.id), {'quantity': 100})
        response = supplier_client.post(_detail('cancel', group_order.id))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'GroupOrderClosedError'

    def test_cancel_past_deadline_conflict(self, supplier_client, group_order):
        GroupOrder.objects.filter(id=group_order.id).update(
            expires_at=timezone.now() - timedelta(minutes=1)
        )

        response = supplier_client.post(_detail('cancel', group_order.id))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'GroupOrderExpiredError'
        group_order.refresh_from_db()
        assert group_order.state == GroupOrderState.EXPIRED
