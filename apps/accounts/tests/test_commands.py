import pytest
from io import StringIO
from django.core.management import call_command

from apps.accounts.models import User, UserType
from apps.catalog.models import Product
from apps.group_orders.models import GroupOrder
from apps.orders.models import Order


@pytest.mark.django_db
class TestCreateSampleData:
    """Tests for the create_sample_data management command."""

    def test_creates_marketplace(self):
        out = StringIO()
        call_command('create_sample_data', stdout=out)

        assert 'Sample data created successfully!' in out.getvalue()
        assert User.objects.filter(user_type='supplier').count() == 2
        assert User.objects.filter(user_type='vendor').count() == 3
        assert Product.objects.count() == 5
        assert Order.objects.filter(is_group_order=False).count() == 1
        group_order = GroupOrder.objects.get()
        assert group_order.current_quantity == 75

    def test_rerun_is_idempotent(self):
        call_command('create_sample_data', stdout=StringIO())
        call_command('create_sample_data', stdout=StringIO())

        assert Product.objects.count() == 5
        assert Order.objects.count() == 1
        assert GroupOrder.objects.count() == 1

    def test_clear(self):
        call_command('create_sample_data', stdout=StringIO())
        call_command('create_sample_data', '--clear', stdout=StringIO())

        assert GroupOrder.objects.count() == 1
        assert Order.objects.count() == 1

    def test_admin_has_no_marketplace_role(self):
        call_command('create_sample_data', stdout=StringIO())

        admin = User.objects.get(email='admin@example.com')
        assert admin.is_superuser
        assert admin.user_type == UserType.STAFF
        assert not admin.is_vendor
        assert not admin.is_supplier
