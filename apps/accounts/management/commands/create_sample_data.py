"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data

This creates:
- 1 admin, 2 suppliers and 3 vendors
- A small catalog for each supplier
- One direct order
- One open group order with two participants
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from decimal import Decimal
from datetime import timedelta

from apps.accounts.models import User, UserType
from apps.catalog.models import Product
from apps.group_orders.models import GroupOrder
from apps.group_orders.services import create_group_order, join_group_order
from apps.orders.models import Order
from apps.orders.services import place_order

SAMPLE_PASSWORD = 'password123'


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        products = self.create_products(users)
        self.create_orders(users, products)
        self.create_group_orders(users, products)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        for key in ('kumar', 'sharma', 'rajesh', 'priya', 'amit'):
            self.stdout.write(f'  {users[key].email} / {SAMPLE_PASSWORD} ({users[key].user_type})')

    def clear_data(self):
        """Clear all marketplace data from the database."""
        Order.objects.all().delete()
        GroupOrder.objects.all().delete()
        Product.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def _user(self, email, **defaults):
        user, created = User.objects.get_or_create(email=email, defaults=defaults)
        if created:
            user.set_password(SAMPLE_PASSWORD)
            user.save()
        return user

    def create_users(self):
        """Create test users."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'full_name': 'Admin User',
                'user_type': UserType.STAFF,
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        return {
            'admin': admin,
            'kumar': self._user(
                'kumar@example.com',
                user_type=UserType.SUPPLIER,
                business_name='Kumar Wholesale',
                city='Delhi',
            ),
            'sharma': self._user(
                'sharma@example.com',
                user_type=UserType.SUPPLIER,
                business_name='Sharma Spices',
                city='Delhi',
            ),
            'rajesh': self._user(
                'rajesh@example.com',
                user_type=UserType.VENDOR,
                business_name='Rajesh Chaat Corner',
                address='Chandni Chowk, Delhi',
                city='Delhi',
            ),
            'priya': self._user(
                'priya@example.com',
                user_type=UserType.VENDOR,
                business_name='Priya Dosa Point',
                address='Lajpat Nagar, Delhi',
                city='Delhi',
            ),
            'amit': self._user(
                'amit@example.com',
                user_type=UserType.VENDOR,
                business_name='Amit Pav Bhaji',
                address='Karol Bagh, Delhi',
                city='Delhi',
            ),
        }

    def create_products(self, users):
        """Create each supplier's catalog."""
        self.stdout.write('  Creating products...')

        catalog = [
            ('kumar', 'Basmati Rice', 'grains', 'kg', '95.00', 800, 10),
            ('kumar', 'Refined Oil', 'oils', 'litre', '140.00', 500, 5),
            ('kumar', 'Onions', 'vegetables', 'kg', '35.00', 1200, 20),
            ('sharma', 'Red Chilli Powder', 'spices', 'kg', '260.00', 150, 2),
            ('sharma', 'Garam Masala', 'spices', 'kg', '420.00', 80, 1),
        ]

        products = {}
        for supplier_key, name, category, unit, price, stock, minimum in catalog:
            product, _ = Product.objects.get_or_create(
                supplier=users[supplier_key],
                name=name,
                defaults={
                    'category': category,
                    'unit': unit,
                    'price': Decimal(price),
                    'stock_quantity': stock,
                    'min_order_quantity': minimum,
                }
            )
            products[name] = product
        return products

    def create_orders(self, users, products):
        """Place a direct order."""
        self.stdout.write('  Creating orders...')

        if Order.objects.filter(vendor=users['rajesh'], is_group_order=False).exists():
            return
        place_order(
            vendor=users['rajesh'],
            items=[
                {'product_id': products['Onions'].id, 'quantity': 40},
                {'product_id': products['Basmati Rice'].id, 'quantity': 25},
            ],
            notes='Morning delivery please',
        )

    def create_group_orders(self, users, products):
        """Open a group order and add participants."""
        self.stdout.write('  Creating group orders...')

        oil = products['Refined Oil']
        if GroupOrder.objects.filter(product=oil).exists():
            return
        group_order = create_group_order(
            supplier=users['kumar'],
            product_id=oil.id,
            target_quantity=200,
            min_participants=2,
            max_participants=8,
            discount_tiers=[(50, Decimal('5')), (100, Decimal('10')), (200, Decimal('18'))],
            expires_at=timezone.now() + timedelta(days=3),
        )
        join_group_order(group_order_id=group_order.id, vendor=users['rajesh'], quantity=40)
        join_group_order(group_order_id=group_order.id, vendor=users['priya'], quantity=35)
