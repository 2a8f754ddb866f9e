# Generated manually for the street supply marketplace

import uuid
from decimal import Decimal
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='GroupOrder',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('target_quantity', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('current_quantity', models.PositiveIntegerField(default=0)),
                ('min_participants', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ('max_participants', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('state', models.CharField(choices=[('open', 'Open'), ('fulfilled', 'Fulfilled'), ('expired', 'Expired'), ('cancelled', 'Cancelled')], default='open', max_length=20)),
                ('expires_at', models.DateTimeField()),
                ('base_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('applied_discount_percentage', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('final_unit_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('closed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='group_orders', to='catalog.product')),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='group_orders_offered', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'group_orders',
                'ordering': ['expires_at'],
                'indexes': [
                    models.Index(fields=['state', 'expires_at'], name='group_orders_state_exp_idx'),
                    models.Index(fields=['product', 'state'], name='group_orders_product_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DiscountTier',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('threshold', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('discount_percentage', models.DecimalField(decimal_places=2, max_digits=5, validators=[django.core.validators.MinValueValidator(Decimal('0.00')), django.core.validators.MaxValueValidator(Decimal('100.00'))])),
                ('group_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='discount_tiers', to='group_orders.grouporder')),
            ],
            options={
                'db_table': 'group_order_discount_tiers',
                'ordering': ['threshold'],
                'unique_together': {('group_order', 'threshold')},
            },
        ),
        migrations.CreateModel(
            name='ParticipantEntry',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('quantity', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('joined_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('withdrawn', models.BooleanField(default=False)),
                ('withdrawn_at', models.DateTimeField(blank=True, null=True)),
                ('group_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='participants', to='group_orders.grouporder')),
                ('vendor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='group_order_entries', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'group_order_participants',
                'ordering': ['joined_at'],
                'indexes': [
                    models.Index(fields=['vendor', 'withdrawn'], name='participants_vendor_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('withdrawn', False)), fields=('group_order', 'vendor'), name='unique_active_participant'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ParticipantSettlement',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('quantity', models.PositiveIntegerField()),
                ('unit_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('discount_percentage', models.DecimalField(decimal_places=2, max_digits=5)),
                ('total_price', models.DecimalField(decimal_places=2, max_digits=12)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('entry', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='settlement', to='group_orders.participantentry')),
                ('group_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='settlements', to='group_orders.grouporder')),
                ('vendor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='group_order_settlements', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'group_order_settlements',
                'ordering': ['created_at'],
            },
        ),
    ]
