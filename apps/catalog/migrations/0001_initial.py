# Generated manually for the street supply marketplace

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('name_normalized', models.CharField(db_index=True, editable=False, max_length=200)),
                ('category', models.CharField(choices=[('grains', 'Grains & Pulses'), ('vegetables', 'Vegetables'), ('spices', 'Spices'), ('oils', 'Oils & Ghee'), ('dairy', 'Dairy'), ('other', 'Other')], default='other', max_length=20)),
                ('description', models.TextField(blank=True)),
                ('unit', models.CharField(choices=[('kg', 'Kilogram'), ('litre', 'Litre'), ('piece', 'Piece'), ('packet', 'Packet'), ('dozen', 'Dozen')], default='kg', max_length=20)),
                ('price', models.DecimalField(decimal_places=2, help_text='Price per unit in INR', max_digits=10, validators=[MinValueValidator(Decimal('0.01'))])),
                ('stock_quantity', models.PositiveIntegerField(default=0)),
                ('min_order_quantity', models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'products',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['supplier', 'is_active'], name='products_supplier_idx'),
                    models.Index(fields=['category', 'is_active'], name='products_category_idx'),
                ],
            },
        ),
    ]
