# ==========================================
# apps/catalog/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid
import re


class ProductCategory(models.TextChoices):
    GRAINS = 'grains', 'Grains & Pulses'
    VEGETABLES = 'vegetables', 'Vegetables'
    SPICES = 'spices', 'Spices'
    OILS = 'oils', 'Oils & Ghee'
    DAIRY = 'dairy', 'Dairy'
    OTHER = 'other', 'Other'


class ProductUnit(models.TextChoices):
    KG = 'kg', 'Kilogram'
    LITRE = 'litre', 'Litre'
    PIECE = 'piece', 'Piece'
    PACKET = 'packet', 'Packet'
    DOZEN = 'dozen', 'Dozen'


class Product(models.Model):
    """Raw material offered by a supplier."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    supplier = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='products')
    name = models.CharField(max_length=200)
    name_normalized = models.CharField(max_length=200, db_index=True, editable=False)
    category = models.CharField(max_length=20, choices=ProductCategory.choices, default=ProductCategory.OTHER)
    description = models.TextField(blank=True)
    unit = models.CharField(max_length=20, choices=ProductUnit.choices, default=ProductUnit.KG)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text='Price per unit in INR'
    )
    stock_quantity = models.PositiveIntegerField(default=0)
    min_order_quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        indexes = [
            models.Index(fields=['supplier', 'is_active'], name='products_supplier_idx'),
            models.Index(fields=['category', 'is_active'], name='products_category_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.supplier.get_display_name()})"

    def save(self, *args, **kwargs):
        self.name_normalized = self._normalize_string(self.name)
        super().save(*args, **kwargs)

    @staticmethod
    def _normalize_string(text):
        """Lowercase, strip punctuation and collapse whitespace."""
        text = re.sub(r'[^\w\s]', '', text.lower())
        return re.sub(r'\s+', ' ', text).strip()

    @property
    def in_stock(self):
        return self.stock_quantity >= self.min_order_quantity
