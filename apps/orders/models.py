from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import secrets
import uuid


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    CONFIRMED = 'confirmed', 'Confirmed'
    PROCESSING = 'processing', 'Processing'
    SHIPPED = 'shipped', 'Shipped'
    DELIVERED = 'delivered', 'Delivered'
    CANCELLED = 'cancelled', 'Cancelled'


# Allowed forward transitions; anything not listed is rejected
ORDER_STATUS_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


class Order(models.Model):
    """Purchase of raw materials by a vendor from one supplier."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=32, unique=True, editable=False)

    vendor = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='orders_placed'
    )
    supplier = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='orders_received'
    )

    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    currency = models.CharField(max_length=3, default='INR')
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING
    )

    # Set when the order was produced by settling a group order
    is_group_order = models.BooleanField(default=False)
    group_order = models.ForeignKey(
        'group_orders.GroupOrder',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders'
    )

    delivery_address = models.TextField(blank=True)
    estimated_delivery = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        indexes = [
            models.Index(fields=['vendor', 'created_at'], name='orders_vendor_idx'),
            models.Index(fields=['supplier', 'status'], name='orders_supplier_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.order_number} ({self.status})"

    def save(self, *args, **kwargs):
        if not self.order_number:
            self.order_number = self._generate_order_number()
        super().save(*args, **kwargs)

    @staticmethod
    def _generate_order_number():
        # Format: ORD-<yyyymmdd>-<8 hex>
        return f"ORD-{timezone.now():%Y%m%d}-{secrets.token_hex(4).upper()}"

    def can_transition_to(self, new_status):
        return new_status in ORDER_STATUS_TRANSITIONS[OrderStatus(self.status)]


class OrderItem(models.Model):
    """One product line within an order, priced at order time."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.PROTECT,
        related_name='order_items'
    )
    product_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    line_total = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        db_table = 'order_items'
        unique_together = [['order', 'product']]

    def __str__(self):
        return f"{self.quantity} x {self.product_name}"
