from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid


class GroupOrderState(models.TextChoices):
    OPEN = 'open', 'Open'
    FULFILLED = 'fulfilled', 'Fulfilled'
    EXPIRED = 'expired', 'Expired'
    CANCELLED = 'cancelled', 'Cancelled'


TERMINAL_STATES = frozenset({
    GroupOrderState.FULFILLED,
    GroupOrderState.EXPIRED,
    GroupOrderState.CANCELLED,
})


class GroupOrder(models.Model):
    """
    Pooled purchase of one product from one supplier.

    Vendors commit quantities until the target or the participant cap is
    reached. current_quantity always equals the sum of active entries and is
    only written while the row is locked.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    supplier = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='group_orders_offered'
    )
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.PROTECT,
        related_name='group_orders'
    )

    target_quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    current_quantity = models.PositiveIntegerField(default=0)
    min_participants = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    max_participants = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    state = models.CharField(
        max_length=20,
        choices=GroupOrderState.choices,
        default=GroupOrderState.OPEN
    )
    expires_at = models.DateTimeField()

    # Settlement snapshot, written once when the order is fulfilled
    base_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    applied_discount_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True
    )
    final_unit_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    closed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'group_orders'
        indexes = [
            models.Index(fields=['state', 'expires_at'], name='group_orders_state_exp_idx'),
            models.Index(fields=['product', 'state'], name='group_orders_product_idx'),
        ]
        ordering = ['expires_at']

    def __str__(self):
        return f"{self.product_id}: {self.current_quantity}/{self.target_quantity} ({self.state})"

    @property
    def is_open(self):
        return self.state == GroupOrderState.OPEN

    @property
    def is_terminal(self):
        return self.state in TERMINAL_STATES

    def has_expired(self, now=None):
        return (now or timezone.now()) >= self.expires_at


class DiscountTier(models.Model):
    """Percentage off the base price once committed quantity reaches threshold."""

    group_order = models.ForeignKey(
        GroupOrder,
        on_delete=models.CASCADE,
        related_name='discount_tiers'
    )
    threshold = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    discount_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[
            MinValueValidator(Decimal('0.00')),
            MaxValueValidator(Decimal('100.00')),
        ]
    )

    class Meta:
        db_table = 'group_order_discount_tiers'
        unique_together = [['group_order', 'threshold']]
        ordering = ['threshold']

    def __str__(self):
        return f">= {self.threshold}: {self.discount_percentage}%"


class ParticipantEntry(models.Model):
    """A vendor's commitment to a group order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group_order = models.ForeignKey(
        GroupOrder,
        on_delete=models.CASCADE,
        related_name='participants'
    )
    vendor = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='group_order_entries'
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    joined_at = models.DateTimeField(default=timezone.now)
    withdrawn = models.BooleanField(default=False)
    withdrawn_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'group_order_participants'
        constraints = [
            models.UniqueConstraint(
                fields=['group_order', 'vendor'],
                condition=models.Q(withdrawn=False),
                name='unique_active_participant',
            ),
        ]
        indexes = [
            models.Index(fields=['vendor', 'withdrawn'], name='participants_vendor_idx'),
        ]
        ordering = ['joined_at']

    def __str__(self):
        return f"{self.vendor_id} x{self.quantity} in {self.group_order_id}"


class ParticipantSettlement(models.Model):
    """Price a participant owes after fulfilment."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group_order = models.ForeignKey(
        GroupOrder,
        on_delete=models.CASCADE,
        related_name='settlements'
    )
    entry = models.OneToOneField(
        ParticipantEntry,
        on_delete=models.CASCADE,
        related_name='settlement'
    )
    vendor = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='group_order_settlements'
    )
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    discount_percentage = models.DecimalField(max_digits=5, decimal_places=2)
    total_price = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'group_order_settlements'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.vendor_id}: {self.total_price}"

    @property
    def order(self):
        """Marketplace order generated for this participant."""
        return self.group_order.orders.filter(vendor_id=self.vendor_id).first()
