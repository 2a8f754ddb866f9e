from django.contrib import admin
from apps.group_orders.models import GroupOrder, DiscountTier, ParticipantEntry, ParticipantSettlement


class DiscountTierInline(admin.TabularInline):
    """Inline admin for discount tiers."""
    model = DiscountTier
    extra = 0


class ParticipantEntryInline(admin.TabularInline):
    """Inline admin for participants."""
    model = ParticipantEntry
    extra = 0
    fields = ['vendor', 'quantity', 'joined_at', 'withdrawn', 'withdrawn_at']
    readonly_fields = fields


@admin.register(GroupOrder)
class GroupOrderAdmin(admin.ModelAdmin):
    """Admin interface for Group Orders."""

    list_display = [
        'id',
        'product',
        'supplier',
        'current_quantity',
        'target_quantity',
        'state',
        'expires_at',
    ]
    list_filter = ['state', 'expires_at']
    search_fields = ['product__name', 'supplier__email', 'supplier__business_name']
    # Quantities and state only change through the service layer
    readonly_fields = [
        'current_quantity',
        'state',
        'base_price',
        'applied_discount_percentage',
        'final_unit_price',
        'closed_at',
        'created_at',
        'updated_at',
    ]
    inlines = [DiscountTierInline, ParticipantEntryInline]
    date_hierarchy = 'expires_at'

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('product', 'supplier')


@admin.register(ParticipantSettlement)
class ParticipantSettlementAdmin(admin.ModelAdmin):
    """Admin interface for settled participant prices."""

    list_display = ['group_order', 'vendor', 'quantity', 'unit_price', 'total_price', 'created_at']
    search_fields = ['vendor__email', 'vendor__business_name']
    readonly_fields = [
        'group_order',
        'entry',
        'vendor',
        'quantity',
        'unit_price',
        'discount_percentage',
        'total_price',
        'created_at',
    ]
