from django.contrib import admin
from apps.orders.models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    """Inline admin for order lines."""
    model = OrderItem
    extra = 0
    fields = ['product', 'product_name', 'quantity', 'unit_price', 'line_total']
    readonly_fields = fields


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin interface for Orders."""

    list_display = [
        'order_number',
        'vendor',
        'supplier',
        'total_amount',
        'status',
        'is_group_order',
        'created_at',
    ]
    list_filter = ['status', 'is_group_order', 'created_at']
    search_fields = ['order_number', 'vendor__email', 'supplier__email', 'vendor__business_name']
    readonly_fields = ['order_number', 'total_amount', 'group_order', 'created_at', 'updated_at']
    inlines = [OrderItemInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('vendor', 'supplier')
