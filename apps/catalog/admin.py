from django.contrib import admin
from apps.catalog.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Products."""

    list_display = [
        'name',
        'supplier',
        'category',
        'price',
        'unit',
        'stock_quantity',
        'min_order_quantity',
        'is_active',
    ]
    list_filter = ['category', 'unit', 'is_active', 'created_at']
    search_fields = ['name', 'supplier__email', 'supplier__business_name']
    readonly_fields = ['name_normalized', 'created_at', 'updated_at']
    ordering = ['name']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('supplier')
