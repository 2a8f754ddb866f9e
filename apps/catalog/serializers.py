from decimal import Decimal

from rest_framework import serializers
from .models import Product, ProductCategory, ProductUnit
from apps.accounts.serializers import UserMinimalSerializer


class ProductSerializer(serializers.ModelSerializer):
    """Main serializer for products."""

    supplier = UserMinimalSerializer(read_only=True)
    in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id',
            'supplier',
            'name',
            'category',
            'description',
            'unit',
            'price',
            'stock_quantity',
            'min_order_quantity',
            'in_stock',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'supplier', 'created_at', 'updated_at']


class ProductListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    supplier_name = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id',
            'name',
            'category',
            'unit',
            'price',
            'min_order_quantity',
            'stock_quantity',
            'supplier_name',
        ]
        read_only_fields = fields

    def get_supplier_name(self, obj):
        return obj.supplier.get_display_name()


class ProductCreateSerializer(serializers.Serializer):
    """Input serializer for creating a product."""

    name = serializers.CharField(max_length=200)
    category = serializers.ChoiceField(choices=ProductCategory.choices, default=ProductCategory.OTHER)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    unit = serializers.ChoiceField(choices=ProductUnit.choices, default=ProductUnit.KG)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    stock_quantity = serializers.IntegerField(min_value=0, default=0)
    min_order_quantity = serializers.IntegerField(min_value=1, default=1)


class ProductUpdateSerializer(serializers.Serializer):
    """Input serializer for partial product updates."""

    name = serializers.CharField(max_length=200, required=False)
    category = serializers.ChoiceField(choices=ProductCategory.choices, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    unit = serializers.ChoiceField(choices=ProductUnit.choices, required=False)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'), required=False)
    stock_quantity = serializers.IntegerField(min_value=0, required=False)
    min_order_quantity = serializers.IntegerField(min_value=1, required=False)
    is_active = serializers.BooleanField(required=False)
