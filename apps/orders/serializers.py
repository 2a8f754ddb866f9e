from rest_framework import serializers
from .models import Order, OrderItem, OrderStatus
from apps.accounts.serializers import UserMinimalSerializer


class OrderItemSerializer(serializers.ModelSerializer):
    """Order line."""

    class Meta:
        model = OrderItem
        fields = ['id', 'product', 'product_name', 'quantity', 'unit_price', 'line_total']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Full order with nested items and parties."""

    vendor = UserMinimalSerializer(read_only=True)
    supplier = UserMinimalSerializer(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id',
            'order_number',
            'vendor',
            'supplier',
            'total_amount',
            'currency',
            'status',
            'is_group_order',
            'group_order',
            'delivery_address',
            'estimated_delivery',
            'notes',
            'items',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class OrderItemInputSerializer(serializers.Serializer):
    """One requested line of a new order."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class OrderCreateSerializer(serializers.Serializer):
    """Input serializer for placing an order."""

    items = OrderItemInputSerializer(many=True, allow_empty=False)
    delivery_address = serializers.CharField(required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class OrderStatusUpdateSerializer(serializers.Serializer):
    """Input serializer for status changes."""

    status = serializers.ChoiceField(choices=OrderStatus.choices)


class OrderFilterSerializer(serializers.Serializer):
    """Validates list query parameters."""

    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
