from decimal import Decimal
from rest_framework import serializers
from django.utils import timezone
from .models import GroupOrder, GroupOrderState, DiscountTier, ParticipantEntry, ParticipantSettlement
from apps.accounts.serializers import UserMinimalSerializer


class DiscountTierSerializer(serializers.ModelSerializer):
    """Discount tier, used for both input and output."""

    threshold = serializers.IntegerField(min_value=1)
    discount_percentage = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal('0.00'),
        max_value=Decimal('100.00'),
    )

    class Meta:
        model = DiscountTier
        fields = ['threshold', 'discount_percentage']


class GroupOrderSerializer(serializers.ModelSerializer):
    """Full group order with tiers and settlement snapshot."""

    supplier = UserMinimalSerializer(read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_unit = serializers.CharField(source='product.unit', read_only=True)
    discount_tiers = DiscountTierSerializer(many=True, read_only=True)
    participant_count = serializers.SerializerMethodField()
    # Stored state can lag the deadline until the order is accessed or swept
    is_past_deadline = serializers.SerializerMethodField()

    class Meta:
        model = GroupOrder
        fields = [
            'id',
            'supplier',
            'product',
            'product_name',
            'product_unit',
            'target_quantity',
            'current_quantity',
            'min_participants',
            'max_participants',
            'participant_count',
            'discount_tiers',
            'state',
            'expires_at',
            'is_past_deadline',
            'base_price',
            'applied_discount_percentage',
            'final_unit_price',
            'closed_at',
            'created_at',
        ]
        read_only_fields = fields

    def get_participant_count(self, obj):
        return obj.participants.filter(withdrawn=False).count()

    def get_is_past_deadline(self, obj):
        return obj.is_open and obj.has_expired(timezone.now())


class GroupOrderCreateSerializer(serializers.Serializer):
    """Input serializer for opening a group order."""

    product = serializers.UUIDField()
    target_quantity = serializers.IntegerField(min_value=1)
    min_participants = serializers.IntegerField(min_value=1, default=1)
    max_participants = serializers.IntegerField(min_value=1)
    discount_tiers = DiscountTierSerializer(many=True, allow_empty=False)
    expires_at = serializers.DateTimeField()

    def validate(self, data):
        if data['max_participants'] < data['min_participants']:
            raise serializers.ValidationError({
                'max_participants': 'Cannot be lower than min_participants.'
            })
        return data


class ParticipationSerializer(serializers.Serializer):
    """Input serializer for join and update_quantity."""

    quantity = serializers.IntegerField(min_value=1)


class GroupOrderFilterSerializer(serializers.Serializer):
    """Validates list query parameters."""

    state = serializers.ChoiceField(choices=GroupOrderState.choices, required=False)
    product = serializers.UUIDField(required=False)
    supplier = serializers.UUIDField(required=False)


class ParticipantEntrySerializer(serializers.ModelSerializer):
    """A vendor's commitment."""

    vendor = UserMinimalSerializer(read_only=True)

    class Meta:
        model = ParticipantEntry
        fields = ['id', 'group_order', 'vendor', 'quantity', 'joined_at', 'withdrawn', 'withdrawn_at']
        read_only_fields = fields


class ParticipantSettlementSerializer(serializers.ModelSerializer):
    """Settled price for one participant."""

    vendor = UserMinimalSerializer(read_only=True)
    order_number = serializers.SerializerMethodField()

    class Meta:
        model = ParticipantSettlement
        fields = [
            'id',
            'vendor',
            'quantity',
            'unit_price',
            'discount_percentage',
            'total_price',
            'order_number',
        ]
        read_only_fields = fields

    def get_order_number(self, obj):
        order = obj.order
        return order.order_number if order else None
