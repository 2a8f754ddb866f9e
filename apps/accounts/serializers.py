from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from apps.catalog.models import Product
from .models import User, MARKETPLACE_USER_TYPES


class UserSerializer(serializers.ModelSerializer):
    """Profile serializer for the authenticated user."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'user_type',
            'full_name',
            'phone',
            'business_name',
            'address',
            'city',
            'pincode',
            'phone_verified',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'email', 'user_type', 'phone_verified', 'created_at', 'last_login']


class UserRegistrationSerializer(serializers.ModelSerializer):
    """Serializer for vendor/supplier registration."""

    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    user_type = serializers.ChoiceField(
        choices=[(user_type.value, user_type.label) for user_type in MARKETPLACE_USER_TYPES],
        required=True,
    )

    class Meta:
        model = User
        fields = [
            'email',
            'password',
            'password_confirm',
            'user_type',
            'full_name',
            'phone',
            'business_name',
            'address',
            'city',
            'pincode',
        ]

    def validate_phone(self, value):
        digits = value.replace('+', '').replace(' ', '')
        if value and not digits.isdigit():
            raise serializers.ValidationError('Phone number may contain only digits, spaces and a leading +')
        return value

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )
    user_type = serializers.ChoiceField(
        choices=[(user_type.value, user_type.label) for user_type in MARKETPLACE_USER_TYPES],
        required=False,
    )


class UserMinimalSerializer(serializers.ModelSerializer):
    """Public user info for nesting in products and orders."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'display_name', 'user_type', 'city']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class SupplierProductSerializer(serializers.ModelSerializer):
    """Product line as listed in the supplier directory."""

    class Meta:
        model = Product
        fields = ['id', 'name', 'category', 'unit', 'price', 'min_order_quantity']
        read_only_fields = fields


class SupplierDirectorySerializer(serializers.ModelSerializer):
    """Supplier card: business profile, specialties and products."""

    display_name = serializers.SerializerMethodField()
    specialties = serializers.SerializerMethodField()
    products = SupplierProductSerializer(source='active_products', many=True, read_only=True)
    open_group_order_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'display_name',
            'business_name',
            'full_name',
            'phone',
            'address',
            'city',
            'phone_verified',
            'specialties',
            'products',
            'open_group_order_count',
        ]
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()

    def get_specialties(self, obj):
        """Distinct category labels of the supplier's active products."""
        labels = []
        for product in obj.active_products:
            label = product.get_category_display()
            if label not in labels:
                labels.append(label)
        return labels
