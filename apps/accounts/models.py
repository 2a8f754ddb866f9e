from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


class UserType(models.TextChoices):
    VENDOR = 'vendor', 'Vendor'
    SUPPLIER = 'supplier', 'Supplier'
    # Operators and admins; cannot buy or sell
    STAFF = 'staff', 'Staff'


MARKETPLACE_USER_TYPES = (UserType.VENDOR, UserType.SUPPLIER)


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('user_type', UserType.STAFF)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Marketplace account: a street-food vendor, a supplier or staff."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    user_type = models.CharField(max_length=20, choices=UserType.choices, default=UserType.VENDOR)
    full_name = models.CharField(max_length=150, blank=True)
    phone = models.CharField(max_length=20, blank=True)

    # Business profile
    business_name = models.CharField(max_length=200, blank=True)
    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    pincode = models.CharField(max_length=10, blank=True)

    # Verification flags are set by external OTP/KYC flows
    phone_verified = models.BooleanField(default=False)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['user_type', 'city'], name='users_type_city_idx'),
            models.Index(fields=['created_at'], name='users_created_idx'),
        ]

    def __str__(self):
        return self.email

    @property
    def is_vendor(self):
        return self.user_type == UserType.VENDOR

    @property
    def is_supplier(self):
        return self.user_type == UserType.SUPPLIER

    @property
    def has_marketplace_role(self):
        return self.user_type in MARKETPLACE_USER_TYPES

    def get_display_name(self):
        """Return business name, full name or email prefix."""
        return self.business_name or self.full_name or self.email.split('@')[0]
