# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for marketplace accounts."""

    list_display = [
        'email',
        'business_name',
        'user_type',
        'city',
        'phone_verified',
        'is_active',
        'created_at',
    ]

    list_filter = [
        'user_type',
        'is_active',
        'is_staff',
        'phone_verified',
        'city',
        'created_at',
    ]

    search_fields = [
        'email',
        'full_name',
        'business_name',
        'phone',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'user_type', 'full_name', 'phone', 'password')
        }),
        ('Business', {
            'fields': ('business_name', 'address', 'city', 'pincode'),
        }),
        ('Verification', {
            'fields': ('phone_verified',),
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'user_type', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'updated_at', 'last_login']

    actions = ['mark_phone_verified']

    @admin.action(description='Mark phone as verified')
    def mark_phone_verified(self, request, queryset):
        updated = queryset.update(phone_verified=True)
        self.message_user(request, f"{updated} user(s) marked as phone verified.")
