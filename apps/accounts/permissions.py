from rest_framework.permissions import BasePermission


class IsVendor(BasePermission):
    """
    Permission: User must be a street-food vendor.
    """

    message = 'Only vendor accounts can perform this action.'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_vendor)


class IsSupplier(BasePermission):
    """
    Permission: User must be a supplier.
    """

    message = 'Only supplier accounts can perform this action.'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_supplier)
