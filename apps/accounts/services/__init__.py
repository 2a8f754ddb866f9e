"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    AccountRoleError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user
from .supplier_directory import list_suppliers

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'AccountRoleError',
    # Services
    'register_user',
    'authenticate_user',
    'list_suppliers',
]
