"""Marketplace login."""

from typing import Optional

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone
import structlog

from .exceptions import InvalidCredentialsError, InactiveAccountError, AccountRoleError

User = get_user_model()
logger = structlog.get_logger(__name__)


@transaction.atomic
def authenticate_user(*, email: str, password: str, user_type: Optional[str] = None) -> User:
    """
    Log a vendor or supplier into the marketplace.

    Staff accounts have no marketplace role and use the admin site instead.
    When ``user_type`` is given (the role picked on the login screen) it must
    match the account's role.

    Raises:
        InvalidCredentialsError: If the email or password is wrong
        InactiveAccountError: If the account is deactivated
        AccountRoleError: If the account cannot log in under that role
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email=User.objects.normalize_email(email))
        )
    except User.DoesNotExist:
        logger.info("login_failed", reason="unknown_email")
        raise InvalidCredentialsError("Invalid email or password")

    if not user.check_password(password):
        logger.info("login_failed", reason="bad_password", user_id=str(user.id))
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    if not user.has_marketplace_role:
        logger.info("login_failed", reason="no_marketplace_role", user_id=str(user.id))
        raise AccountRoleError("This account has no vendor or supplier role")

    if user_type and user.user_type != user_type:
        raise AccountRoleError(f"This account is registered as a {user.user_type}, not a {user_type}")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    logger.info("user_logged_in", user_id=str(user.id), user_type=user.user_type)
    return user
