"""User registration service."""

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model
import structlog

from .exceptions import UserRegistrationError

User = get_user_model()
logger = structlog.get_logger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    user_type: str,
    full_name: str = "",
    phone: str = "",
    business_name: str = "",
    address: str = "",
    city: str = "",
    pincode: str = "",
) -> User:
    """
    Register a new vendor or supplier account.

    Phone verification happens out of band; new accounts start with
    ``phone_verified=False``.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        user_type: 'vendor' or 'supplier'
        full_name: Contact person name
        phone: Contact phone number
        business_name: Stall or company name
        address, city, pincode: Business location

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is already registered
    """
    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            user_type=user_type,
            full_name=full_name,
            phone=phone,
            business_name=business_name,
            address=address,
            city=city,
            pincode=pincode,
        )
    except IntegrityError:
        raise UserRegistrationError(f"Registration failed: {email} is already registered")

    logger.info("user_registered", user_id=str(user.id), user_type=user.user_type)
    return user
