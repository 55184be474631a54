"""User authentication service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError, UserRegistrationError

logger = logging.getLogger(__name__)

User = get_user_model()


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Authenticate user with email and password.

    Uses select_for_update() to prevent race conditions when updating last_login.

    Args:
        email: User's email
        password: User's password

    Returns:
        Authenticated User instance

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If account is deactivated
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email__iexact=email)
        )
    except User.DoesNotExist:
        raise InvalidCredentialsError("Invalid email or password")

    if not user.check_password(password):
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    return user


@transaction.atomic
def register_user(*, email: str, password: str) -> User:
    """
    Register a new account.

    Raises:
        UserRegistrationError: If the account cannot be created
    """
    try:
        user = User.objects.create_user(email=email, password=password)
    except (IntegrityError, ValueError) as e:
        raise UserRegistrationError(f"Registration failed: {e}")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    logger.info("Registered new account %s", user.id)
    return user


def sign_in_or_register(*, email: str, password: str) -> tuple[User, bool]:
    """
    Sign in with a credential pair, creating the account on first use.

    An unknown email is registered on the spot; a known email with a
    wrong password is still rejected.

    Returns:
        (user, created) tuple

    Raises:
        InvalidCredentialsError: If the email exists and the password is wrong
        InactiveAccountError: If account is deactivated
        UserRegistrationError: If the account cannot be created
    """
    if not User.objects.filter(email__iexact=email).exists():
        return register_user(email=email, password=password), True

    return authenticate_user(email=email, password=password), False
