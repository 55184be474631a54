"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidImageError,
)
from .user_authentication import authenticate_user, register_user, sign_in_or_register
from .profile_management import get_or_provision_profile, upsert_profile, update_avatar

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidImageError',
    # Services
    'authenticate_user',
    'register_user',
    'sign_in_or_register',
    'get_or_provision_profile',
    'upsert_profile',
    'update_avatar',
]
