"""Profile management service."""

import logging

from django.conf import settings
from django.db import transaction

from apps.accounts.models import Profile, User
from apps.collection.services.images import encode_image_data_url
from .exceptions import InvalidImageError

logger = logging.getLogger(__name__)


def get_or_provision_profile(*, user: User) -> Profile:
    """
    Return the user's profile, creating a default one if missing.

    A missing profile is not an error: the first authenticated session of
    an account provisions it.

    Args:
        user: Profile owner

    Returns:
        Existing or newly created Profile
    """
    try:
        return Profile.objects.get(user=user)
    except Profile.DoesNotExist:
        profile, created = Profile.objects.get_or_create(
            user=user,
            defaults={
                'name': user.get_default_profile_name(),
                'bio': Profile.DEFAULT_BIO,
                'avatar': settings.DEFAULT_AVATAR_URL,
            }
        )
        if created:
            logger.info("Provisioned default profile for user %s", user.id)
        return profile


@transaction.atomic
def upsert_profile(*, user: User, **fields) -> Profile:
    """
    Create or update the user's profile.

    Args:
        user: Profile owner
        **fields: Any of name, bio, avatar

    Returns:
        Saved Profile
    """
    allowed = {key: value for key, value in fields.items() if key in ('name', 'bio', 'avatar')}
    profile, _ = Profile.objects.update_or_create(user=user, defaults=allowed)
    return profile


def update_avatar(*, user: User, uploaded_file) -> Profile:
    """
    Replace the avatar with an uploaded image (stored as data URL).

    Raises:
        InvalidImageError: If the upload is not a usable image
    """
    try:
        data_url = encode_image_data_url(uploaded_file)
    except ValueError as e:
        raise InvalidImageError(str(e))

    get_or_provision_profile(user=user)
    return upsert_profile(user=user, avatar=data_url)
