import pytest
from decimal import Decimal
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.collection.models import CollectionItem


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def analytics_user(db):
    """Create the main analytics test user."""
    return User.objects.create_user(
        email='analytics_user@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def analytics_outsider(db):
    """Create a user whose items must never be counted."""
    return User.objects.create_user(
        email='analytics_outsider@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def analytics_user_client(api_client, analytics_user):
    """Return an API client authenticated as analytics_user."""
    refresh = RefreshToken.for_user(analytics_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


# =============================================================================
# Collection
# =============================================================================

@pytest.fixture
def analytics_items(analytics_user, analytics_outsider):
    """
    A small collection around the week of 2025-03-03 (Monday).

    badges    Genshin      10 x 2   2025-03-03  owned
    plush     Stray Kids   89 x 1   2025-03-05  sold for 100
    figure    (no IP)      30 x 1   2025-01-10  wishlist
    cards     Genshin       5 x 4   no date     owned

    Plus one item of another user.
    """
    items = {
        'badges': CollectionItem.objects.create(
            id='stat-badges',
            user=analytics_user,
            name='Klee badges',
            ip='Genshin',
            character='Klee',
            category='badge',
            price=Decimal('10.00'),
            quantity=2,
            purchase_date=date(2025, 3, 3),
        ),
        'plush': CollectionItem.objects.create(
            id='stat-plush',
            user=analytics_user,
            name='Bangchan plush',
            ip='Stray Kids',
            character='Bangchan',
            category='plush',
            source_type='kpop',
            price=Decimal('89.00'),
            status='sold',
            sold_price=Decimal('100.00'),
            purchase_date=date(2025, 3, 5),
        ),
        'figure': CollectionItem.objects.create(
            id='stat-figure',
            user=analytics_user,
            name='Standee',
            category='figure',
            source_type='other',
            price=Decimal('30.00'),
            status='wishlist',
            purchase_date=date(2025, 1, 10),
        ),
        'cards': CollectionItem.objects.create(
            id='stat-cards',
            user=analytics_user,
            name='Paimon cards',
            ip='Genshin',
            character='Paimon',
            category='card',
            price=Decimal('5.00'),
            quantity=4,
            purchase_date=None,
        ),
    }
    CollectionItem.objects.create(
        id='stat-foreign',
        user=analytics_outsider,
        name='Foreign CD',
        ip='Foreign IP',
        category='cd',
        price=Decimal('500.00'),
        purchase_date=date(2025, 3, 4),
    )
    return items
