import pytest
from datetime import date
from uuid import uuid4
from decimal import Decimal
from django.core.cache import cache
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.collection.models import CollectionItem


@pytest.fixture(autouse=True)
def clear_cache():
    """Start every test with an empty summary cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='collector@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def other_user(db):
    """Create and return another test user."""
    return User.objects.create_user(
        email='otheruser@example.com',
        password='OtherPass123!',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def make_item(db, user):
    """Factory for saved items; defaults describe an owned anime badge."""
    counter = {'n': 0}

    def _make_item(**fields):
        counter['n'] += 1
        data = {
            'id': f'item-{counter["n"]}',
            'user': user,
            'name': f'Item {counter["n"]}',
            'ip': 'Genshin',
            'character': 'Klee',
            'category': 'badge',
            'source_type': 'anime',
            'price': Decimal('10.00'),
            'quantity': 1,
            'status': 'owned',
            'purchase_date': date(2024, 5, 1),
        }
        data.update(fields)
        return CollectionItem.objects.create(**data)

    return _make_item


@pytest.fixture
def badge(make_item):
    return make_item(name='Klee badge', ip='Genshin', character='Klee')


@pytest.fixture
def plush(make_item):
    return make_item(
        name='Bangchan plush',
        ip='Stray Kids',
        character='Bangchan',
        category='plush',
        source_type='kpop',
        price=Decimal('89.00'),
        status='transit',
        purchase_date=date(2024, 3, 2),
    )


@pytest.fixture
def other_item(db, other_user):
    """An item of another account."""
    return CollectionItem.objects.create(
        id='foreign-1',
        user=other_user,
        name='Foreign figure',
        category='figure',
        price=Decimal('120.00'),
    )


def build_item(**fields):
    """Unsaved item for pure in-memory tests."""
    data = {
        'id': uuid4().hex,
        'name': 'Item',
        'ip': '',
        'character': '',
        'category': 'badge',
        'source_type': 'anime',
        'price': Decimal('0'),
        'quantity': 1,
        'status': 'owned',
        'purchase_date': None,
        'is_pinned': False,
    }
    data.update(fields)
    return CollectionItem(**data)
