import pytest
from decimal import Decimal
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from apps.analytics import periods


# =============================================================================
# Authentication
# =============================================================================

@pytest.mark.django_db
class TestAuthenticationRequired:

    @pytest.mark.parametrize('name', ['filters', 'stats', 'distribution', 'summary'])
    def test_requires_authentication(self, api_client, name):
        response = api_client.get(reverse(f'analytics:{name}'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Filters Endpoint
# =============================================================================

@pytest.mark.django_db
class TestFilters:
    """Tests for GET /api/analytics/filters/"""

    def test_facets_of_own_items(self, analytics_user_client, analytics_items):
        response = analytics_user_client.get(reverse('analytics:filters'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['ips'] == ['Stray Kids', 'Genshin']
        assert 'Foreign IP' not in response.data['ips']

    def test_empty_collection(self, analytics_user_client):
        response = analytics_user_client.get(reverse('analytics:filters'))

        assert response.data == {'ips': [], 'characters': []}


# =============================================================================
# Stats Endpoint
# =============================================================================

@pytest.mark.django_db
class TestStats:
    """Tests for GET /api/analytics/stats/"""

    def test_bundle(self, analytics_user_client, analytics_items):
        response = analytics_user_client.get(reverse('analytics:stats'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['overview_all']['total'] == Decimal('159')
        assert response.data['overview_all']['sold'] == Decimal('100')
        assert response.data['category_dist_count'][0]['name'] == 'card'
        assert len(response.data['time_dist']) == 3

    def test_other_users_items_not_counted(self, analytics_user_client, analytics_outsider, analytics_items):
        response = analytics_user_client.get(reverse('analytics:stats'))

        names = [row['name'] for row in response.data['ip_dist_amount']]
        assert 'Foreign IP' not in names


# =============================================================================
# Distribution Endpoint
# =============================================================================

@pytest.mark.django_db
class TestDistribution:
    """Tests for GET /api/analytics/distribution/"""

    def test_explicit_period(self, analytics_user_client, analytics_items):
        response = analytics_user_client.get(
            reverse('analytics:distribution'),
            {'granularity': 'week', 'period': '2025-10周', 'rank_by': 'ip'}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['period'] == '2025-10周'
        assert len(response.data['buckets']) == 7
        assert response.data['total'] == Decimal('109')
        assert response.data['ranking'][0]['name'] == 'Stray Kids'

    def test_defaults_to_current_month(self, analytics_user_client, analytics_items):
        response = analytics_user_client.get(reverse('analytics:distribution'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['granularity'] == 'month'
        assert response.data['period'] == periods.period_label(timezone.localdate(), 'month')

    def test_empty_collection(self, analytics_user_client):
        response = analytics_user_client.get(reverse('analytics:distribution'), {'granularity': 'year'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['ranges'] == []
        assert response.data['buckets'] == []

    def test_invalid_granularity(self, analytics_user_client):
        response = analytics_user_client.get(reverse('analytics:distribution'), {'granularity': 'day'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'granularity' in response.data

    def test_invalid_rank_key(self, analytics_user_client):
        response = analytics_user_client.get(reverse('analytics:distribution'), {'rank_by': 'character'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_period_not_matching_granularity(self, analytics_user_client, analytics_items):
        response = analytics_user_client.get(
            reverse('analytics:distribution'),
            {'granularity': 'year', 'period': '2025-03月'}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data


# =============================================================================
# Summary Endpoint
# =============================================================================

@pytest.mark.django_db
class TestSummary:
    """Tests for GET /api/analytics/summary/"""

    def test_counters(self, analytics_user_client, analytics_items):
        response = analytics_user_client.get(reverse('analytics:summary'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_items'] == 8
        assert response.data['total_ips'] == 2
        assert response.data['total_spent'] == Decimal('159')
        assert response.data['total_earned'] == Decimal('100')
