"""
Serializers for analytics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - API documentation and output formatting

Input Serializers:
    DistributionQuerySerializer - Validates distribution chart parameters

Response Serializers:
    FilterFacetsSerializer - Distinct IPs and characters
    StatsBundleSerializer - Overviews, distributions and chart records
    DistributionResponseSerializer - One bucketed chart period
    CollectionSummarySerializer - Profile counters
"""

from rest_framework import serializers

from .periods import GRANULARITIES, MONTH, RANK_KEYS


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class DistributionQuerySerializer(serializers.Serializer):
    """
    Validate distribution chart query parameters.

    Used by: distribution

    Query Parameters:
        granularity (str): 'week', 'month' or 'year' (default: 'month')
        period (str): Period label such as '2025-07周', '2025-03月', '2025年'
        rank_by (str): 'category' or 'ip' (default: 'category')

    Note:
        The period label is checked against the granularity by the
        analytics layer, which knows the label formats.
    """

    granularity = serializers.ChoiceField(
        choices=GRANULARITIES,
        default=MONTH,
        help_text='Bucket granularity'
    )
    period = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=16,
        help_text='Period label; defaults to the current period'
    )
    rank_by = serializers.ChoiceField(
        choices=RANK_KEYS,
        default='category',
        help_text='Ranking key'
    )


# =============================================================================
# Response Serializers (API Documentation)
# =============================================================================

class FilterFacetsSerializer(serializers.Serializer):
    """Distinct facet values of the collection."""

    ips = serializers.ListField(child=serializers.CharField())
    characters = serializers.ListField(child=serializers.CharField())


class OverviewSerializer(serializers.Serializer):
    """Spending overview for one period."""

    total = serializers.DecimalField(max_digits=20, decimal_places=2)
    sold = serializers.DecimalField(max_digits=20, decimal_places=2)
    net = serializers.DecimalField(max_digits=20, decimal_places=2)


class DistributionEntrySerializer(serializers.Serializer):
    """One category or IP with its count or amount."""

    name = serializers.CharField()
    label = serializers.CharField(required=False)
    value = serializers.DecimalField(max_digits=20, decimal_places=2)


class TimeRecordSerializer(serializers.Serializer):
    """Dated value record behind the spending charts."""

    date = serializers.DateField()
    value = serializers.DecimalField(max_digits=20, decimal_places=2)
    category = serializers.CharField()
    ip = serializers.CharField(allow_blank=True)


class StatsBundleSerializer(serializers.Serializer):
    """Everything the statistics screen shows."""

    overview_week = OverviewSerializer()
    overview_month = OverviewSerializer()
    overview_all = OverviewSerializer()
    category_dist_count = DistributionEntrySerializer(many=True)
    category_dist_amount = DistributionEntrySerializer(many=True)
    ip_dist_count = DistributionEntrySerializer(many=True)
    ip_dist_amount = DistributionEntrySerializer(many=True)
    time_dist = TimeRecordSerializer(many=True)


class BucketSerializer(serializers.Serializer):
    """One chart bar."""

    name = serializers.CharField()
    value = serializers.DecimalField(max_digits=20, decimal_places=2)


class RankingEntrySerializer(serializers.Serializer):
    """One ranking row of the selected period."""

    name = serializers.CharField()
    value = serializers.DecimalField(max_digits=20, decimal_places=2)
    percent = serializers.FloatField()


class DistributionResponseSerializer(serializers.Serializer):
    """Spending chart for one period."""

    granularity = serializers.CharField()
    ranges = serializers.ListField(child=serializers.CharField())
    period = serializers.CharField(allow_blank=True)
    buckets = BucketSerializer(many=True)
    total = serializers.DecimalField(max_digits=20, decimal_places=2)
    average = serializers.DecimalField(max_digits=20, decimal_places=2)
    max = serializers.DecimalField(max_digits=20, decimal_places=2)
    ranking = RankingEntrySerializer(many=True)


class CollectionSummarySerializer(serializers.Serializer):
    """Counters shown on the profile."""

    total_items = serializers.IntegerField()
    total_ips = serializers.IntegerField()
    total_spent = serializers.DecimalField(max_digits=20, decimal_places=2)
    total_earned = serializers.DecimalField(max_digits=20, decimal_places=2)


class ErrorSerializer(serializers.Serializer):
    """Error response."""

    error = serializers.CharField()
