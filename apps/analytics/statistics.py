"""
Statistics Module
=================

This module provides the read-only aggregate queries behind the
statistics screens: spending overviews, category/IP distributions,
dated value records for charts and the profile counters.

Classes:
    StatisticsQueries: Static methods for the statistics queries.

Key Features:
    - Spending, sale proceeds and net spending per week/month/all time
    - Category and IP distributions by count or by amount
    - Time-bucketed spending charts with a category/IP ranking
    - Profile counters (items, IPs, spent, earned)

Example:
    Getting a user's dashboard data::

        from apps.analytics.statistics import StatisticsQueries

        bundle = StatisticsQueries.stats_bundle(user.id)
        print(f"This month: {bundle['overview_month']['total']}")

        chart = StatisticsQueries.distribution(user.id, granularity='month')
        print(chart['period'], chart['total'])

Note:
    This module is read-only and doesn't modify any data. All methods
    are static and can be called without instantiation.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from django.db.models import DecimalField, ExpressionWrapper, F, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.collection.models import CollectionItem, ItemStatus
from apps.collection.services import facet_values
from . import periods

ZERO = Decimal('0.00')

# Money expressions evaluated in the database
LINE_TOTAL = ExpressionWrapper(
    F('price') * F('quantity'),
    output_field=DecimalField(max_digits=20, decimal_places=2)
)
SOLD_TOTAL = ExpressionWrapper(
    F('sold_price') * Coalesce('sold_quantity', 'quantity'),
    output_field=DecimalField(max_digits=20, decimal_places=2)
)


class StatisticsQueries:
    """
    Aggregate queries over one user's collection.

    Methods:
        filter_facets: Distinct IPs and characters for filter menus.
        overview: Spent, earned and net amounts since a date.
        stats_bundle: Overviews, distributions and chart records together.
        category_distribution: Item count or amount per category.
        ip_distribution: Item count or amount per IP.
        time_dist: Dated value records for the spending charts.
        distribution: One chart period, bucketed, summarized and ranked.
        collection_summary: Profile counters.

    Note:
        All methods return plain dictionaries or lists, not Django objects,
        making them suitable for JSON serialization in API responses.
    """

    @staticmethod
    def _items(user_id):
        return CollectionItem.objects.filter(user_id=user_id)

    @staticmethod
    def filter_facets(user_id):
        """
        Distinct non-blank IPs and characters of a user's items.

        Args:
            user_id (UUID): The user's unique identifier.

        Returns:
            dict: ``{'ips': [...], 'characters': [...]}`` in display order
            of the items (pinned first, newest first).
        """
        items = StatisticsQueries._items(user_id).only('ip', 'character', 'is_pinned', 'purchase_date')
        return facet_values(items)

    @staticmethod
    def overview(user_id, start_date=None):
        """
        Calculate spending and sale proceeds since a date.

        Args:
            user_id (UUID): The user's unique identifier.
            start_date (date, optional): First purchase date to include.
                If None, includes all items.

        Returns:
            dict: A dictionary containing:
                - total (Decimal): Sum of price x quantity of items bought
                  in the period.
                - sold (Decimal): Sale proceeds of the sold items among them.
                - net (Decimal): total - sold.

        Example:
            This month's spending::

                today = date.today()
                stats = StatisticsQueries.overview(user.id, today.replace(day=1))
                print(f"Spent {stats['total']}, got back {stats['sold']}")
        """
        items = StatisticsQueries._items(user_id)
        if start_date:
            items = items.filter(purchase_date__gte=start_date)

        total = items.aggregate(
            total=Coalesce(Sum(LINE_TOTAL), ZERO, output_field=DecimalField())
        )['total']
        sold = items.filter(status=ItemStatus.SOLD).aggregate(
            sold=Coalesce(Sum(SOLD_TOTAL), ZERO, output_field=DecimalField())
        )['sold']

        return {
            'total': total,
            'sold': sold,
            'net': total - sold,
        }

    @staticmethod
    def _grouped(user_id, field, measure):
        if measure == 'count':
            value = Sum('quantity')
        else:
            value = Sum(LINE_TOTAL)

        rows = (
            StatisticsQueries._items(user_id)
            .exclude(**{field: ''})
            .values(field)
            .annotate(value=value)
            .order_by('-value', field)
        )
        return [{'name': row[field], 'value': row['value']} for row in rows]

    @staticmethod
    def category_distribution(user_id, measure='count'):
        """
        Distribution of a user's items over categories.

        Args:
            user_id (UUID): The user's unique identifier.
            measure (str, optional): 'count' sums quantities, 'amount'
                sums price x quantity. Defaults to 'count'.

        Returns:
            list[dict]: ``{'name': category code, 'label': display label,
            'value': ...}`` sorted by value, largest first.
        """
        rows = StatisticsQueries._grouped(user_id, 'category', measure)
        labels = dict(CollectionItem._meta.get_field('category').choices)
        for row in rows:
            row['label'] = str(labels.get(row['name'], row['name']))
        return rows

    @staticmethod
    def ip_distribution(user_id, measure='count'):
        """
        Distribution of a user's items over IPs.

        Items without an IP are left out. Same measures as
        ``category_distribution``.
        """
        return StatisticsQueries._grouped(user_id, 'ip', measure)

    @staticmethod
    def time_dist(user_id):
        """
        Dated value records for the spending charts.

        Args:
            user_id (UUID): The user's unique identifier.

        Returns:
            list[dict]: One record per dated item, oldest first, each with
            ``date``, ``value`` (price x quantity), ``category`` and ``ip``.
        """
        items = (
            StatisticsQueries._items(user_id)
            .filter(purchase_date__isnull=False)
            .annotate(value=LINE_TOTAL)
            .order_by('purchase_date')
            .values('purchase_date', 'value', 'category', 'ip')
        )
        return [
            {
                'date': item['purchase_date'],
                'value': item['value'],
                'category': item['category'],
                'ip': item['ip'],
            }
            for item in items
        ]

    @staticmethod
    def stats_bundle(user_id, today: Optional[date] = None):
        """
        Everything the statistics screen needs in one call.

        Args:
            user_id (UUID): The user's unique identifier.
            today (date, optional): Reference day for the week/month
                overviews. Defaults to the local date.

        Returns:
            dict: A dictionary containing:
                - overview_week / overview_month / overview_all (dict):
                  see ``overview``; the week starts on Monday.
                - category_dist_count / category_dist_amount (list[dict])
                - ip_dist_count / ip_dist_amount (list[dict])
                - time_dist (list[dict]): see ``time_dist``.
        """
        today = today or timezone.localdate()
        week_start = today - timedelta(days=today.weekday())
        month_start = today.replace(day=1)

        return {
            'overview_week': StatisticsQueries.overview(user_id, week_start),
            'overview_month': StatisticsQueries.overview(user_id, month_start),
            'overview_all': StatisticsQueries.overview(user_id),
            'category_dist_count': StatisticsQueries.category_distribution(user_id, 'count'),
            'category_dist_amount': StatisticsQueries.category_distribution(user_id, 'amount'),
            'ip_dist_count': StatisticsQueries.ip_distribution(user_id, 'count'),
            'ip_dist_amount': StatisticsQueries.ip_distribution(user_id, 'amount'),
            'time_dist': StatisticsQueries.time_dist(user_id),
        }

    @staticmethod
    def distribution(user_id, granularity='month', period=None, rank_by='category', today=None):
        """
        Spending chart for one period.

        Args:
            user_id (UUID): The user's unique identifier.
            granularity (str, optional): 'week', 'month' or 'year'.
            period (str, optional): Period label such as '2025-03月'.
                Defaults to the current period, or the latest one when the
                current period has no range.
            rank_by (str, optional): 'category' or 'ip'.
            today (date, optional): Reference day.

        Returns:
            dict: See ``periods.distribution``.

        Raises:
            InvalidGranularityError: Unknown granularity.
            InvalidPeriodError: Period label does not match the granularity.
            InvalidRankKeyError: Unknown ranking key.
        """
        return periods.distribution(
            StatisticsQueries.time_dist(user_id),
            granularity=granularity,
            period=period,
            rank_by=rank_by,
            today=today,
        )

    @staticmethod
    def collection_summary(user_id):
        """
        Counters shown on the profile.

        Args:
            user_id (UUID): The user's unique identifier.

        Returns:
            dict: A dictionary containing:
                - total_items (int): Sum of quantities.
                - total_ips (int): Number of distinct non-blank IPs.
                - total_spent (Decimal): Sum of price x quantity.
                - total_earned (Decimal): Sale proceeds of sold items; a
                  missing sold quantity counts as the whole lot.
        """
        items = StatisticsQueries._items(user_id)

        totals = items.aggregate(
            total_items=Coalesce(Sum('quantity'), 0),
            total_spent=Coalesce(Sum(LINE_TOTAL), ZERO, output_field=DecimalField()),
        )
        earned = items.filter(status=ItemStatus.SOLD).aggregate(
            total_earned=Coalesce(Sum(SOLD_TOTAL), ZERO, output_field=DecimalField())
        )['total_earned']

        return {
            'total_items': totals['total_items'],
            'total_ips': items.exclude(ip='').values('ip').distinct().count(),
            'total_spent': totals['total_spent'],
            'total_earned': earned,
        }
