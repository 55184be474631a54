"""
Time periods and bucketing for spending charts.

A period is identified by a display label:

    week   '2025-07周'  (year of the date, ISO week number)
    month  '2025-03月'
    year   '2025年'

Records are plain dicts with at least ``date`` (a ``date`` or ISO string)
and ``value``; rankings also read ``category`` and ``ip``.
"""

import calendar
import re
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from django.utils import timezone
from django.utils.dateparse import parse_date

from .exceptions import InvalidGranularityError, InvalidPeriodError, InvalidRankKeyError

WEEK = 'week'
MONTH = 'month'
YEAR = 'year'
GRANULARITIES = (WEEK, MONTH, YEAR)

RANK_KEYS = ('category', 'ip')

WEEKDAY_NAMES = ['周一', '周二', '周三', '周四', '周五', '周六', '周日']

# Ranking name for records without an IP
OTHER_LABEL = '其他'

LABEL_PATTERNS = {
    WEEK: re.compile(r'^(\d{4})-(\d{2})周$'),
    MONTH: re.compile(r'^(\d{4})-(\d{2})月$'),
    YEAR: re.compile(r'^(\d{4})年$'),
}


def _check_granularity(granularity: str) -> None:
    if granularity not in GRANULARITIES:
        raise InvalidGranularityError(
            f"Invalid granularity: '{granularity}'. Valid options: {', '.join(GRANULARITIES)}"
        )


def _as_date(value) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return parse_date(str(value))


def week_number(day: date) -> int:
    """ISO week number (weeks start Monday, week 1 holds the first Thursday)."""
    return day.isocalendar()[1]


def period_label(day: date, granularity: str) -> str:
    """Label of the period containing ``day``."""
    _check_granularity(granularity)

    if granularity == WEEK:
        return f"{day.year}-{week_number(day):02d}周"
    if granularity == MONTH:
        return f"{day.year}-{day.month:02d}月"
    return f"{day.year}年"


def parse_period_label(label: str, granularity: str) -> tuple:
    """
    Split a label into its numeric parts.

    Returns:
        (year, week) / (year, month) / (year,)

    Raises:
        InvalidGranularityError: If the granularity is unknown
        InvalidPeriodError: If the label does not fit the granularity
    """
    _check_granularity(granularity)

    match = LABEL_PATTERNS[granularity].match(label or '')
    if not match:
        raise InvalidPeriodError(f"Invalid {granularity} period '{label}'")

    parts = tuple(int(group) for group in match.groups())

    if granularity == MONTH and not 1 <= parts[1] <= 12:
        raise InvalidPeriodError(f"Invalid month period '{label}'")
    if granularity == WEEK and not 1 <= parts[1] <= 53:
        raise InvalidPeriodError(f"Invalid week period '{label}'")

    return parts


def _next_step(current: date, granularity: str) -> date:
    if granularity == WEEK:
        return current + timedelta(days=7)
    if granularity == MONTH:
        if current.month == 12:
            return date(current.year + 1, 1, 1)
        return date(current.year, current.month + 1, 1)
    return date(current.year + 1, 1, 1)


def period_ranges(dates: Iterable[Any], granularity: str, today: Optional[date] = None) -> List[str]:
    """
    Every period label from the earliest date to the end of next year.

    Args:
        dates: Record dates; missing or unparsable ones are skipped
        granularity: week, month or year
        today: Reference day (defaults to the local date)

    Returns:
        Ordered, unique labels; empty if there are no dates
    """
    _check_granularity(granularity)

    parsed = [d for d in (_as_date(value) for value in dates) if d is not None]
    if not parsed:
        return []

    today = today or timezone.localdate()
    end = date(today.year + 1, 12, 31)

    current = min(parsed)
    if granularity == MONTH:
        current = current.replace(day=1)
    elif granularity == YEAR:
        current = current.replace(month=1, day=1)

    ranges = []
    while current <= end:
        label = period_label(current, granularity)
        if label not in ranges:
            ranges.append(label)
        current = _next_step(current, granularity)

    return ranges


def default_period(ranges: List[str], granularity: str, today: Optional[date] = None) -> str:
    """The current period if listed, else the last one ('' when none)."""
    today = today or timezone.localdate()
    current = period_label(today, granularity)

    if current in ranges:
        return current
    return ranges[-1] if ranges else ''


def filter_period(records: Iterable[Dict[str, Any]], granularity: str, label: str) -> List[Dict[str, Any]]:
    """Records dated inside the labelled period."""
    selected = []
    for record in records:
        day = _as_date(record.get('date'))
        if day is not None and period_label(day, granularity) == label:
            selected.append(record)
    return selected


def _bucket_index(day: date, granularity: str) -> int:
    if granularity == WEEK:
        return day.weekday()
    if granularity == MONTH:
        return day.day - 1
    return day.month - 1


def bucket_records(records: Iterable[Dict[str, Any]], granularity: str, label: str) -> List[Dict[str, Any]]:
    """
    Sum record values into the sub-periods of one period.

    week: 7 buckets Monday..Sunday; month: one bucket per day of that
    month; year: 12 buckets, one per month.

    Returns:
        List of ``{'name': ..., 'value': Decimal}`` in chart order
    """
    parts = parse_period_label(label, granularity)

    if granularity == WEEK:
        names = list(WEEKDAY_NAMES)
    elif granularity == MONTH:
        days = calendar.monthrange(parts[0], parts[1])[1]
        names = [f"{day:02d}" for day in range(1, days + 1)]
    else:
        names = [f"{month}月" for month in range(1, 13)]

    values = [Decimal('0')] * len(names)
    for record in filter_period(records, granularity, label):
        index = _bucket_index(_as_date(record['date']), granularity)
        values[index] += Decimal(record.get('value') or 0)

    return [{'name': name, 'value': value} for name, value in zip(names, values)]


def summarize_buckets(buckets: List[Dict[str, Any]]) -> Dict[str, Decimal]:
    """
    Total, average and maximum of bucket values.

    The average only counts buckets with a non-zero value.
    """
    values = [bucket['value'] for bucket in buckets]
    total = sum(values, Decimal('0'))
    non_zero = [value for value in values if value != 0]

    average = total / len(non_zero) if non_zero else Decimal('0')

    return {
        'total': total,
        'average': average.quantize(Decimal('0.01')),
        'max': max(values + [Decimal('0')]),
    }


def rank_records(records: Iterable[Dict[str, Any]], key: str, total: Decimal) -> List[Dict[str, Any]]:
    """
    Group record values by category or IP, largest first.

    Args:
        records: Records of the selected period
        key: 'category' or 'ip' (blank IPs are grouped as '其他')
        total: Period total the percentages refer to

    Returns:
        List of ``{'name', 'value', 'percent'}``; percent has one decimal
        and is 0 when the total is 0
    """
    if key not in RANK_KEYS:
        raise InvalidRankKeyError(f"Invalid rank key: '{key}'. Valid options: {', '.join(RANK_KEYS)}")

    sums: Dict[str, Decimal] = {}
    for record in records:
        name = record.get(key) or ''
        if key == 'ip' and not name:
            name = OTHER_LABEL
        sums[name] = sums.get(name, Decimal('0')) + Decimal(record.get('value') or 0)

    ranking = [
        {
            'name': name,
            'value': value,
            'percent': round(float(value / total * 100), 1) if total > 0 else 0,
        }
        for name, value in sums.items()
    ]
    ranking.sort(key=lambda entry: entry['value'], reverse=True)
    return ranking


def distribution(
    records: List[Dict[str, Any]],
    *,
    granularity: str,
    period: Optional[str] = None,
    rank_by: str = 'category',
    today: Optional[date] = None
) -> Dict[str, Any]:
    """
    Chart data for one period: selectable ranges, buckets, summary, ranking.

    Args:
        records: All dated value records
        granularity: week, month or year
        period: Selected label; defaults to the current (or latest) period
        rank_by: 'category' or 'ip'
        today: Reference day

    Returns:
        Dict with granularity, ranges, period, buckets, total, average,
        max and ranking. Without records, ranges and buckets are empty.
    """
    if rank_by not in RANK_KEYS:
        raise InvalidRankKeyError(f"Invalid rank key: '{rank_by}'. Valid options: {', '.join(RANK_KEYS)}")

    ranges = period_ranges((record.get('date') for record in records), granularity, today)
    selected = period or default_period(ranges, granularity, today)

    if not selected:
        return {
            'granularity': granularity,
            'ranges': [],
            'period': '',
            'buckets': [],
            'total': Decimal('0'),
            'average': Decimal('0.00'),
            'max': Decimal('0'),
            'ranking': [],
        }

    buckets = bucket_records(records, granularity, selected)
    summary = summarize_buckets(buckets)
    ranking = rank_records(filter_period(records, granularity, selected), rank_by, summary['total'])

    return {
        'granularity': granularity,
        'ranges': ranges,
        'period': selected,
        'buckets': buckets,
        **summary,
        'ranking': ranking,
    }
