"""In-memory filtering and ordering of collection items."""

from typing import Any, Dict, Iterable, List, Optional

from ..models import REMINDER_STATUSES

ALL = 'all'

# Facets usable as multi-select filters
FACET_FIELDS = ('source_type', 'ip', 'character', 'category')

# Sorts undated reminders after every real date
MISSING_DATE_SENTINEL = '9999-12-31'


def _matches_query(item: Any, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True

    return any(
        needle in (getattr(item, field, '') or '').lower()
        for field in ('name', 'ip', 'character')
    )


def _matches_facets(item: Any, facets: Dict[str, Iterable[str]]) -> bool:
    for field in FACET_FIELDS:
        allowed = set(facets.get(field) or ())
        if allowed and getattr(item, field, None) not in allowed:
            return False
    return True


def filter_items(
    items: Iterable[Any],
    *,
    status: str = ALL,
    query: str = '',
    facets: Optional[Dict[str, Iterable[str]]] = None
) -> List[Any]:
    """
    Filter items by status, free-text query and facet sets.

    An item is kept only if it matches every active predicate. An empty
    facet set places no restriction. Input order is preserved.

    Args:
        items: Items to filter
        status: 'all' or one concrete status value
        query: Case-insensitive substring matched against name, ip, character
        facets: Mapping of facet field to allowed values

    Returns:
        Matching items in input order
    """
    facets = facets or {}

    return [
        item for item in items
        if (status == ALL or item.status == status)
        and _matches_query(item, query)
        and _matches_facets(item, facets)
    ]


def pin_first(items: Iterable[Any]) -> List[Any]:
    """Pinned items first; relative order otherwise unchanged."""
    return sorted(items, key=lambda item: not item.is_pinned)


def ip_list_view(items: Iterable[Any], *, ip: str = ALL, status: str = ALL) -> List[Any]:
    """Items of one IP (or all), optionally one status, pinned first."""
    selected = [
        item for item in items
        if (ip == ALL or item.ip == ip)
        and (status == ALL or item.status == status)
    ]
    return pin_first(selected)


def _reminder_sort_key(item: Any) -> str:
    if item.purchase_date is None:
        return MISSING_DATE_SENTINEL
    return item.purchase_date.isoformat()


def reminder_items(items: Iterable[Any]) -> List[Any]:
    """
    Items still on their way (in transit or reserved).

    Sorted by purchase date ascending; items without a date come last.
    """
    pending = [item for item in items if item.status in REMINDER_STATUSES]
    return sorted(pending, key=_reminder_sort_key)


def facet_values(items: Iterable[Any]) -> Dict[str, List[str]]:
    """Distinct non-blank IPs and characters, in first-seen order."""
    ips = []
    characters = []

    for item in items:
        if item.ip and item.ip not in ips:
            ips.append(item.ip)
        if item.character and item.character not in characters:
            characters.append(item.character)

    return {'ips': ips, 'characters': characters}
