"""
Per-user summary projection of the collection.

Only light fields are kept (no images, no money). The projection is
refreshed by a first-page fetch, extended by later pages and dropped on
sign-out or when a first-page fetch comes back empty. Cache backend
errors never fail the request.
"""

import logging
from typing import Any, Dict, Iterable, List

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

SUMMARY_FIELDS = ('id', 'name', 'ip', 'character', 'category', 'status', 'purchase_date')


def cache_key(user) -> str:
    return f"collectionCache:{user.pk}"


def summarize(item: Any) -> Dict[str, Any]:
    """Projection of one item."""
    summary = {field: getattr(item, field) for field in SUMMARY_FIELDS}
    if summary['purchase_date'] is not None:
        summary['purchase_date'] = summary['purchase_date'].isoformat()
    return summary


def get_summary(user) -> List[Dict[str, Any]]:
    """Cached projection, or an empty list if nothing is cached."""
    try:
        return cache.get(cache_key(user)) or []
    except Exception:
        logger.warning("Could not read summary cache for user %s", user.pk, exc_info=True)
        return []


def _store(user, summary: List[Dict[str, Any]]) -> None:
    try:
        cache.set(cache_key(user), summary, timeout=settings.COLLECTION_CACHE_TIMEOUT)
    except Exception:
        logger.warning("Could not write summary cache for user %s", user.pk, exc_info=True)


def refresh_summary(user, items: Iterable[Any]) -> None:
    """Replace the projection with ``items``."""
    _store(user, [summarize(item) for item in items])


def append_summary(user, items: Iterable[Any]) -> None:
    """Extend the projection with a further page of ``items``."""
    _store(user, get_summary(user) + [summarize(item) for item in items])


def clear_summary(user) -> None:
    try:
        cache.delete(cache_key(user))
    except Exception:
        logger.warning("Could not clear summary cache for user %s", user.pk, exc_info=True)


def sync_summary(user, items: List[Any], *, offset: int) -> None:
    """
    Apply the cache lifecycle for one fetched page.

    Args:
        user: Owner of the page
        items: Items of the fetched page
        offset: Offset the page was fetched from
    """
    if offset == 0:
        if items:
            refresh_summary(user, items)
        else:
            clear_summary(user)
    elif items:
        append_summary(user, items)
