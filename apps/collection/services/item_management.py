"""Collection item CRUD, toggles and bulk operations."""

import logging
from decimal import Decimal
from typing import Any, List, Optional, Tuple
from uuid import uuid4

from django.db import DatabaseError, transaction

from apps.accounts.models import User
from ..exceptions import (
    ItemNotFoundError,
    ItemOwnershipError,
    InvalidItemError,
    EmptyImportError,
    EmptyExportError,
    InvalidImageError,
)
from ..models import CollectionItem, ItemStatus, PaymentStatus
from .csv_codec import parse_csv, export_csv
from .images import encode_image_data_url
from .summary_cache import clear_summary

logger = logging.getLogger(__name__)

# Fields a client may set through save_item
ITEM_FIELDS = (
    'name',
    'ip',
    'character',
    'category',
    'source_type',
    'price',
    'quantity',
    'payment_status',
    'deposit_amount',
    'final_payment_amount',
    'status',
    'sold_price',
    'sold_quantity',
    'purchase_date',
    'notes',
    'image_url',
    'is_pinned',
    'is_reminder_enabled',
)


def new_item_id() -> str:
    return uuid4().hex


def apply_save_rules(item: CollectionItem) -> CollectionItem:
    """
    Normalize payment and sale fields before persisting.

    - a deposit purchase costs deposit + final payment
    - a fully paid purchase carries no deposit amounts
    - only sold items keep sale price and quantity
    - sold quantity never exceeds the bought quantity

    Args:
        item: Item to normalize in place

    Returns:
        The same item
    """
    if item.payment_status == PaymentStatus.DEPOSIT:
        item.price = (item.deposit_amount or Decimal('0')) + (item.final_payment_amount or Decimal('0'))
    else:
        item.deposit_amount = None
        item.final_payment_amount = None

    if item.status != ItemStatus.SOLD:
        item.sold_price = None
        item.sold_quantity = None
    elif item.sold_quantity is not None and item.sold_quantity > item.quantity:
        item.sold_quantity = item.quantity

    return item


def get_item(*, user: User, item_id: str) -> CollectionItem:
    """
    Get one of the user's items.

    Raises:
        ItemNotFoundError: If the user has no item with that id
    """
    try:
        return CollectionItem.objects.get(id=item_id, user=user)
    except CollectionItem.DoesNotExist:
        raise ItemNotFoundError(f"Item {item_id} not found")


@transaction.atomic
def save_item(*, user: User, id: Optional[str] = None, **fields: Any) -> Tuple[CollectionItem, bool]:
    """
    Create or update an item by id.

    Unknown ids (or no id) create a new item; known ids of the same user
    are updated with the given fields only.

    Args:
        user: Item owner
        id: Item id; generated when missing
        **fields: Item fields, see ITEM_FIELDS

    Returns:
        Tuple of (item, created)

    Raises:
        ItemOwnershipError: If the id belongs to another user
        InvalidItemError: If the resulting item has no name
    """
    item_id = id or new_item_id()

    item = (
        CollectionItem.objects
        .select_for_update()
        .filter(id=item_id)
        .first()
    )

    if item is not None and item.user_id != user.pk:
        raise ItemOwnershipError(f"Item id {item_id} is already taken")

    created = item is None
    if created:
        item = CollectionItem(id=item_id, user=user)

    for field, value in fields.items():
        if field in ITEM_FIELDS:
            setattr(item, field, value)

    item.name = (item.name or '').strip()
    if not item.name:
        raise InvalidItemError("Item name is required")

    apply_save_rules(item)
    item.save()

    return item, created


def _toggle(item: CollectionItem, field: str) -> CollectionItem:
    # The new value is kept even if writing it fails; the next fetch reconciles.
    value = not getattr(item, field)
    setattr(item, field, value)

    try:
        CollectionItem.objects.filter(id=item.id).update(**{field: value})
    except DatabaseError:
        logger.exception("Failed to persist %s=%s for item %s", field, value, item.id)

    return item


def toggle_pin(*, user: User, item_id: str) -> CollectionItem:
    """Flip the pinned flag of an item."""
    return _toggle(get_item(user=user, item_id=item_id), 'is_pinned')


def toggle_reminder(*, user: User, item_id: str) -> CollectionItem:
    """Flip the arrival reminder flag of an item."""
    return _toggle(get_item(user=user, item_id=item_id), 'is_reminder_enabled')


def update_item_image(*, user: User, item_id: str, uploaded_file) -> CollectionItem:
    """
    Replace an item's image with an uploaded file.

    Raises:
        ItemNotFoundError: If the item does not exist
        InvalidImageError: If the upload is not a usable image
    """
    item = get_item(user=user, item_id=item_id)

    try:
        item.image_url = encode_image_data_url(uploaded_file)
    except ValueError as e:
        raise InvalidImageError(str(e))

    item.save(update_fields=['image_url', 'updated_at'])
    return item


@transaction.atomic
def clear_collection(*, user: User) -> int:
    """
    Delete every item of the user.

    Returns:
        Number of deleted items
    """
    deleted, _ = CollectionItem.objects.filter(user=user).delete()
    clear_summary(user)

    logger.info("Cleared %d items for user %s", deleted, user.pk)
    return deleted


def import_items(*, user: User, text: str) -> List[CollectionItem]:
    """
    Import items from CSV text.

    Each row is saved on its own; rows saved before a failing row stay
    saved.

    Args:
        user: Owner of the imported items
        text: CSV file content

    Returns:
        Created items

    Raises:
        EmptyImportError: If the text holds no data rows
    """
    rows = parse_csv(text)

    if not rows:
        raise EmptyImportError("未能识别有效的数据内容，请检查文件格式。")

    imported = []
    for row in rows:
        item, _ = save_item(user=user, **row)
        imported.append(item)

    logger.info("Imported %d items for user %s", len(imported), user.pk)
    return imported


def export_items(*, user: User) -> str:
    """
    Export all of the user's items as CSV text.

    Raises:
        EmptyExportError: If the user has no items
    """
    items = list(CollectionItem.objects.filter(user=user))

    if not items:
        raise EmptyExportError("当前没有可导出的数据")

    return export_csv(items)


def list_items(*, user: User) -> List[CollectionItem]:
    """All of the user's items in display order."""
    return list(CollectionItem.objects.filter(user=user))
