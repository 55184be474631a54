"""
CSV export/import of a collection.

The file layout is a UTF-8 text with a byte-order mark (so spreadsheet
apps pick the right encoding), one header line and one line per item.
Every exported field is double-quoted. Columns are mapped by position,
the header line is informational only.
"""

import csv
import io
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from django.utils import timezone
from django.utils.dateparse import parse_date

from ..models import ItemStatus, PaymentStatus, SourceType, ItemCategory
from .images import placeholder_image_url


BOM = '\ufeff'

CSV_HEADERS = [
    '名称',
    '来源类型',
    'IP',
    '角色',
    '分类',
    '购入单价',
    '购入数量',
    '当前状态',
    '付款状态',
    '定金金额',
    '尾款金额',
    '购入日期',
    '卖出单价',
    '卖出数量',
    '备注',
    '图片链接',
]

# Item attribute for each column, in column order
CSV_FIELDS = [
    'name',
    'source_type',
    'ip',
    'character',
    'category',
    'price',
    'quantity',
    'status',
    'payment_status',
    'deposit_amount',
    'final_payment_amount',
    'purchase_date',
    'sold_price',
    'sold_quantity',
    'notes',
    'image_url',
]

ENUM_FIELDS = {
    'source_type': SourceType,
    'category': ItemCategory,
    'status': ItemStatus,
    'payment_status': PaymentStatus,
}

ENUM_DEFAULTS = {
    'source_type': SourceType.OTHER,
    'category': ItemCategory.OTHER,
    'status': ItemStatus.OWNED,
    'payment_status': PaymentStatus.FULL,
}

UNNAMED_ITEM = '未命名'

# Largest values the item columns can store; anything above is unparsable
MAX_AMOUNT = Decimal('9999999999.99')
MAX_QUANTITY = 2147483647
CENT = Decimal('0.01')

TEMPLATE_FILENAME = '求求你别再买了导入模板.csv'


def export_filename(day: Optional[date] = None) -> str:
    """Download name for an export made on ``day`` (defaults to today)."""
    day = day or timezone.localdate()
    return f"gumi_collection_{day.isoformat()}.csv"


# =============================================================================
# Export
# =============================================================================

def _export_value(item: Any, field: str) -> str:
    value = getattr(item, field, None)

    if value is None:
        return ''

    if field in ENUM_FIELDS:
        enum = ENUM_FIELDS[field]
        try:
            return str(enum(value).label)
        except ValueError:
            return str(value)

    if isinstance(value, date):
        return value.isoformat()

    return str(value)


def _write_lines(rows: List[List[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerows(rows)
    # No trailing newline after the last line
    return BOM + buffer.getvalue().rstrip('\n')


def export_csv(items: Iterable[Any]) -> str:
    """
    Serialize items to CSV text.

    Args:
        items: CollectionItem instances (or objects with the same attributes)

    Returns:
        BOM-prefixed CSV text, header first, lines joined with ``\\n``
    """
    rows = [CSV_HEADERS]
    rows.extend(
        [_export_value(item, field) for field in CSV_FIELDS]
        for item in items
    )
    return _write_lines(rows)


def template_csv() -> str:
    """Empty import template: the header line only."""
    return _write_lines([CSV_HEADERS])


# =============================================================================
# Import
# =============================================================================

def split_csv_row(line: str) -> List[str]:
    """
    Split one CSV line into fields.

    A quote toggles quoted mode, a doubled quote inside quoted mode is
    a literal quote, and commas separate fields only outside quotes.
    """
    fields = []
    current = []
    in_quotes = False
    i = 0

    while i < len(line):
        char = line[i]

        if in_quotes:
            if char == '"':
                if i + 1 < len(line) and line[i + 1] == '"':
                    current.append('"')
                    i += 1
                else:
                    in_quotes = False
            else:
                current.append(char)
        elif char == '"':
            in_quotes = True
        elif char == ',':
            fields.append(''.join(current))
            current = []
        else:
            current.append(char)

        i += 1

    fields.append(''.join(current))
    return fields


def _parse_decimal(raw: str) -> Optional[Decimal]:
    try:
        value = Decimal(raw.strip())
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite() or value < 0 or value > MAX_AMOUNT:
        return None
    return value.quantize(CENT)


def _parse_int(raw: str) -> Optional[int]:
    value = _parse_decimal(raw)
    if value is None or value > MAX_QUANTITY:
        return None
    return int(value)


def _parse_enum(field: str, raw: str) -> str:
    enum = ENUM_FIELDS[field]
    wanted = raw.strip().lower()

    if wanted:
        for value, label in enum.choices:
            if wanted in (value.lower(), str(label).lower()):
                return value

    return ENUM_DEFAULTS[field].value


def _parse_purchase_date(raw: str) -> date:
    try:
        parsed = parse_date(raw.strip())
    except ValueError:
        parsed = None
    return parsed or timezone.localdate()


def parse_row(row: List[str]) -> Dict[str, Any]:
    """
    Map one split row to save-ready item fields.

    Short rows are padded with empty fields. Unusable values fall back
    to defaults instead of failing the row.
    """
    row = list(row) + [''] * (len(CSV_FIELDS) - len(row))
    raw = dict(zip(CSV_FIELDS, row))
    item_id = uuid4().hex

    quantity = _parse_int(raw['quantity'])
    sold_quantity = _parse_int(raw['sold_quantity'])

    return {
        'id': item_id,
        'name': raw['name'].strip() or UNNAMED_ITEM,
        'source_type': _parse_enum('source_type', raw['source_type']),
        'ip': raw['ip'].strip(),
        'character': raw['character'].strip(),
        'category': _parse_enum('category', raw['category']),
        'price': _parse_decimal(raw['price']) or Decimal('0'),
        'quantity': quantity if quantity and quantity >= 1 else 1,
        'status': _parse_enum('status', raw['status']),
        'payment_status': _parse_enum('payment_status', raw['payment_status']),
        'deposit_amount': _parse_decimal(raw['deposit_amount']),
        'final_payment_amount': _parse_decimal(raw['final_payment_amount']),
        'purchase_date': _parse_purchase_date(raw['purchase_date']),
        'sold_price': _parse_decimal(raw['sold_price']),
        'sold_quantity': sold_quantity if sold_quantity else None,
        'notes': raw['notes'],
        'image_url': raw['image_url'].strip() or placeholder_image_url(item_id),
    }


def parse_csv(text: str) -> List[Dict[str, Any]]:
    """
    Parse CSV text into item field dicts.

    Args:
        text: Raw file content, optionally BOM-prefixed

    Returns:
        One dict per non-blank data line; empty when the text holds
        no data lines
    """
    if text.startswith(BOM):
        text = text[len(BOM):]

    # Only \n ends a line; other line-break characters are field content
    lines = [line.rstrip('\r') for line in text.split('\n')]
    lines = [line for line in lines if line.strip()]

    return [parse_row(split_csv_row(line)) for line in lines[1:]]
