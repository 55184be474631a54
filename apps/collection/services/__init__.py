"""Services for collection business logic."""

from ..exceptions import (
    CollectionServiceError,
    ItemNotFoundError,
    ItemOwnershipError,
    InvalidItemError,
    EmptyImportError,
    EmptyExportError,
    InvalidImageError,
)
from .item_management import (
    ITEM_FIELDS,
    apply_save_rules,
    get_item,
    list_items,
    save_item,
    toggle_pin,
    toggle_reminder,
    update_item_image,
    clear_collection,
    import_items,
    export_items,
)
from .csv_codec import (
    CSV_HEADERS,
    TEMPLATE_FILENAME,
    export_csv,
    template_csv,
    export_filename,
    split_csv_row,
    parse_csv,
)
from .filtering import (
    filter_items,
    pin_first,
    ip_list_view,
    reminder_items,
    facet_values,
)
from .summary_cache import (
    get_summary,
    refresh_summary,
    append_summary,
    clear_summary,
    sync_summary,
)
from .taxonomy import (
    TaxonomyList,
    default_taxonomies,
    edit_taxonomy,
)

__all__ = [
    # Exceptions
    'CollectionServiceError',
    'ItemNotFoundError',
    'ItemOwnershipError',
    'InvalidItemError',
    'EmptyImportError',
    'EmptyExportError',
    'InvalidImageError',
    # Item Management
    'ITEM_FIELDS',
    'apply_save_rules',
    'get_item',
    'list_items',
    'save_item',
    'toggle_pin',
    'toggle_reminder',
    'update_item_image',
    'clear_collection',
    'import_items',
    'export_items',
    # CSV
    'CSV_HEADERS',
    'TEMPLATE_FILENAME',
    'export_csv',
    'template_csv',
    'export_filename',
    'split_csv_row',
    'parse_csv',
    # Filtering
    'filter_items',
    'pin_first',
    'ip_list_view',
    'reminder_items',
    'facet_values',
    # Summary Cache
    'get_summary',
    'refresh_summary',
    'append_summary',
    'clear_summary',
    'sync_summary',
    # Taxonomy
    'TaxonomyList',
    'default_taxonomies',
    'edit_taxonomy',
]
