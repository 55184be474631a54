"""
Domain exceptions for collection app.

This module defines domain-specific exceptions that are raised by the
collection services layer. These exceptions represent business rule
violations and invalid operations, separate from HTTP concerns.

Exception Hierarchy:
    CollectionServiceError (base)
    ├── ItemNotFoundError
    ├── ItemOwnershipError
    ├── InvalidItemError
    ├── EmptyImportError
    ├── EmptyExportError
    └── InvalidImageError

Usage:
    from apps.collection.exceptions import EmptyImportError

    if not rows:
        raise EmptyImportError("未能识别有效的数据内容，请检查文件格式。")
"""


class CollectionServiceError(Exception):
    """
    Base exception for all collection service errors.

    Views catch this to turn any domain failure into an error response:

        try:
            import_items(user=request.user, text=text)
        except CollectionServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class ItemNotFoundError(CollectionServiceError):
    """
    Raised when an item does not exist for the requesting user.

    Items of other users are reported as missing, never as forbidden.
    """

    pass


class ItemOwnershipError(CollectionServiceError):
    """
    Raised when an upsert targets an id owned by another user.

    Example:
        raise ItemOwnershipError("Item id is already taken")
    """

    pass


class InvalidItemError(CollectionServiceError):
    """
    Raised when item data violates a field rule at save time.

    Example:
        raise InvalidItemError("Item name is required")
    """

    pass


class EmptyImportError(CollectionServiceError):
    """
    Raised when an import file yields zero data rows.

    Nothing is written in that case.
    """

    pass


class EmptyExportError(CollectionServiceError):
    """Raised when exporting a collection that has no items."""

    pass


class InvalidImageError(CollectionServiceError):
    """Raised when an uploaded item image cannot be used."""

    pass
