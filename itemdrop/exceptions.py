"""
ItemDrop Backend - Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for each failure class of the ingest path.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": ...}` JSON bodies with the matching HTTP status.
Who:   Raised by services and routes; caught by global handlers.

Exception Hierarchy:
    ItemDropError (base)
    ├── ValidationError      → 400 Bad Request (client can fix)
    ├── ObjectStorageError   → 500 (image upload failed)
    ├── DatabaseError        → 500 (item insert failed)
    └── UnexpectedError      → 500 (anything else, reported as internal_error)

Backend messages are passed through verbatim to the caller. The ingest path
is internal/admin facing, so backend detail in responses is accepted.
"""

from typing import Any, Dict, Optional


class ItemDropError(Exception):
    """
    Base exception for all ItemDrop application errors.

    Attributes:
        message:  Error description returned in the response body
        context:  Additional debug info (logged, not returned)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ItemDropError):
    """
    Raised when client input fails validation.

    When:  Missing user_id, undecodable image_base64, oversized image.
    HTTP:  400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ObjectStorageError(ItemDropError):
    """
    Raised when writing to the content bucket fails.

    HTTP:  500 Internal Server Error, message from the storage backend.
    No retry is attempted and no item row is inserted afterwards.
    """

    def __init__(
        self,
        message: str = "Object storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(ItemDropError):
    """
    Raised when inserting the item row fails.

    HTTP:  500 Internal Server Error, message from the database driver.
    An image uploaded earlier in the same request is left in place.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnexpectedError(ItemDropError):
    """
    Wraps an exception nothing else anticipated.

    HTTP:  500 with `{"error": "internal_error", "message": <original message>}`.
    """

    def __init__(
        self,
        message: str = "internal error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
