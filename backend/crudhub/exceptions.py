"""
CrudHub Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the few error scenarios CRUD has.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and user-friendly messages.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by collections, the document store and the CRUD router;
       caught by global handlers. The HTTP client raises NotFoundError too.

Exception Hierarchy:
    CrudHubError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    └── StoreUnavailableError    → 503 Service Unavailable
"""

from typing import Any, Dict, Optional


class CrudHubError(Exception):
    """
    Base exception for all CrudHub application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CrudHubError):
    """
    Raised when client input cannot be stored as an item.

    Item content is never validated; the only rule is that a payload is a
    JSON object, since the store has to attach an `_id` to it.
    HTTP: 400 Bad Request
    """

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


class NotFoundError(CrudHubError):
    """
    Raised when a requested item does not exist in its collection.

    When:    Show, Update or Destroy with an unknown identifier.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "item",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(CrudHubError):
    """
    Raised when a document store operation fails unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        The SQL error is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreUnavailableError(CrudHubError):
    """
    Raised when a collection's backing store is not connected.

    When:    The startup connection failed (after retries) or never ran.
    HTTP:    503 Service Unavailable

    With FAIL_FAST_ON_STORE_ERROR=true this aborts startup instead; otherwise
    the resource stays mounted and answers 503 until the process restarts.
    """

    def __init__(
        self,
        message: str = "The storage backend for this resource is unavailable",
        store: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if store:
            ctx["store"] = store
        super().__init__(message=message, context=ctx)
        self.store = store
