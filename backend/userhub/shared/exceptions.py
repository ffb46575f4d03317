"""
UserHub Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions shared by every layer.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) translate
       them into structured JSON error responses.
Who:   Raised by data_access and business; handled at the HTTP boundary.

Exception Hierarchy:
    UserHubError (base)                 → 500 Internal Server Error
    ├── ValidationError                 → 400 Bad Request
    │   └── InvalidIdentifierError      → 400 Bad Request (malformed UUID)
    ├── ConflictError                   → 409 Conflict
    └── DatabaseError                   → 500 Internal Server Error

"Not found" is deliberately absent: a missing record is an ordinary
`None` result, not a fault.
"""

from typing import Any, Dict, Optional


class UserHubError(Exception):
    """
    Base exception for all UserHub application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; only returned for client errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(UserHubError):
    """
    Raised when client input fails a business validation rule.

    HTTP: 400 Bad Request. Schema-level problems (wrong JSON types, missing
    fields) are still answered by FastAPI's own 422 handler.

    Example response:
        {
            "error": "validation_error",
            "message": "Name must not be blank",
            "details": {"field": "name"}
        }
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


class InvalidIdentifierError(ValidationError):
    """
    Raised when an identifier is not a syntactically valid UUID.

    Raised by the data access layer before any storage access and propagated
    unchanged through business logic to the HTTP boundary.
    """

    def __init__(
        self,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["value"] = str(value)
        super().__init__(
            message=f"'{value}' is not a valid identifier. Expected a UUID such as "
                    f"'123e4567-e89b-12d3-a456-426614174000'.",
            field="id",
            context=ctx,
        )
        self.value = value


class ConflictError(UserHubError):
    """
    Raised when a write would violate a uniqueness rule (e.g. duplicate email)
    or loses a concurrent update of the same user.

    HTTP: 409 Conflict
    """

    def __init__(
        self,
        message: str = "The request conflicts with an existing resource",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DatabaseError(UserHubError):
    """
    Raised when a storage operation fails unexpectedly.

    HTTP: 500 Internal Server Error. The response message is always generic;
    the context (operation name, driver error type) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
