"""
Snippet Manager Backend — Custom Exception Hierarchy
======================================================

What:  Defines application-specific exceptions and the closed set of API
       error codes they map to.
Why:   Each exception carries the code, HTTP status and client-safe message
       needed to build the uniform `{error: {code, message, details?}}` body.
How:   Global exception handlers (registered by `error_handler`) catch these
       and render structured JSON responses. `context` is logged, never sent.
Who:   Raised by the auth guard, routes and services; caught by global handlers.

Exception Hierarchy:
    SnippetManagerError (base)                → 500 INTERNAL_ERROR
    ├── ValidationError                       → 400 VALIDATION_ERROR
    ├── AuthenticationError                   → 401 UNAUTHORIZED
    ├── ForbiddenError                        → 403 FORBIDDEN (reserved)
    ├── NotFoundError                         → 404 NOT_FOUND
    ├── DatabaseError                         → 500 DATABASE_ERROR (or 400, see handler)
    ├── AIServiceError                        → 500 AI_SERVICE_ERROR
    └── ServiceUnavailableError               → 503 SERVICE_UNAVAILABLE

Note on FORBIDDEN:
    Ownership failures are reported as NOT_FOUND so that the API never
    confirms that another user's snippet exists. ForbiddenError is kept so
    the taxonomy stays closed and complete.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in every error body."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    AI_SERVICE_ERROR = "AI_SERVICE_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class SnippetManagerError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        details:  Structured, client-safe extra data (e.g. field errors)
        context:  Additional debug info (logged but NOT returned to client)
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        details: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.details = details
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SnippetManagerError):
    """
    Raised when client input fails validation.

    Example response:
        {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Validation failed",
                "details": {"errors": [{"field": "title", "message": "Title is required"}]}
            }
        }
    """

    code = ErrorCode.VALIDATION_ERROR
    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, details=details, context=context)


class AuthenticationError(SnippetManagerError):
    """Missing, malformed, invalid or expired bearer credential."""

    code = ErrorCode.UNAUTHORIZED
    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(SnippetManagerError):
    code = ErrorCode.FORBIDDEN
    status_code = 403

    def __init__(
        self,
        message: str = "You do not have access to this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(SnippetManagerError):
    """
    Raised when a requested resource does not exist for the caller.

    The service layer returns None for missing rows; routes convert that
    into this exception. The resource ID is kept in `context` only.
    """

    code = ErrorCode.NOT_FOUND
    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class DatabaseError(SnippetManagerError):
    """
    Raised when a datastore operation fails.

    `sqlstate` carries the Postgres error code when the driver reported one
    (23505 unique violation, 23503 foreign key violation, ...). The handler
    uses it to pick between a 400 and a generic 500.

    Security Note:
        The message returned to the client is always generic.
        Constraint names, SQL text and driver messages are logged only.
    """

    code = ErrorCode.DATABASE_ERROR
    status_code = 500

    def __init__(
        self,
        message: str = "Failed to perform database operation",
        sqlstate: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if sqlstate:
            ctx["sqlstate"] = sqlstate
        super().__init__(message=message, context=ctx)
        self.sqlstate = sqlstate


class AIServiceError(SnippetManagerError):
    """
    Raised when the text-generation provider fails after all retries.

    The message always tells the user the call can be retried.
    """

    code = ErrorCode.AI_SERVICE_ERROR
    status_code = 500

    def __init__(
        self,
        message: str = "AI service request failed. Please try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ServiceUnavailableError(SnippetManagerError):
    """An upstream provider (auth) could not be reached."""

    code = ErrorCode.SERVICE_UNAVAILABLE
    status_code = 503

    def __init__(
        self,
        message: str = "Service temporarily unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
