"""
Snippet Manager Backend — Error Mapping Layer
===============================================

What:  Builds the uniform error body, writes structured error logs, maps
       datastore failures and unexpected exceptions onto the closed error
       taxonomy, and registers FastAPI's global exception handlers.
Why:   Every non-2xx response must look the same to clients, and internal
       details (driver messages, stack traces, secrets inside exception
       text) must stay in server-side logs.
How:   Small pure helpers (`create_error_response`, `log_error`) plus
       JSONResponse builders used both by the handlers and directly by
       tests.

Error body (all non-2xx):
    {"error": {"code": "NOT_FOUND", "message": "Snippet not found"}}
    {"error": {"code": "VALIDATION_ERROR", "message": "...", "details": {...}}}
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from snippet_manager.exceptions import (
    DatabaseError,
    ErrorCode,
    SnippetManagerError,
)
from snippet_manager.middleware.request_id import request_id_var

logger = logging.getLogger("snippet_manager.errors")

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"
DATABASE_ERROR_MESSAGE = "Failed to perform database operation"


def create_error_response(
    code: ErrorCode,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build the `{error: {code, message, details?}}` body. `details` is omitted when empty."""
    error: Dict[str, Any] = {"code": ErrorCode(code).value, "message": message}
    if details:
        error["details"] = details
    return {"error": error}


def error_response(
    status_code: int,
    code: ErrorCode,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=create_error_response(code, message, details),
        headers=headers,
    )


def log_error(error: Any, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Write a structured error entry and return it.

    Payload:
        error:     the exception message (or str() of a non-exception value)
        stack:     formatted traceback when the value is an exception with one
        context:   caller-supplied map (type, route, ids...)
        timestamp: ISO-8601 UTC time of logging
    """
    if isinstance(error, BaseException):
        message = str(error)
        stack = (
            "".join(traceback.format_exception(type(error), error, error.__traceback__))
            if error.__traceback__ is not None
            else None
        )
    else:
        message = str(error)
        stack = None

    payload = {
        "error": message,
        "stack": stack,
        "context": dict(context or {}),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    rid = request_id_var.get("")
    if rid:
        payload["context"].setdefault("request_id", rid)

    logger.error("Error occurred: %s", message, extra={"error_details": payload})
    return payload


def extract_sqlstate(error: Any) -> Optional[str]:
    """
    Find the Postgres SQLSTATE carried by a driver or wrapper exception.

    Looks at our own DatabaseError, SQLAlchemy's `.orig` (the adapted DBAPI
    exception exposes `sqlstate`/`pgcode`), and finally a plain string
    `code` attribute.
    """
    sqlstate = getattr(error, "sqlstate", None)
    if isinstance(sqlstate, str) and sqlstate:
        return sqlstate

    orig = getattr(error, "orig", None)
    if orig is not None:
        for attr in ("sqlstate", "pgcode"):
            value = getattr(orig, attr, None)
            if isinstance(value, str) and value:
                return value
        cause = getattr(orig, "__cause__", None)
        value = getattr(cause, "sqlstate", None)
        if isinstance(value, str) and value:
            return value

    code = getattr(error, "code", None)
    if isinstance(code, str) and len(code) == 5:
        return code
    return None


def handle_database_error(error: Any) -> JSONResponse:
    """
    Map a datastore failure onto the error taxonomy.

        23505 unique violation       → 400 VALIDATION_ERROR "Duplicate entry"
        23503 foreign key violation  → 400 VALIDATION_ERROR "Invalid reference"
        anything else                → 500 DATABASE_ERROR (generic message)
    """
    context: Dict[str, Any] = {"type": "database_error"}
    if isinstance(error, SnippetManagerError):
        context.update(error.context)
    log_error(error, context)

    sqlstate = extract_sqlstate(error)
    if sqlstate == UNIQUE_VIOLATION:
        return error_response(400, ErrorCode.VALIDATION_ERROR, "Duplicate entry")
    if sqlstate == FOREIGN_KEY_VIOLATION:
        return error_response(400, ErrorCode.VALIDATION_ERROR, "Invalid reference")
    return error_response(500, ErrorCode.DATABASE_ERROR, DATABASE_ERROR_MESSAGE)


def handle_unexpected_error(error: Any) -> JSONResponse:
    """
    Catch-all for anything without a recognized shape.

    Security: the body always carries the fixed generic message; the
    exception text and stack only reach the server log.
    """
    log_error(error, {"type": "unexpected_error"})
    return error_response(500, ErrorCode.INTERNAL_ERROR, UNEXPECTED_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        DatabaseError            → handle_database_error (400 or 500)
        SnippetManagerError      → exc.status_code / exc.code
        RequestValidationError   → 400 VALIDATION_ERROR
        HTTPException (routing)  → its status, NOT_FOUND / INTERNAL_ERROR code
        Exception (fallback)     → 500 INTERNAL_ERROR
    """

    @app.exception_handler(DatabaseError)
    async def on_database_error(request: Request, exc: DatabaseError):
        return handle_database_error(exc)

    @app.exception_handler(SnippetManagerError)
    async def on_app_error(request: Request, exc: SnippetManagerError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            log_error(exc, {"type": exc.code.value.lower(), **exc.context})
        else:
            logger.warning("[%s] %s: %s", rid, exc.code.value, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return error_response(exc.status_code, exc.code, exc.message, exc.details, headers)

    @app.exception_handler(RequestValidationError)
    async def on_request_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", "Invalid value"),
            }
            for err in exc.errors()
        ]
        return error_response(
            400, ErrorCode.VALIDATION_ERROR, "Validation failed", {"errors": errors}
        )

    @app.exception_handler(StarletteHTTPException)
    async def on_http_exception(request: Request, exc: StarletteHTTPException):
        code = {
            400: ErrorCode.VALIDATION_ERROR,
            401: ErrorCode.UNAUTHORIZED,
            403: ErrorCode.FORBIDDEN,
            404: ErrorCode.NOT_FOUND,
            503: ErrorCode.SERVICE_UNAVAILABLE,
        }.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return error_response(exc.status_code, code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def on_unexpected_error(request: Request, exc: Exception):
        return handle_unexpected_error(exc)
