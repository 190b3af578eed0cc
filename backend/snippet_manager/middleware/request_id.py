"""
Snippet Manager Backend — Request ID Middleware
=================================================

What:  Assigns a correlation ID to each incoming request and echoes it back.
Why:   Every log entry written while handling one request (including the
       structured error logs) can be tied together by this ID.
How:   Reads `X-Request-ID` from the client or generates a short UUID, stores
       it in a ContextVar, and sets the same header on the response.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns a unique ID to each request for tracing.

    Behavior:
        1. Use the client's X-Request-ID header when present
        2. Otherwise generate an 8-character UUID prefix
        3. Store in ContextVar (loggers) and request.state (handlers)
        4. Add to response headers for the client to capture
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
