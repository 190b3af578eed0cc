"""
Snippet Manager Backend — Middleware Package
=============================================

What:  Cross-cutting concerns applied to every request, plus the
       authentication guard used as a route dependency.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and tracing
    2. Logging: Log request details with the generated request ID
    3. GZip: Compress responses above 500 bytes
    4. CORS: Applied by FastAPI's CORSMiddleware (handles preflight)

The auth guard (`middleware.auth`) is not an ASGI middleware: it runs as a
FastAPI dependency so it executes before any validation or service call of
the routes that declare it, and not at all for public routes (/health).
"""
