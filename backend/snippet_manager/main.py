"""
Snippet Manager Backend — FastAPI Application Factory
=======================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes collaborator construction, middleware registration,
       route mounting and lifecycle management in one place.
How:   Factory pattern: create_app() builds every external client once from
       Settings (or takes pre-built ones, e.g. fakes in tests), stores them
       on `app.state`, and returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn snippet_manager.main:app) and by tests.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌─────────┐ ┌──────┐ ┌──────┐              │
    │  │  Req ID  │→│ Logging │→│ GZip │→│ CORS │              │
    │  └──────────┘ └─────────┘ └──────┘ └──────┘              │
    │                                                          │
    │  Routes (auth guard → validator → service):              │
    │  /api/snippets   /api/ai/*   /api/auth/*   /health       │
    │                                                          │
    │  app.state:                                              │
    │  settings · database · auth_client · ai_service ·        │
    │  snippet_services                                        │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, report missing provider credentials
    Shutdown: dispose the datastore engine, close the auth HTTP client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from snippet_manager import __version__
from snippet_manager.config import Settings
from snippet_manager.config import settings as default_settings
from snippet_manager.constants import APP_DESCRIPTION, APP_NAME
from snippet_manager.database import Database
from snippet_manager.error_handler import register_exception_handlers
from snippet_manager.middleware.logging import RequestLoggingMiddleware
from snippet_manager.middleware.request_id import RequestIDMiddleware
from snippet_manager.routes import ai, auth, health, snippets
from snippet_manager.services.ai_service import AIAssistService
from snippet_manager.services.auth_service import HostedAuthClient
from snippet_manager.services.gemini_service import GeminiProvider
from snippet_manager.services.snippet_service import SnippetServiceFactory

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: 2025-01-10T12:00:00 [INFO] snippet_manager.services.snippet_service: ...

    Structured error entries (`log_error`) travel in the record's
    `error_details` attribute, so a JSON formatter can be swapped in without
    touching call sites.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Containers capture stdout
        ],
        force=True,
    )

    # Per-request noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("%s backend %s starting up...", APP_NAME, __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: /health still answers and reports what is down
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Shutting down...")
    await app.state.database.dispose()
    await app.state.auth_client.aclose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    auth_client: Optional[HostedAuthClient] = None,
    ai_service: Optional[AIAssistService] = None,
    snippet_services: Optional[SnippetServiceFactory] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Any collaborator left as None is built from `settings`. Nothing here
    opens a network connection: the engine and HTTP clients connect lazily
    on first use.
    """
    settings = settings or default_settings

    if database is None:
        database = Database.from_settings(settings)
    if auth_client is None:
        auth_client = HostedAuthClient(
            base_url=settings.auth_base_url,
            anon_key=settings.supabase_anon_key,
            timeout=settings.auth_request_timeout,
        )
    if ai_service is None:
        ai_service = AIAssistService(
            GeminiProvider(
                api_key=settings.gemini_api_key,
                model_name=settings.gemini_model,
                timeout=settings.ai_request_timeout,
            ),
            max_attempts=settings.ai_max_retries,
            base_delay=settings.ai_retry_base_delay,
        )
    if snippet_services is None:
        snippet_services = SnippetServiceFactory(database)

    app = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.auth_client = auth_client
    app.state.ai_service = ai_service
    app.state.snippet_services = snippet_services

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Location"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(snippets.router)
    app.include_router(ai.router)
    app.include_router(auth.router)
    app.include_router(health.router)

    return app


# uvicorn expects `snippet_manager.main:app` to be importable
app = create_app()
