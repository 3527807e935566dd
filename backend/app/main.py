"""
Postboard Backend: FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, routes, exception handlers and the
       database engine; `app` is the instance uvicorn serves.
Who:   uvicorn (`uvicorn app.main:app`), the `python -m app` entry point, tests.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  Security Headers → CORS → Request ID → Logging → GZip   │
    │  → Unhandled Error (unknown exception → generic 500)     │
    │                                                          │
    │  Routes (under /api):                                    │
    │  POST /posts                                             │
    │                                                          │
    │  Exception Handlers:                                     │
    │  HTTPError → its status │ validation → 400 │ other → 500 │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   configure logging, connect to the database, create tables
               (development only)
    Shutdown:  dispose the engine, closing every pooled connection
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import Settings, get_settings
from app.database import (
    build_engine,
    build_session_factory,
    connect,
    create_tables,
    dispose_engine,
)
from app.exceptions import HTTPError, RequestValidationFailed
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.errors import UnhandledErrorMiddleware
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from app.middleware.security_headers import SecurityHeadersMiddleware
from app.responses import GENERIC_ERROR_MESSAGE, error_response, request_id_for
from app.routes import API_ROUTERS
from app.validation import format_errors

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] app.services.post_service: Post ... created
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our own access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    engine: AsyncEngine = app.state.engine

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("Postboard API %s starting (%s)", __version__, settings.environment)

    connected = await connect(engine)
    if connected and settings.is_development:
        await create_tables(engine)
        logger.info("Database tables ensured")

    logger.info("Listening on http://%s:%d%s", settings.host, settings.port, settings.api_prefix)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Postboard API shutting down...")
    await dispose_engine(engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Centralized Error Handling
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Install the handlers that turn every propagated error into a response.

    Handler hierarchy:
        HTTPError (incl. RequestValidationFailed) → exc.status_code, exc.message
        RequestValidationError (FastAPI)          → 400 with field messages
        StarletteHTTPException (404, 405, ...)    → exc.status_code, exc.detail
        Exception (fallback)                      → 500, generic message

    Unknown exceptions are normally caught first by UnhandledErrorMiddleware,
    so the 500 still gets security, CORS and access-log treatment. The
    Exception handler only fires for errors raised by the middleware itself.

    Internal details (stack traces, SQL, context dicts) are logged only.
    """

    @app.exception_handler(HTTPError)
    async def handle_http_error(request: Request, exc: HTTPError):
        errors = exc.errors if isinstance(exc, RequestValidationFailed) else None
        level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        logger.log(level, "[%s] %d %s | Context: %s", request_id_for(request), exc.status_code, exc.message, exc.context)
        return error_response(request, exc.status_code, exc.error_code, exc.message, errors)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = format_errors(exc.errors(), location_prefixed=True)
        logger.warning("[%s] Request validation failed: %s", request_id_for(request), errors)
        return error_response(request, 400, "validation_error", "Request validation failed", errors)

    @app.exception_handler(StarletteHTTPException)
    async def handle_framework_http_error(request: Request, exc: StarletteHTTPException):
        error = HTTPError(exc.status_code, str(exc.detail))
        response = error_response(request, exc.status_code, error.error_code, error.message)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_for(request),
            str(exc),
            exc_info=exc,
        )
        return error_response(request, 500, "internal_server_error", GENERIC_ERROR_MESSAGE)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to use; defaults to the process settings
            (raises ConfigurationError when the environment is invalid).
        engine: Database engine to use; built from settings when omitted.

    Returns:
        A FastAPI app with `settings`, `engine` and `session_factory` on app.state.
    """
    settings = settings or get_settings()
    engine = engine or build_engine(settings)

    app = FastAPI(
        title="Postboard API",
        description="Create posts through a small JSON API.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # ── Register Middleware ───────────────────────────────────────────────
    # Added innermost first: the last one added runs first on each request.
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    app.add_middleware(SecurityHeadersMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    for router in API_ROUTERS:
        app.include_router(router, prefix=settings.api_prefix)

    return app


# uvicorn serves `app.main:app`
app = create_app()
