"""
SessionLog Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn sessionlog.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌────────┐ ┌──────────┐  │
    │  │ Req ID   │→│ Logging  │→│  GZip  │→│  CORS    │  │
    │  └──────────┘ └──────────┘ └────────┘ └──────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ /api/sessions│ │ /api/logs    │ │ GET /health │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ NotFound→404 (empty) │ everything else→500   │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging → wait for the database → create tables
              (unless CREATE_TABLES_ON_STARTUP=false)
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from sessionlog import __version__
from sessionlog.config import settings
from sessionlog.database import dispose_engine, init_models, wait_for_database
from sessionlog.exceptions import NotFoundError, SessionLogError
from sessionlog.middleware.logging import RequestLoggingMiddleware
from sessionlog.middleware.request_id import RequestIDMiddleware, request_id_var
from sessionlog.resources import RESOURCES
from sessionlog.routes import health
from sessionlog.routes.resources import build_resource_router

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once during app startup, before any other initialization.
    Format: 2024-01-15T12:00:00 [INFO] sessionlog.services.resource_controller: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # These log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Run startup before the yield and shutdown after it."""
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("SessionLog Backend %s starting up...", __version__)

    await wait_for_database()
    if settings.create_tables_on_startup:
        await init_models()
        logger.info("Tables ensured for: %s", ", ".join(r.name for r in RESOURCES))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("SessionLog Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def respond_with_error(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """
    The one error responder: a 500 carrying the error detail.

    Every failure except NotFoundError ends here, whatever its type, so
    callers always get the same body shape (see ErrorResponse).
    """
    return JSONResponse(
        status_code=500,
        content={
            "error": code,
            "message": message,
            "details": details or {},
            "request_id": request_id_var.get(""),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers.

    Handler hierarchy:
        NotFoundError           → 404 Not Found, empty body
        SessionLogError (base)  → 500 via respond_with_error (validation,
                                  persistence)
        Exception (fallback)    → 500 via respond_with_error
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        """Record absent: empty 404, nothing else happens."""
        logger.debug("[%s] %s", request_id_var.get(""), exc.message)
        return Response(status_code=404)

    @app.exception_handler(SessionLogError)
    async def handle_app_error(request: Request, exc: SessionLogError):
        rid = request_id_var.get("")
        logger.warning("[%s] %s: %s | Context: %s", rid, exc.code, exc.message, exc.context)
        return respond_with_error(exc.code, exc.message, exc.context)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all for unexpected errors; full stack trace goes to the log."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return respond_with_error(
            "internal_server_error",
            str(exc) or type(exc).__name__,
            {"error_type": type(exc).__name__},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="SessionLog API",
        description=(
            "CRUD service for work sessions and their log lines. Every resource "
            "supports index, show, create, upsert (PUT), JSON-Patch (PATCH) and destroy."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added runs first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    for resource in RESOURCES:
        app.include_router(build_resource_router(resource))
    app.include_router(health.router)

    return app


# uvicorn expects `sessionlog.main:app` to be importable
app = create_app()
