"""
CrudHub Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, resource mounting, error handling
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn crudhub.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────────────────┐  │
    │  │  Req ID  │→│  Logging    │→│  CORS (any orig) │  │
    │  └──────────┘ └─────────────┘ └──────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────┐ ┌────────┐ ┌───────────┐  │
    │  │ /api/<resource>  x N │ │ /health│ │ /         │  │
    │  └──────────────────────┘ └────────┘ └───────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ NotFound→404 │ Store→503 │ DB→500 │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Connect every resource's collection (fail fast or degrade)
    3. Log startup complete

    Shutdown:
    1. Close collections and dispose the document store
    2. Log shutdown complete
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from crudhub import __version__
from crudhub.config import Settings, settings as default_settings
from crudhub.exceptions import (
    CrudHubError,
    DatabaseError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from crudhub.middleware.logging import RequestLoggingMiddleware
from crudhub.middleware.request_id import RequestIDMiddleware, request_id_var
from crudhub.resources import ResourceRegistry
from crudhub.routes import health, home
from crudhub.routes.crud import create_crud_router

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect resources on startup, release them on shutdown.

    A store that cannot be reached either aborts startup
    (FAIL_FAST_ON_STORE_ERROR=true) or leaves its resource mounted but
    answering 503, visible in /health. It is never silently skipped.
    """
    app_settings: Settings = app.state.settings
    registry: ResourceRegistry = app.state.registry

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("CrudHub Backend starting up...")

    await registry.connect_all(fail_fast=app_settings.fail_fast_on_store_error)

    for resource in registry:
        logger.info(
            "  %s%s/%s → %s (%s)",
            "" if resource.available else "[UNAVAILABLE] ",
            app_settings.api_prefix,
            resource.name,
            resource.backend,
            repr(resource.collection),
        )
    logger.info(
        "Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port
    )
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("CrudHub Backend shutting down...")
    await registry.close_all()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError        → 400 Bad Request
        RequestValidationError → 400 Bad Request (malformed or missing body)
        NotFoundError          → 404 Not Found
        StoreUnavailableError  → 503 Service Unavailable
        DatabaseError          → 500 Internal Server Error
        CrudHubError (base)    → 500 Internal Server Error
        Exception (fallback)   → 500 Internal Server Error

    Security: handlers never put stack traces or SQL in the response body.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, details=exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        # Raised by FastAPI before the route runs: unparseable JSON or no body
        errors = [
            {
                "loc": list(error.get("loc", ())),
                "msg": error.get("msg", ""),
                "type": error.get("type", ""),
            }
            for error in exc.errors()
        ]
        logger.warning("[%s] Invalid request body: %s", request_id_var.get(""), errors)
        return _error_response(
            400,
            "validation_error",
            "Request body must be a valid JSON object",
            details={"field": "body", "errors": jsonable_encoder(errors)},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(StoreUnavailableError)
    async def handle_store_unavailable(request: Request, exc: StoreUnavailableError):
        logger.error("[%s] Store unavailable: %s", request_id_var.get(""), exc.message)
        return _error_response(503, "service_unavailable", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        # Context is logged server-side only
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(
            500, "server_error", "An internal error occurred. Please try again later."
        )

    @app.exception_handler(CrudHubError)
    async def handle_crudhub_error(request: Request, exc: CrudHubError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    registry: Optional[ResourceRegistry] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use; defaults to the module singleton.
        registry:     Pre-built registry (tests inject collections directly);
                      defaults to ResourceRegistry.from_settings(app_settings).

    Returns:
        FastAPI instance with one CRUD router mounted per resource at
        <API_PREFIX>/<resource name>.
    """
    if app_settings is None:
        app_settings = default_settings
    if registry is None:
        registry = ResourceRegistry.from_settings(app_settings)

    app = FastAPI(
        title="CrudHub API",
        description=(
            "Generic CRUD resources (teas, biscuits, games, ...) served by one "
            "router factory over in-memory or document-store collections."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.registry = registry

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(home.router)
    app.include_router(health.router)
    for resource in registry:
        app.include_router(
            create_crud_router(resource.collection),
            prefix=f"{app_settings.api_prefix}/{resource.name}",
            tags=[resource.name],
        )

    return app


# uvicorn expects `crudhub.main:app` to be importable
app = create_app()
