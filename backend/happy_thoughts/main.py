"""
Happy Thoughts API — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the store handle, registers middleware, exception
       handlers and routers, and returns the app. uvicorn serves the
       module-level `app` (uvicorn happy_thoughts.main:app) or `run()`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:      GET /   GET|POST /thoughts            │
    │               PATCH /thoughts/{id}/like  GET /health│
    │                                                     │
    │  Errors:      Validation→400  NotFound→404          │
    │               InvalidInput→404  Store→503           │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, optionally create the schema, log the address
    Shutdown: dispose the store handle (closes pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from happy_thoughts import __version__
from happy_thoughts.config import Settings, settings
from happy_thoughts.database import Database
from happy_thoughts.exceptions import (
    InvalidInputError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from happy_thoughts.middleware.logging import RequestLoggingMiddleware
from happy_thoughts.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from happy_thoughts.routes import health, root, thoughts

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: 2026-01-15T12:00:00 [INFO] happy_thoughts.access: GET /thoughts 200 ...
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # uvicorn's own access log duplicates RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("Happy Thoughts API %s starting up...", __version__)

    if app_settings.auto_create_schema:
        await database.create_schema()
        logger.info("Schema created from model metadata")

    logger.info("Server ready at http://%s:%d", app_settings.host, app_settings.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Happy Thoughts API shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """
    Build the `{success: false, response: {...}}` error envelope.

    The request ID header is set here as well: the catch-all handler runs in
    ServerErrorMiddleware, outside RequestIDMiddleware.
    """
    rid = request_id_var.get("")
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "response": {
                "error": error,
                "message": message,
                "details": details or None,
                "request_id": rid,
            },
        },
        headers={REQUEST_ID_HEADER: rid} if rid else None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and the error envelope.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        RequestValidationError  → 400 Bad Request (wrong types, missing body)
        NotFoundError           → 404 Not Found
        InvalidInputError       → 404 Not Found
        StoreUnavailableError   → 503 Service Unavailable
        Exception (fallback)    → 500 Internal Server Error

    Store and unexpected errors never expose driver messages or stack traces;
    those are logged server-side with the request ID.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return error_response(400, exc.error_code, exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), errors)
        return error_response(
            400,
            ValidationError.error_code,
            "Request parameters or body are invalid",
            {"errors": errors},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, exc.error_code, exc.message, exc.context)

    @app.exception_handler(InvalidInputError)
    async def handle_invalid_input(request: Request, exc: InvalidInputError):
        return error_response(404, exc.error_code, exc.message, exc.context)

    @app.exception_handler(StoreUnavailableError)
    async def handle_store_unavailable(request: Request, exc: StoreUnavailableError):
        logger.error(
            "[%s] Store unavailable: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return error_response(503, exc.error_code, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use; defaults to the module singleton
        database: Store handle to serve from; built from settings when omitted.
                  Tests pass a handle on a temporary SQLite file.

    Returns: Fully configured FastAPI instance.
    """
    app_settings = app_settings or settings
    database = database or Database.from_settings(app_settings)

    app = FastAPI(
        title="Happy Thoughts API",
        description="Post short thoughts, browse the latest ones and send them hearts.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.database = database

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS
    origins = app_settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(root.router)
    app.include_router(thoughts.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app on HOST:PORT."""
    uvicorn.run(
        "happy_thoughts.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
