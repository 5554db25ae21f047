"""
Form Intake Service — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers; the
       lifespan builds the process-wide Database and MailService.
Who:   uvicorn (`uvicorn intake.main:app` or `python -m intake`) and tests.

Lifecycle:
    Startup:
    1. Configure logging
    2. Build the Database (connection pool) and create missing tables
    3. Build the MailService (disabled when credentials are missing)

    Shutdown:
    1. Dispose the database engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from intake import __version__
from intake.config import Settings, settings as default_settings
from intake.database import Database
from intake.exceptions import DatabaseError
from intake.middleware.logging import RequestLoggingMiddleware
from intake.middleware.request_id import RequestIDMiddleware, request_id_var
from intake.routes import health, submissions
from intake.services.mail_service import MailService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] intake.services.inquiry_service: ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Build the process-scoped singletons and tear them down on shutdown.

    Table creation failures are logged by Database.init_schema() and do not
    stop the server: submissions to a missing table will surface as 500s.
    """
    config: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("Form Intake Service %s starting up...", __version__)

    database = Database.from_settings(config)
    app.state.database = database
    await database.init_schema()

    mail_service = MailService.from_settings(config)
    app.state.mail_service = mail_service
    if not mail_service.enabled:
        logger.warning(
            "Mail disabled: set EMAIL_USER, EMAIL_PASS and EMAIL_RECEIVER to send notifications"
        )

    logger.info("Server running on http://%s:%d", config.host, config.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Form Intake Service shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _validation_summary(exc: RequestValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the {success: false, message, error} envelope.

        RequestValidationError → 422 "Invalid request body"
        DatabaseError          → 500 "Database error" + driver message
        Exception (fallback)   → 500 "Internal server error", details logged only
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        summary = _validation_summary(exc)
        logger.warning("[%s] Invalid request body: %s", rid, summary)
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "message": "Invalid request body",
                "error": summary,
            },
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.error, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": exc.message,
                "error": exc.error,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Internal server error",
                "error": "An unexpected error occurred",
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to run with; defaults to the environment-loaded
                `intake.config.settings`.
    """
    config = config or default_settings

    app = FastAPI(
        title="Form Intake API",
        description=(
            "Accepts study-abroad, work-abroad and investment inquiry forms, "
            "stores each submission and emails a summary."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    origins = config.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(submissions.router)
    app.include_router(health.router)

    return app


app = create_app()
