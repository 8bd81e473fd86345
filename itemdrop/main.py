"""
ItemDrop Backend - FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn itemdrop.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │  Req ID  │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────┐ ┌─────────────────┐           │
    │  │ POST /api/ingest │ │ GET /health     │           │
    │  └──────────────────┘ └─────────────────┘           │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ Storage/DB→500 │ Other→500  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → credential validation (fails the process) → log ready
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from itemdrop import __version__
from itemdrop.config import settings
from itemdrop.database import dispose_engine
from itemdrop.exceptions import (
    DatabaseError,
    ObjectStorageError,
    UnexpectedError,
    ValidationError,
)
from itemdrop.middleware.logging import RequestLoggingMiddleware
from itemdrop.middleware.request_id import RequestIDMiddleware, request_id_var
from itemdrop.routes import health, ingest

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Validate backend credentials; missing ones abort startup
    Shutdown:
        1. Dispose database engine (close all pooled connections)
    """
    setup_logging()
    logger.info("ItemDrop Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        raise RuntimeError("Refusing to start with incomplete configuration") from e

    logger.info(
        "Object store: %s (bucket=%s)", settings.storage_backend, settings.content_bucket
    )
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("ItemDrop Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and `{"error": ...}` bodies.

    Handler hierarchy:
        ValidationError         → 400 {"error": <message>}
        RequestValidationError  → 400 {"error": "invalid request body", "details": [...]}
        HTTPException           → its status (405, 404, ...) {"error": <reason>}
        ObjectStorageError      → 500 {"error": <backend message>}
        DatabaseError           → 500 {"error": <backend message>}
        UnexpectedError         → 500 {"error": "internal_error", "message": <message>}
        Exception (fallback)    → 500 {"error": "internal_error", "message": <message>}
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Invalid request body: %s", rid, exc.errors())
        return JSONResponse(
            status_code=400,
            content={
                "error": "invalid request body",
                "details": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(ObjectStorageError)
    async def handle_object_storage_error(request: Request, exc: ObjectStorageError):
        rid = request_id_var.get("")
        logger.error("[%s] Object storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(UnexpectedError)
    async def handle_unexpected_error(request: Request, exc: UnexpectedError):
        rid = request_id_var.get("")
        logger.error("[%s] Internal error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": "internal_error", "message": exc.message},
        )

    @app.exception_handler(Exception)
    async def handle_uncaught_exception(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unhandled error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "internal_error", "message": str(exc)},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="ItemDrop API",
        description=(
            "Ingestion endpoint for user-submitted items. Accepts a note, an optional "
            "source URL and an optional base64 JPEG, stores the image in the content "
            "bucket and records the item with status 'pending'."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(ingest.router)
    app.include_router(health.router)

    return app


app = create_app()
