"""
CampusNotes Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() builds the stores and the NoteService,
       registers middleware, exception handlers and routers, and returns a
       configured FastAPI instance.
Who:   Called by uvicorn (uvicorn campusnotes.main:app) or by `campusnotes`
       console script via run().

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  Req ID → Logging → CORS → OPTIONS → Errors         │
    │                                                     │
    │  Routes:                                            │
    │  GET /api/health   GET /api/notes   GET /api/data   │
    │  POST /api/upload  DELETE /api/data/{id}            │
    │                                                     │
    │  app.state.note_service                             │
    │     ├── JsonNoteStore (data_file)                   │
    │     └── CloudinaryBlobStore (credentials)           │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Report missing Cloudinary configuration (not fatal)
    3. Bootstrap the note store file
    Shutdown:
    1. Log shutdown complete
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campusnotes import __version__
from campusnotes.config import Settings, settings as default_settings
from campusnotes.exceptions import (
    BlobStoreError,
    CampusNotesError,
    ConflictError,
    FileStorageError,
    NotFoundError,
    ValidationError,
)
from campusnotes.middleware.errors import UnhandledErrorMiddleware
from campusnotes.middleware.logging import RequestLoggingMiddleware
from campusnotes.middleware.preflight import OptionsShortCircuitMiddleware
from campusnotes.middleware.request_id import RequestIDMiddleware, request_id_var
from campusnotes.routes import health, notes, upload
from campusnotes.services.blob_base import BlobStore
from campusnotes.services.cloudinary_store import CloudinaryBlobStore
from campusnotes.services.json_store import JsonNoteStore
from campusnotes.services.note_service import NoteService
from campusnotes.services.store_base import NoteStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (captured by Docker / process managers)
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, configuration check, note store bootstrap.
    Shutdown: log only; the stores hold no open connections.
    """
    config: Settings = app.state.settings
    service: NoteService = app.state.note_service

    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("CampusNotes Backend starting up...")

    try:
        config.validate_required_for_production()
    except ValueError as e:
        # Keep serving: listing and health still work without the media host
        logger.error("Configuration error: %s", str(e))
        logger.error("Uploads and deletes will fail until the configuration is fixed.")

    await service.store.initialize()

    logger.info("Note store: %s", config.data_file)
    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)
    logger.info("API docs: http://%s:%d/docs", config.backend_host, config.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("CampusNotes Backend shutting down...")
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[dict] = None,
) -> JSONResponse:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler hierarchy (most specific class wins):
        ValidationError    → 400 validation_error, with details
        NotFoundError      → 404 not_found
        ConflictError      → 409 conflict
        FileStorageError   → 500 server_error (includes StoreUnavailableError)
        BlobStoreError     → 500 server_error
        CampusNotesError   → 500 server_error, generic message
        anything else      → 500 internal_server_error (UnhandledErrorMiddleware)

    Only ValidationError exposes its context. Every other context dict, and
    every stack trace, stays in the server log.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Rejected upload: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.warning("[%s] %s | %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(409, "conflict", exc.message)

    @app.exception_handler(FileStorageError)
    @app.exception_handler(BlobStoreError)
    async def handle_storage_error(request: Request, exc: CampusNotesError):
        # Both messages are written to be client-safe; paths stay in context
        logger.error(
            "[%s] %s: %s | %s",
            request_id_var.get(""),
            type(exc).__name__,
            exc.message,
            exc.context,
        )
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(CampusNotesError)
    async def handle_app_error(request: Request, exc: CampusNotesError):
        logger.error("[%s] Application error: %s | %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", "An internal error occurred. Please try again later.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    config: Optional[Settings] = None,
    note_store: Optional[NoteStore] = None,
    blob_store: Optional[BlobStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to use; defaults to the module-level singleton.
        note_store: Record store; defaults to JsonNoteStore(config.data_file).
        blob_store: Media host; defaults to CloudinaryBlobStore with the
                    configured credentials.

    Returns:
        Fully configured FastAPI instance. The NoteService lives on
        app.state.note_service and is handed to routes by dependencies.py.
    """
    config = config or default_settings

    if note_store is None:
        note_store = JsonNoteStore(config.data_file)
    if blob_store is None:
        blob_store = CloudinaryBlobStore(
            cloud_name=config.cloudinary_cloud_name,
            api_key=config.cloudinary_api_key,
            api_secret=config.cloudinary_api_secret,
        )

    app = FastAPI(
        title="CampusNotes API",
        description=(
            "Share study notes and files: upload a file with a title, subject and "
            "description, list what has been shared, and delete entries."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.note_service = NoteService(
        store=note_store,
        blob_store=blob_store,
        max_upload_size=config.max_upload_size,
        blob_root_folder=config.blob_root_folder,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS → OPTIONS → Errors
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(OptionsShortCircuitMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(notes.router)
    app.include_router(upload.router)

    return app


def run() -> None:
    """Console entry point: serve the application with uvicorn."""
    import uvicorn

    setup_logging(default_settings.log_level)
    uvicorn.run(
        "campusnotes.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )


# uvicorn expects `campusnotes.main:app` to be importable
app = create_app()
