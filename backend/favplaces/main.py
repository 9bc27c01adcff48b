"""
Favorite Places — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       with its own catalog and favorites services on `app.state`.
Who:   Called by uvicorn (uvicorn favplaces.main:app) and by the tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌─────────────────┐   │
    │  │  Req ID  │→│  Logging    │→│  CORS           │   │
    │  └──────────┘ └─────────────┘ └─────────────────┘   │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────┐ ┌──────────────────┐ ┌───────────┐  │
    │  │ GET places │ │ GET/PUT/DELETE   │ │ GET health│  │
    │  │            │ │ user-places      │ │           │  │
    │  └────────────┘ └──────────────────┘ └───────────┘  │
    │  Static images mounted at / (when the dir exists)   │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ NotFound→404 │ Unavailable→503 │ Persist→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Check the configured data paths (logged, not fatal)
    3. Create an empty favorites document if none exists
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from favplaces import __version__
from favplaces.config import Settings, settings
from favplaces.exceptions import (
    FavPlacesError,
    NotFoundError,
    PersistenceError,
    UnavailableError,
)
from favplaces.middleware.logging import RequestLoggingMiddleware
from favplaces.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from favplaces.routes import health, places, user_places
from favplaces.services.catalog_service import CatalogService
from favplaces.services.document_store import JsonDocument
from favplaces.services.favorites_service import FavoritesService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # uvicorn's own access log duplicates favplaces.access
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup sequence:
        1. Setup logging
        2. Validate data paths
        3. Seed user-places.json with [] when missing
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("Favorite Places API starting up...")

    try:
        app_settings.validate_paths()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    favorites: FavoritesService = app.state.favorites_service
    try:
        await favorites.document.ensure_exists([])
    except PersistenceError as e:
        logger.error("Could not create favorites document: %s | Context: %s", e.message, e.context)

    logger.info("Catalog: %s", app_settings.places_path.resolve())
    logger.info("Favorites: %s", app_settings.user_places_path.resolve())
    logger.info(
        "Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port
    )
    logger.info("=" * 60)

    yield

    logger.info("Favorite Places API shut down.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(kind: str, message: str) -> dict:
    return {"error": kind, "message": message, "request_id": request_id_var.get("")}


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        NotFoundError           → 404 Not Found
        UnavailableError        → 503 Service Unavailable
        PersistenceError        → 500 Internal Server Error
        FavPlacesError (base)   → 500 Internal Server Error
        HTTPException 404/405   → 404 {"message": "404 - Not Found"}
        Exception (fallback)    → 500 Internal Server Error

    Response bodies never carry paths or OS errors; those go to the log.
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body(exc.kind, exc.message))

    @app.exception_handler(UnavailableError)
    async def handle_unavailable(request: Request, exc: UnavailableError):
        logger.error(
            "[%s] Document unavailable: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return JSONResponse(status_code=503, content=_error_body(exc.kind, exc.message))

    @app.exception_handler(PersistenceError)
    async def handle_persistence(request: Request, exc: PersistenceError):
        logger.error(
            "[%s] Persistence error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return JSONResponse(status_code=500, content=_error_body(exc.kind, exc.message))

    @app.exception_handler(FavPlacesError)
    async def handle_app_error(request: Request, exc: FavPlacesError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return JSONResponse(status_code=500, content=_error_body(exc.kind, exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """
        Unknown routes and missing images answer with the plain 404 body.

        405 is folded into it: with images mounted at "/", every unmatched
        non-GET request reaches StaticFiles, which only knows GET/HEAD.
        """
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"message": "404 - Not Found"})
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Stack trace goes to the log only."""
        logger.error(
            "[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again later.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to build the app from; defaults to the
                      module-level singleton. Tests pass their own to point
                      the stores at a temporary data directory.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Favorite Places API",
        description="Browse a catalog of places and keep a persisted list of favorites.",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Services ──────────────────────────────────────────────────────────
    catalog = CatalogService(
        JsonDocument(app_settings.places_path),
        delay_seconds=app_settings.places_delay_seconds,
    )
    app.state.settings = app_settings
    app.state.catalog_service = catalog
    app.state.favorites_service = FavoritesService(
        JsonDocument(app_settings.user_places_path), catalog
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=app_settings.cors_methods_list,
        allow_headers=app_settings.cors_headers_list,
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(places.router)
    app.include_router(user_places.router)
    app.include_router(health.router)

    # Catch-all mount; must come after every router
    images_dir = Path(app_settings.images_dir)
    if images_dir.is_dir():
        app.mount("/", StaticFiles(directory=images_dir), name="images")
        logger.debug("Serving images from %s", images_dir.resolve())

    return app


app = create_app()
