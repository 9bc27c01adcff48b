"""
Favorite Places — Health Check Route
=====================================

What:  Health check endpoint for monitoring and container probes.
How:   Reads both JSON documents and reports whether they decode.

Status levels:
    - healthy:   both documents readable (HTTP 200)
    - unhealthy: at least one document unreadable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from favplaces import __version__
from favplaces.routes.dependencies import get_catalog_service, get_favorites_service
from favplaces.schemas.place import HealthResponse
from favplaces.services.catalog_service import CatalogService
from favplaces.services.favorites_service import FavoritesService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "A document is unreadable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    catalog: CatalogService = Depends(get_catalog_service),
    favorites: FavoritesService = Depends(get_favorites_service),
) -> HealthResponse:
    """
    Probe the catalog and favorites documents.

    The probe only reads; it never creates or rewrites a document.
    """
    catalog_ok = await catalog.document.is_readable()
    favorites_ok = await favorites.document.is_readable()

    overall = "healthy" if catalog_ok and favorites_ok else "unhealthy"
    if overall != "healthy":
        logger.warning(
            "Health check: catalog=%s favorites=%s",
            "readable" if catalog_ok else "unreadable",
            "readable" if favorites_ok else "unreadable",
        )
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        catalog="readable" if catalog_ok else "unreadable",
        favorites="readable" if favorites_ok else "unreadable",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
