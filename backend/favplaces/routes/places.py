"""
Favorite Places — Catalog Route Handler
========================================

What:  GET /places, the list of every place a user can pick from.
Who:   Called by the client's AvailablePlaces loader.
"""

import logging

from fastapi import APIRouter, Depends

from favplaces.routes.dependencies import get_catalog_service
from favplaces.schemas.place import ErrorResponse, PlacesResponse
from favplaces.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Places"])


@router.get(
    "/places",
    response_model=PlacesResponse,
    responses={
        200: {"description": "All places in catalog order", "model": PlacesResponse},
        503: {"description": "Catalog unreadable", "model": ErrorResponse},
    },
    summary="List all available places",
)
async def list_places(
    catalog: CatalogService = Depends(get_catalog_service),
) -> PlacesResponse:
    places = await catalog.list_places()
    return PlacesResponse(places=places)
