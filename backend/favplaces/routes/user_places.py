"""
Favorite Places — User Places Route Handlers
=============================================

What:  Read, add to, and remove from the user's favorites list.
Who:   Called by the client transport on behalf of the FavoritesSynchronizer.

Response shapes follow the client contract:
    GET    /user-places        → {"places": [...]}
    PUT    /user-places        → {"userPlaces": [...]}
    DELETE /user-places/{id}   → {"userPlaces": [...]}

Place ids may contain "/": the DELETE route captures the rest of the path,
so /user-places/a%2Fb (decoded to /user-places/a/b) removes "a/b".

Both mutations answer 200 with the full list even when nothing changed
(duplicate add, removal of an absent id).
"""

import logging

from fastapi import APIRouter, Depends

from favplaces.routes.dependencies import get_favorites_service
from favplaces.schemas.place import (
    AddPlaceRequest,
    ErrorResponse,
    PlacesResponse,
    UserPlacesResponse,
)
from favplaces.services.favorites_service import FavoritesService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user-places", tags=["User Places"])


@router.get(
    "",
    response_model=PlacesResponse,
    responses={
        200: {"description": "Favorites in insertion order", "model": PlacesResponse},
        503: {"description": "Favorites unreadable", "model": ErrorResponse},
    },
    summary="List the user's favorite places",
)
async def list_user_places(
    favorites: FavoritesService = Depends(get_favorites_service),
) -> PlacesResponse:
    places = await favorites.list_favorites()
    return PlacesResponse(places=places)


@router.put(
    "",
    response_model=UserPlacesResponse,
    responses={
        200: {"description": "Favorites after the add", "model": UserPlacesResponse},
        404: {"description": "Unknown place id", "model": ErrorResponse},
        500: {"description": "Favorites could not be saved", "model": ErrorResponse},
        503: {"description": "Documents unreadable", "model": ErrorResponse},
    },
    summary="Add a place to the user's favorites",
)
async def add_user_place(
    body: AddPlaceRequest,
    favorites: FavoritesService = Depends(get_favorites_service),
) -> UserPlacesResponse:
    updated = await favorites.add_favorite(body.place_id)
    return UserPlacesResponse(user_places=updated)


@router.delete(
    "/{place_id:path}",
    response_model=UserPlacesResponse,
    responses={
        200: {"description": "Favorites after the removal", "model": UserPlacesResponse},
        500: {"description": "Favorites could not be saved", "model": ErrorResponse},
        503: {"description": "Favorites unreadable", "model": ErrorResponse},
    },
    summary="Remove a place from the user's favorites",
)
async def remove_user_place(
    place_id: str,
    favorites: FavoritesService = Depends(get_favorites_service),
) -> UserPlacesResponse:
    updated = await favorites.remove_favorite(place_id)
    return UserPlacesResponse(user_places=updated)
