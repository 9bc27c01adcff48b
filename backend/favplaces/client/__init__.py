"""
Favorite Places — Client Package
=================================

What:  Everything a presentation layer needs to show places and favorites.

Component Inventory:
    - PlacesApi: httpx transport for the four API endpoints
    - FavoritesSynchronizer: optimistic, observable favorites cache
    - AvailablePlaces: one-shot catalog loader with fetching/error state
    - ErrorChannel: single-slot error message owned by the presentation layer
    - Scope: consumer lifetime; closing it cancels in-flight calls

Typical wiring:
    errors = ErrorChannel()
    async with PlacesApi() as api, Scope() as scope:
        favorites = FavoritesSynchronizer(api, errors, scope=scope)
        await favorites.load()
        await favorites.add_optimistic(place)
"""

from favplaces.client.catalog import CATALOG_ERROR_MESSAGE, AvailablePlaces
from favplaces.client.errors import ErrorChannel, ErrorReporter
from favplaces.client.scope import Scope
from favplaces.client.state import ReadOnlyState, StateCell, Subscription
from favplaces.client.synchronizer import (
    ADD_ERROR_MESSAGE,
    LOAD_ERROR_MESSAGE,
    REMOVE_ERROR_MESSAGE,
    FavoritesSynchronizer,
)
from favplaces.client.transport import PlacesApi

__all__ = [
    "ADD_ERROR_MESSAGE",
    "CATALOG_ERROR_MESSAGE",
    "LOAD_ERROR_MESSAGE",
    "REMOVE_ERROR_MESSAGE",
    "AvailablePlaces",
    "ErrorChannel",
    "ErrorReporter",
    "FavoritesSynchronizer",
    "PlacesApi",
    "ReadOnlyState",
    "Scope",
    "StateCell",
    "Subscription",
]
