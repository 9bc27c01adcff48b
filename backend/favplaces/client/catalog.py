"""Client-side loader for the list of places a user can choose from."""

import logging
from typing import List, Optional, Tuple

from favplaces.client.errors import ErrorReporter
from favplaces.client.scope import Scope
from favplaces.client.state import ReadOnlyState, StateCell
from favplaces.client.transport import PlacesApi
from favplaces.exceptions import FavPlacesError, SyncError
from favplaces.schemas.place import Place

logger = logging.getLogger(__name__)

CATALOG_ERROR_MESSAGE = (
    "Something went wrong fetching the available places. Please try again later."
)


class AvailablePlaces:
    """
    Loads the catalog once for one consumer.

    `places` is None until the first successful load. A failed load keeps the
    previous value, sets `error` (and reports to `errors` when given), and
    raises SyncError.
    """

    def __init__(
        self,
        api: PlacesApi,
        errors: Optional[ErrorReporter] = None,
        scope: Optional[Scope] = None,
    ):
        self._api = api
        self._errors = errors

        self._places: StateCell[Optional[Tuple[Place, ...]]] = StateCell(None)
        self._fetching: StateCell[bool] = StateCell(False)
        self._error: StateCell[Optional[str]] = StateCell(None)
        self.places: ReadOnlyState[Optional[Tuple[Place, ...]]] = self._places.as_readonly()
        self.fetching: ReadOnlyState[bool] = self._fetching.as_readonly()
        self.error: ReadOnlyState[Optional[str]] = self._error.as_readonly()

        self._scope = scope or Scope()
        self._scope.add_finalizer(self._release_observers)

    async def load(self) -> List[Place]:
        self._scope.ensure_open()
        self._fetching.set(True)
        try:
            places = await self._scope.run(self._api.fetch_places())
        except FavPlacesError as exc:
            logger.warning("Loading available places failed (%s): %s", exc.kind, exc.message)
            self._error.set(CATALOG_ERROR_MESSAGE)
            if self._errors is not None:
                self._errors.report(CATALOG_ERROR_MESSAGE)
            raise SyncError(CATALOG_ERROR_MESSAGE, cause=exc) from exc
        finally:
            self._fetching.set(False)

        self._error.set(None)
        self._places.set(tuple(places))
        return list(places)

    def close(self) -> None:
        self._scope.close()

    async def aclose(self) -> None:
        await self._scope.aclose()

    async def __aenter__(self) -> "AvailablePlaces":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _release_observers(self) -> None:
        self._places.clear_observers()
        self._fetching.clear_observers()
        self._error.clear_observers()
