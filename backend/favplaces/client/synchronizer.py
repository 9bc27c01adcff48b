"""
Favorite Places — Favorites Synchronizer
=========================================

What:  In-memory, observable copy of the user's favorites, kept in step with
       the API through optimistic updates.
How:   The cache is a private StateCell; consumers read `places` (a
       ReadOnlyState) and subscribe to it. The only ways to change the cache
       are `load`, `add_optimistic` and `remove_optimistic`.

Optimistic Mutation (add shown, remove is symmetric):
    ┌────────────┐   ┌─────────────────┐   ┌──────────────┐
    │ snapshot   │──▶│ cache = snap+p  │──▶│ PUT          │
    │ = cache    │   │ notify at once  │   │ /user-places │
    └────────────┘   └─────────────────┘   └──────┬───────┘
                                      ok ┌────────┴────────┐ failed
                                         ▼                 ▼
                              keep optimistic     cache = snapshot
                              state (response     report(message)
                              not merged)         raise SyncError

Overlapping Mutations:
    serialize_mutations=True (default): each mutation holds a per-instance
    lock from snapshot to confirmation. A rollback can then only undo its
    own change; the second optimistic update waits for the first call.

    serialize_mutations=False: mutations overlap freely. A rollback restores
    the snapshot taken before its own optimistic update, which discards any
    mutation that landed in between.

Teardown:
    `close()` (or leaving `async with`) cancels in-flight calls. A cancelled
    or late-resolving call leaves the cache alone, reports nothing, and
    raises asyncio.CancelledError in the awaiting caller.
"""

import asyncio
import contextlib
import logging
from typing import AsyncContextManager, List, Optional, Tuple

from favplaces.client.errors import ErrorReporter
from favplaces.client.scope import Scope
from favplaces.client.state import ReadOnlyState, StateCell
from favplaces.client.transport import PlacesApi
from favplaces.config import settings
from favplaces.exceptions import FavPlacesError, SyncError
from favplaces.schemas.place import Place

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Something went wrong fetching your favorite places. Please try again later."
ADD_ERROR_MESSAGE = "Failed to store selected place."
REMOVE_ERROR_MESSAGE = "Failed to remove the selected place."


class FavoritesSynchronizer:
    """
    Client-side owner of the favorites cache.

    Args:
        api: Transport used for every durable call.
        errors: Where user-facing failure messages are reported.
        serialize_mutations: See module docstring; defaults to
                             settings.serialize_mutations.
        scope: Lifetime to bind in-flight calls to. A private one is created
               when omitted; pass a shared Scope to tear several components
               down together.
    """

    def __init__(
        self,
        api: PlacesApi,
        errors: ErrorReporter,
        serialize_mutations: Optional[bool] = None,
        scope: Optional[Scope] = None,
    ):
        self._api = api
        self._errors = errors
        self._serialize = (
            settings.serialize_mutations if serialize_mutations is None else serialize_mutations
        )
        self._mutation_lock = asyncio.Lock()

        self._places: StateCell[Tuple[Place, ...]] = StateCell(())
        self._fetching: StateCell[bool] = StateCell(False)
        self.places: ReadOnlyState[Tuple[Place, ...]] = self._places.as_readonly()
        self.fetching: ReadOnlyState[bool] = self._fetching.as_readonly()

        self._scope = scope or Scope()
        self._scope.add_finalizer(self._release_observers)

    @property
    def closed(self) -> bool:
        return self._scope.closed

    def is_favorite(self, place_id: str) -> bool:
        return any(p.id == place_id for p in self._places.value)

    # ── Operations ────────────────────────────────────────────────────────

    async def load(self) -> List[Place]:
        """
        Replace the cache with the durable favorites list.

        `fetching` is True for the duration of the call and False afterwards,
        whatever the outcome. On failure the cache keeps its previous value.

        Raises:
            SyncError: the list could not be fetched (message is user-facing).
        """
        self._scope.ensure_open()
        self._fetching.set(True)
        try:
            places = await self._scope.run(self._api.fetch_user_places())
        except FavPlacesError as exc:
            logger.warning("Loading favorites failed (%s): %s", exc.kind, exc.message)
            self._errors.report(LOAD_ERROR_MESSAGE)
            raise SyncError(LOAD_ERROR_MESSAGE, cause=exc) from exc
        finally:
            self._fetching.set(False)

        self._places.set(tuple(places))
        return list(places)

    async def add_optimistic(self, place: Place) -> List[Place]:
        """
        Show `place` as a favorite immediately, then store it.

        Returns:
            The durable list from the server. It is NOT merged into the cache.

        Raises:
            SyncError: the durable add failed; the cache is back at its
                       pre-call snapshot and the error has been reported.
        """
        self._scope.ensure_open()
        async with self._mutation_guard():
            self._raise_if_torn_down()
            snapshot = self._places.value
            if not any(p.id == place.id for p in snapshot):
                self._places.set(snapshot + (place,))

            try:
                return await self._scope.run(self._api.add_user_place(place.id))
            except FavPlacesError as exc:
                self._roll_back(snapshot, ADD_ERROR_MESSAGE, exc)
                raise SyncError(ADD_ERROR_MESSAGE, cause=exc) from exc

    async def remove_optimistic(self, place: Place) -> List[Place]:
        """
        Hide `place` immediately, then remove it from the durable list.

        Raises:
            SyncError: the durable remove failed; the cache is back at its
                       pre-call snapshot and the error has been reported.
        """
        self._scope.ensure_open()
        async with self._mutation_guard():
            self._raise_if_torn_down()
            snapshot = self._places.value
            self._places.set(tuple(p for p in snapshot if p.id != place.id))

            try:
                return await self._scope.run(self._api.remove_user_place(place.id))
            except FavPlacesError as exc:
                self._roll_back(snapshot, REMOVE_ERROR_MESSAGE, exc)
                raise SyncError(REMOVE_ERROR_MESSAGE, cause=exc) from exc

    # ── Lifetime ──────────────────────────────────────────────────────────

    def close(self) -> None:
        self._scope.close()

    async def aclose(self) -> None:
        await self._scope.aclose()

    async def __aenter__(self) -> "FavoritesSynchronizer":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ── Internals ─────────────────────────────────────────────────────────

    def _mutation_guard(self) -> AsyncContextManager:
        if self._serialize:
            return self._mutation_lock
        return contextlib.nullcontext()

    def _raise_if_torn_down(self) -> None:
        # Closed while waiting for an earlier mutation
        if self._scope.closed:
            raise asyncio.CancelledError()

    def _roll_back(self, snapshot: Tuple[Place, ...], message: str, exc: FavPlacesError) -> None:
        logger.info(
            "Rolling back favorites to %d item(s) after %s: %s",
            len(snapshot), exc.kind, exc.message,
        )
        self._places.set(snapshot)
        self._errors.report(message)

    def _release_observers(self) -> None:
        self._places.clear_observers()
        self._fetching.clear_observers()
