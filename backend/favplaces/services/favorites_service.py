"""
Favorite Places — Favorites Service (Durable Favorites Store)
==============================================================

What:  The single user's favorites list, persisted as user-places.json.
How:   Every mutation is a whole-document read → modify → write cycle.
Who:   PUT/DELETE/GET /user-places route handlers.

Mutation Flow (add):
    ┌──────────────┐    ┌───────────────┐    ┌──────────────┐    ┌──────────┐
    │ resolve id   │───▶│ read favorites│───▶│ already in?  │───▶│ append + │
    │ in catalog   │    │ document      │    │ → return as is│   │ write    │
    └──────────────┘    └───────────────┘    └──────────────┘    └──────────┘

Both add and remove are idempotent: adding a present id and removing an
absent id return the list unchanged. They still rewrite the document, which
keeps the response identical to what a reader would see afterwards.

Concurrency:
    Read-modify-write cycles inside one process run under an asyncio.Lock,
    so two requests cannot interleave and lose an update. Two server
    processes sharing one data directory are NOT coordinated; the document
    assumes a single writer process.
"""

import asyncio
import logging
from typing import List

from pydantic import ValidationError as SchemaError

from favplaces.exceptions import UnavailableError
from favplaces.schemas.place import Place
from favplaces.services.catalog_service import CatalogService
from favplaces.services.document_store import JsonDocument

logger = logging.getLogger(__name__)


class FavoritesService:
    """
    Durable favorites list.

    Invariant: the stored list never holds two entries with the same id.
    """

    def __init__(self, document: JsonDocument, catalog: CatalogService):
        self.document = document
        self.catalog = catalog
        self._lock = asyncio.Lock()

    async def list_favorites(self) -> List[Place]:
        """
        Raises:
            UnavailableError: favorites document cannot be read or decoded.
        """
        return await self._load()

    async def add_favorite(self, place_id: str) -> List[Place]:
        """
        Append the catalog place `place_id` unless it is already a favorite.

        Returns:
            The favorites list after the operation.

        Raises:
            NotFoundError: `place_id` is not in the catalog.
            UnavailableError: a document cannot be read.
            PersistenceError: the favorites document cannot be written.
        """
        place = await self.catalog.get_place(place_id)

        async with self._lock:
            favorites = await self._load()
            if any(p.id == place.id for p in favorites):
                logger.debug("Place %s already a favorite", place.id)
            else:
                favorites = [*favorites, place]
                logger.info("Added place %s to favorites (%d total)", place.id, len(favorites))
            await self._save(favorites)

        return favorites

    async def remove_favorite(self, place_id: str) -> List[Place]:
        """
        Remove `place_id` from the favorites if present.

        Returns:
            The favorites list after the operation.

        Raises:
            UnavailableError: the favorites document cannot be read.
            PersistenceError: the favorites document cannot be written.
        """
        async with self._lock:
            favorites = await self._load()
            index = next((i for i, p in enumerate(favorites) if p.id == place_id), None)
            if index is None:
                logger.debug("Place %s is not a favorite; nothing to remove", place_id)
            else:
                favorites = favorites[:index] + favorites[index + 1:]
                logger.info("Removed place %s from favorites (%d left)", place_id, len(favorites))
            await self._save(favorites)

        return favorites

    async def _load(self) -> List[Place]:
        records = await self.document.read()
        try:
            return [Place.model_validate(record) for record in records]
        except SchemaError as e:
            logger.error("Favorites %s hold an entry without a usable id: %s", self.document.path, e)
            raise UnavailableError(context={"path": str(self.document.path)})

    async def _save(self, favorites: List[Place]) -> None:
        await self.document.write([place.to_document() for place in favorites])
