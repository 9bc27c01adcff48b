"""
Favorite Places — Place Catalog Service
========================================

What:  Read-only access to the list of all places.
How:   Decodes places.json into Place models on every call; the file is small
       and may be edited by hand while the server runs.
Who:   GET /places, and FavoritesService to resolve ids on add.
"""

import asyncio
import logging
from typing import List

from pydantic import ValidationError as SchemaError

from favplaces.exceptions import NotFoundError, UnavailableError
from favplaces.schemas.place import Place
from favplaces.services.document_store import JsonDocument

logger = logging.getLogger(__name__)


class CatalogService:
    """
    The place catalog.

    Args:
        document: The places.json document.
        delay_seconds: Artificial latency applied by `list_places` only.
    """

    def __init__(self, document: JsonDocument, delay_seconds: float = 0.0):
        self.document = document
        self.delay_seconds = delay_seconds

    async def list_places(self) -> List[Place]:
        """
        Return every place in catalog order.

        Raises:
            UnavailableError: catalog cannot be read or decoded.
        """
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        return await self._load()

    async def get_place(self, place_id: str) -> Place:
        """
        Look up one place by id.

        Raises:
            NotFoundError: no catalog entry has this id.
            UnavailableError: catalog cannot be read or decoded.
        """
        for place in await self._load():
            if place.id == place_id:
                return place
        raise NotFoundError(resource="place", resource_id=place_id)

    async def _load(self) -> List[Place]:
        records = await self.document.read()
        try:
            return [Place.model_validate(record) for record in records]
        except SchemaError as e:
            logger.error("Catalog %s holds an entry without a usable id: %s", self.document.path, e)
            raise UnavailableError(context={"path": str(self.document.path)})
