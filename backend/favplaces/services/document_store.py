"""
Favorite Places — JSON Document Store
======================================

What:  Reads and writes one JSON array document on disk.
How:   Async file I/O through aiofiles; every write serializes the whole array
       to a temporary sibling file and atomically replaces the target.
Who:   Used by CatalogService (read only) and FavoritesService (read/write).

Write Protocol:
    1. json.dumps(records) → string (fails before touching the disk)
    2. Write to  data/.user-places.json.<uuid>.tmp
    3. os.replace(tmp, data/user-places.json)   (atomic on POSIX and Windows)
    4. On any OSError: remove the temp file, raise PersistenceError

    A reader therefore sees either the previous document or the new one,
    never a truncated file.

Error Translation:
    read  → OSError / invalid JSON / not an array  → UnavailableError
    write → OSError                                → PersistenceError
"""

import json
import logging
import uuid
from pathlib import Path
from typing import Any, List

import aiofiles
import aiofiles.os

from favplaces.exceptions import PersistenceError, UnavailableError

logger = logging.getLogger(__name__)


class JsonDocument:
    """
    A JSON array stored in a single file.

    The document holds flat objects (one per place). Contents are returned as
    plain dicts; turning them into Place models is the caller's job.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    async def read(self) -> List[Any]:
        """
        Load and decode the whole document.

        Raises:
            UnavailableError if the file cannot be opened, is not valid JSON,
            or does not contain a top-level array.
        """
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except OSError as e:
            logger.error("Failed to read %s: %s", self.path, str(e))
            raise UnavailableError(context={"path": str(self.path), "os_error": str(e)})

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error("Document %s is not valid JSON: %s", self.path, str(e))
            raise UnavailableError(context={"path": str(self.path), "decode_error": str(e)})

        if not isinstance(data, list):
            logger.error("Document %s does not hold a JSON array", self.path)
            raise UnavailableError(
                context={"path": str(self.path), "found_type": type(data).__name__}
            )

        return data

    async def write(self, records: List[Any]) -> None:
        """
        Replace the whole document with `records`.

        Raises:
            PersistenceError if the temp file cannot be written or moved into place.
        """
        payload = json.dumps(records)
        tmp_path = self.path.with_name(f".{self.path.name}.{uuid.uuid4().hex}.tmp")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Failed to write %s: %s", self.path, str(e))
            await self._discard(tmp_path)
            raise PersistenceError(context={"path": str(self.path), "os_error": str(e)})

        logger.debug("Wrote %d records to %s", len(records), self.path)

    async def ensure_exists(self, default: List[Any]) -> bool:
        """
        Create the document with `default` contents if it is missing.

        Returns:
            True if the file was created, False if it already existed.
        """
        if await aiofiles.os.path.exists(self.path):
            return False
        await self.write(default)
        logger.info("Created %s", self.path)
        return True

    async def is_readable(self) -> bool:
        """Probe used by the health check; never raises."""
        try:
            await self.read()
        except UnavailableError:
            return False
        return True

    async def _discard(self, tmp_path: Path) -> None:
        """Best-effort removal of a temp file left behind by a failed write."""
        try:
            if await aiofiles.os.path.exists(tmp_path):
                await aiofiles.os.remove(tmp_path)
        except OSError as e:
            logger.warning("Failed to clean up temp file %s: %s", tmp_path, str(e))
