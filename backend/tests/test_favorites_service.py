"""
Favorite Places — Catalog & Favorites Service Unit Tests
=========================================================

What:  Business rules of the durable stores, run against real files in a
       temporary data directory.

What we test:
    ✅ Catalog listing, lookup, unknown id, unreadable catalog, delay
    ✅ Add appends, duplicate add is a no-op, unknown id is rejected
    ✅ Remove keeps relative order, removing an absent id is a no-op
    ✅ No duplicate ids after any add/remove sequence
    ✅ Write failures surface as PersistenceError
    ✅ Concurrent adds inside one process do not lose updates
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from conftest import read_json, write_json
from favplaces.exceptions import NotFoundError, PersistenceError, UnavailableError
from favplaces.services.catalog_service import CatalogService


class TestCatalogService:
    """Tests for CatalogService listing and lookup."""

    @pytest.mark.asyncio
    async def test_list_places_in_catalog_order(self, catalog_service):
        """Places come back in file order as Place models."""
        places = await catalog_service.list_places()
        assert [p.id for p in places] == ["p1", "p2", "p3"]
        assert places[0].image.src == "forest-waterfall.jpg"

    @pytest.mark.asyncio
    async def test_get_place(self, catalog_service):
        """Lookup by id returns the matching place."""
        place = await catalog_service.get_place("p2")
        assert place.title == "Desert Dunes"

    @pytest.mark.asyncio
    async def test_get_place_unknown_id(self, catalog_service):
        """An unknown id raises NotFoundError carrying the id."""
        with pytest.raises(NotFoundError) as exc_info:
            await catalog_service.get_place("p9")
        assert exc_info.value.resource_id == "p9"
        assert exc_info.value.kind == "not_found"

    @pytest.mark.asyncio
    async def test_unreadable_catalog(self, catalog_service, data_dir):
        """A missing catalog file is unavailable."""
        (data_dir / "places.json").unlink()
        with pytest.raises(UnavailableError):
            await catalog_service.list_places()

    @pytest.mark.asyncio
    async def test_entry_without_id_makes_catalog_unavailable(self, catalog_service, data_dir):
        """An entry without an id makes the whole catalog unusable."""
        write_json(data_dir / "places.json", [{"title": "nameless"}])
        with pytest.raises(UnavailableError):
            await catalog_service.list_places()

    @pytest.mark.asyncio
    async def test_delay_applies_to_listing_only(self, catalog_document):
        """The artificial delay slows listing, not lookups."""
        service = CatalogService(catalog_document, delay_seconds=3)
        with patch("favplaces.services.catalog_service.asyncio.sleep", new=AsyncMock()) as sleep:
            await service.list_places()
            await service.get_place("p1")
        sleep.assert_awaited_once_with(3)


class TestAddFavorite:
    """Tests for FavoritesService.add_favorite."""

    @pytest.mark.asyncio
    async def test_add_appends_and_persists(self, favorites_service, data_dir):
        """A new favorite is returned and written to disk."""
        result = await favorites_service.add_favorite("p1")
        assert [p.id for p in result] == ["p1"]

        stored = read_json(data_dir / "user-places.json")
        assert [r["id"] for r in stored] == ["p1"]

    @pytest.mark.asyncio
    async def test_add_keeps_insertion_order(self, favorites_service):
        """Favorites keep the order they were added in."""
        await favorites_service.add_favorite("p3")
        result = await favorites_service.add_favorite("p1")
        assert [p.id for p in result] == ["p3", "p1"]

    @pytest.mark.asyncio
    async def test_add_twice_is_idempotent(self, favorites_service):
        """A second add of the same id changes nothing."""
        once = await favorites_service.add_favorite("p2")
        twice = await favorites_service.add_favorite("p2")
        assert twice == once
        assert [p.id for p in await favorites_service.list_favorites()] == ["p2"]

    @pytest.mark.asyncio
    async def test_add_unknown_id_rejected(self, favorites_service, data_dir):
        """Ids outside the catalog are rejected before touching the document."""
        with pytest.raises(NotFoundError):
            await favorites_service.add_favorite("p9")
        assert read_json(data_dir / "user-places.json") == []

    @pytest.mark.asyncio
    async def test_stored_record_keeps_extra_keys(self, favorites_service, data_dir, catalog_records):
        """The stored record is the full catalog entry, lat/lon included."""
        await favorites_service.add_favorite("p1")
        assert read_json(data_dir / "user-places.json") == [catalog_records[0]]

    @pytest.mark.asyncio
    async def test_add_write_failure(self, favorites_service):
        """Write failures propagate as PersistenceError."""
        favorites_service.document.write = AsyncMock(side_effect=PersistenceError())
        with pytest.raises(PersistenceError):
            await favorites_service.add_favorite("p1")

    @pytest.mark.asyncio
    async def test_concurrent_adds_are_all_kept(self, favorites_service):
        """Adds racing on one event loop do not overwrite each other."""
        await asyncio.gather(*(favorites_service.add_favorite(pid) for pid in ("p1", "p2", "p3")))
        stored = await favorites_service.list_favorites()
        assert sorted(p.id for p in stored) == ["p1", "p2", "p3"]


class TestRemoveFavorite:
    """Tests for FavoritesService.remove_favorite."""

    @pytest.mark.asyncio
    async def test_remove_keeps_relative_order(self, favorites_service):
        """Removing from the middle keeps the others in order."""
        for pid in ("p1", "p2", "p3"):
            await favorites_service.add_favorite(pid)

        result = await favorites_service.remove_favorite("p2")
        assert [p.id for p in result] == ["p1", "p3"]
        assert [p.id for p in await favorites_service.list_favorites()] == ["p1", "p3"]

    @pytest.mark.asyncio
    async def test_remove_absent_is_noop(self, favorites_service):
        """Removing an id that is not stored returns the list unchanged."""
        await favorites_service.add_favorite("p1")
        result = await favorites_service.remove_favorite("p3")
        assert [p.id for p in result] == ["p1"]

    @pytest.mark.asyncio
    async def test_remove_ignores_catalog(self, favorites_service, data_dir):
        """Ids are removed from favorites even after they leave the catalog."""
        await favorites_service.add_favorite("p1")
        write_json(data_dir / "places.json", [])
        assert await favorites_service.remove_favorite("p1") == []

    @pytest.mark.asyncio
    async def test_remove_write_failure(self, favorites_service):
        """Write failures propagate as PersistenceError."""
        await favorites_service.add_favorite("p1")
        favorites_service.document.write = AsyncMock(side_effect=PersistenceError())
        with pytest.raises(PersistenceError):
            await favorites_service.remove_favorite("p1")

    @pytest.mark.asyncio
    async def test_unreadable_favorites(self, favorites_service, data_dir):
        """A corrupt favorites document is unavailable."""
        (data_dir / "user-places.json").write_text("oops", encoding="utf-8")
        with pytest.raises(UnavailableError):
            await favorites_service.remove_favorite("p1")


class TestInvariant:
    """Tests for the no-duplicates invariant."""

    @pytest.mark.asyncio
    async def test_no_duplicate_ids_after_mixed_sequence(self, favorites_service):
        """Any mix of adds and removes leaves each id at most once."""
        sequence = [
            ("add", "p1"), ("add", "p2"), ("add", "p1"), ("remove", "p2"),
            ("add", "p3"), ("add", "p2"), ("remove", "p9"), ("add", "p3"),
        ]
        for op, pid in sequence:
            if op == "add":
                await favorites_service.add_favorite(pid)
            else:
                await favorites_service.remove_favorite(pid)

        ids = [p.id for p in await favorites_service.list_favorites()]
        assert ids == ["p1", "p3", "p2"]
        assert len(ids) == len(set(ids))
