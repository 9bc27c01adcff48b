"""
Favorite Places — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets its own temporary data directory holding a small
       catalog and an empty favorites document; the app, the stores and the
       HTTP clients are all built on top of it.

Fixture Hierarchy (all function-scoped):
    data_dir ─┬─ app_settings ── app ──┬─ test_client (httpx → ASGI app)
              │                         └─ places_api  (client transport → ASGI app)
              ├─ catalog_document / favorites_document
              └─ catalog_service ── favorites_service
"""

import json
import os

import httpx
import pytest
import pytest_asyncio

# Keep test runs quiet and away from the real ./data directory
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["PLACES_DELAY_SECONDS"] = "0"

from favplaces.client.transport import PlacesApi  # noqa: E402
from favplaces.config import Settings  # noqa: E402
from favplaces.main import create_app  # noqa: E402
from favplaces.schemas.place import Place  # noqa: E402
from favplaces.services.catalog_service import CatalogService  # noqa: E402
from favplaces.services.document_store import JsonDocument  # noqa: E402
from favplaces.services.favorites_service import FavoritesService  # noqa: E402


CATALOG = [
    {
        "id": "p1",
        "title": "Forest Waterfall",
        "image": {"src": "forest-waterfall.jpg", "alt": "A waterfall"},
        "description": "Three-tier waterfall",
        "lat": 44.5588,
        "lon": -80.344,
    },
    {
        "id": "p2",
        "title": "Desert Dunes",
        "image": {"src": "desert-dunes.jpg", "alt": "Sand dunes"},
        "description": "Dunes at sunset",
    },
    {
        "id": "p3",
        "title": "Mountain Peaks",
        "image": {"src": "mountains.jpg", "alt": "Snowy peaks"},
        "description": "High-altitude trail",
    },
]


def write_json(path, data) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


def read_json(path):
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def catalog_records():
    return [dict(record) for record in CATALOG]


@pytest.fixture
def place(catalog_records):
    """Factory: `place("p1")` → Place built from the test catalog."""
    by_id = {record["id"]: record for record in catalog_records}

    def _make(place_id: str) -> Place:
        return Place.model_validate(by_id[place_id])

    return _make


@pytest.fixture
def data_dir(tmp_path, catalog_records):
    directory = tmp_path / "data"
    directory.mkdir()
    write_json(directory / "places.json", catalog_records)
    write_json(directory / "user-places.json", [])
    return directory


@pytest.fixture
def app_settings(data_dir, tmp_path):
    return Settings(
        data_dir=str(data_dir),
        images_dir=str(tmp_path / "images"),
        places_delay_seconds=0,
        log_level="WARNING",
    )


@pytest.fixture
def catalog_document(data_dir):
    return JsonDocument(data_dir / "places.json")


@pytest.fixture
def favorites_document(data_dir):
    return JsonDocument(data_dir / "user-places.json")


@pytest.fixture
def catalog_service(catalog_document):
    return CatalogService(catalog_document)


@pytest.fixture
def favorites_service(favorites_document, catalog_service):
    return FavoritesService(favorites_document, catalog_service)


@pytest.fixture
def app(app_settings):
    return create_app(app_settings)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to a fresh app over ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def places_api(app):
    """The client transport wired to the in-process app instead of the network."""
    async with PlacesApi(base_url="http://test", transport=httpx.ASGITransport(app=app)) as api:
        yield api
