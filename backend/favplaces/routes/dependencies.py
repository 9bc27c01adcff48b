"""FastAPI dependencies handing the per-application services to route handlers."""

from fastapi import Request

from favplaces.services.catalog_service import CatalogService
from favplaces.services.favorites_service import FavoritesService


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service


def get_favorites_service(request: Request) -> FavoritesService:
    return request.app.state.favorites_service
