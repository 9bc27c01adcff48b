"""
Favorite Places — Pydantic Schemas
===================================

What:  Pydantic models shared by the API (request/response contracts) and the
       client (decoding responses into Place objects).
How:   FastAPI uses these models to validate request bodies, serialize
       responses, and generate the OpenAPI document. The client validates the
       same response shapes with `model_validate`.

Stored documents are not schema-validated beyond the `id` field: unknown keys
(e.g. `lat`/`lon`) are kept on the model and written back unchanged.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Domain Models
# ══════════════════════════════════════════════════════════════════════════


class PlaceImage(BaseModel):
    """Image metadata of a place: file name relative to the image root plus alt text."""

    src: str = Field(default="", description="Image path served by the API")
    alt: str = Field(default="", description="Alternative text for the image")

    model_config = {"frozen": True, "extra": "allow"}


class Place(BaseModel):
    """
    What:  One catalog entry.
    Who:   Listed by GET /places; stored in the favorites list; cached by the
           client synchronizer.

    Places are immutable after creation (`frozen`). Identity is the `id`
    field alone; two Place objects with the same id are the same place.
    """

    id: str = Field(min_length=1, description="Unique, stable place identifier")
    title: str = Field(default="", description="Display name")
    image: Optional[PlaceImage] = Field(default=None, description="Image metadata")
    description: str = Field(default="", description="Free-form description")

    model_config = {"frozen": True, "extra": "allow"}

    def to_document(self) -> dict:
        """Flat dict in the on-disk format, limited to the keys that were actually present."""
        return self.model_dump(mode="json", exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class AddPlaceRequest(BaseModel):
    """Body of PUT /user-places."""

    place_id: str = Field(alias="placeId", min_length=1, description="Catalog id to favorite")

    model_config = {"populate_by_name": True}


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PlacesResponse(BaseModel):
    """Returned by GET /places and GET /user-places."""

    places: List[Place] = Field(description="Places in catalog or insertion order")


class UserPlacesResponse(BaseModel):
    """Returned by PUT and DELETE on /user-places: the favorites list after the change."""

    user_places: List[Place] = Field(alias="userPlaces", description="Updated favorites list")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every failing endpoint.

    Fields:
        error: Error kind (`not_found`, `unavailable`, `persistence`, ...)
        message: Human-readable description for display to users
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "not_found",
            "message": "place with ID 'p9' was not found",
            "request_id": "1f0c2a9b"
        }
    """

    error: str = Field(description="Machine-readable error kind")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing whether both documents can be read."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    catalog: str = Field(description="Catalog document: readable, unreadable")
    favorites: str = Field(description="Favorites document: readable, unreadable")
    uptime_seconds: float = Field(description="Seconds since service started")
