"""
Favorite Places — HTTP Transport
=================================

What:  Async client for the four Favorite Places endpoints.
How:   httpx.AsyncClient with a base URL and timeout from settings. Responses
       are decoded with the same pydantic schemas the server uses.
Who:   FavoritesSynchronizer and AvailablePlaces.

Error Mapping:
    connection refused / timeout / other httpx.HTTPError → NetworkError
    4xx/5xx with {"error": "not_found", ...}              → NotFoundError
    4xx/5xx with {"error": "unavailable", ...}            → UnavailableError
    4xx/5xx with {"error": "persistence", ...}            → PersistenceError
    any other error status, or an undecodable body        → NetworkError

Requests are never retried.
"""

import logging
from typing import Any, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError as SchemaError

from favplaces.config import settings
from favplaces.exceptions import FavPlacesError, NetworkError, error_from_kind
from favplaces.schemas.place import Place, PlacesResponse, UserPlacesResponse

logger = logging.getLogger(__name__)


class PlacesApi:
    """
    Thin async wrapper around the Favorite Places HTTP API.

    Args:
        base_url: API root; defaults to settings.api_base_url.
        timeout: Per-request timeout in seconds; defaults to settings.client_timeout.
        transport: Optional httpx transport (ASGITransport, MockTransport) used
                   instead of the network.
        client: A pre-built httpx.AsyncClient. When given, the caller owns it
                and `aclose()` leaves it open.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout or settings.client_timeout,
            transport=transport,
        )

    async def fetch_places(self) -> List[Place]:
        data = await self._request("GET", "/places")
        return self._decode(PlacesResponse, data).places

    async def fetch_user_places(self) -> List[Place]:
        data = await self._request("GET", "/user-places")
        return self._decode(PlacesResponse, data).places

    async def add_user_place(self, place_id: str) -> List[Place]:
        data = await self._request("PUT", "/user-places", json={"placeId": place_id})
        return self._decode(UserPlacesResponse, data).user_places

    async def remove_user_place(self, place_id: str) -> List[Place]:
        data = await self._request("DELETE", f"/user-places/{quote(place_id, safe='')}")
        return self._decode(UserPlacesResponse, data).user_places

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "PlacesApi":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ── Internals ─────────────────────────────────────────────────────────

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, str(e))
            raise NetworkError(
                context={"method": method, "url": url, "error": type(e).__name__}
            ) from e

        if response.is_error:
            error = self._error_from_response(response)
            logger.warning(
                "%s %s answered %d (%s): %s",
                method, url, response.status_code, error.kind, error.message,
            )
            raise error

        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(
                message="The places service sent an unreadable response",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _error_from_response(response: httpx.Response) -> FavPlacesError:
        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            return NetworkError(
                message=f"Unexpected response from the places service (HTTP {response.status_code})",
                status_code=response.status_code,
            )

        message = body.get("message") or f"HTTP {response.status_code}"
        error = error_from_kind(body.get("error"), message)
        error.context["status_code"] = response.status_code
        if body.get("request_id"):
            error.context["request_id"] = body["request_id"]
        if isinstance(error, NetworkError):
            error.status_code = response.status_code
        return error

    @staticmethod
    def _decode(schema, data: Any):
        try:
            return schema.model_validate(data)
        except SchemaError as e:
            raise NetworkError(
                message="The places service sent an unexpected response",
                context={"schema": schema.__name__},
            ) from e
