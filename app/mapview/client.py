"""Async HTTP client for the memory map API."""

import logging
from typing import Any, Mapping, Optional

import httpx

from app.config import Settings
from app.core.errors import MemoryMapError
from app.schemas.memory import (
    CategoryResponse,
    MemoryResponse,
    PromptResponse,
    RandomPromptResponse,
)

logger = logging.getLogger(__name__)

GEOCODE_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places"


class ApiError(MemoryMapError):
    """Non-2xx response; `message` is the server's `error` text."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


def _raise_for_error(resp: httpx.Response) -> None:
    if resp.is_success:
        return
    try:
        body = resp.json()
    except ValueError:
        body = None
    # Proxies and gateways may answer with any JSON shape
    message = body.get("error") if isinstance(body, dict) else None
    message = message if isinstance(message, str) and message else resp.reason_phrase
    raise ApiError(message, resp.status_code)


class MemoryMapClient:
    """
    Thin wrapper over httpx.AsyncClient. No retries and no default timeout:
    a hung request simply stays pending.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        mapbox_token: str = "",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            transport=transport,
            timeout=timeout,
        )
        # Separate client so the API bearer token never reaches Mapbox
        self._geocoder = httpx.AsyncClient(base_url=GEOCODE_URL, transport=transport, timeout=timeout)
        self.mapbox_token = mapbox_token

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "MemoryMapClient":
        return cls(
            settings.api_url,
            token=token,
            mapbox_token=settings.mapbox_access_token,
            transport=transport,
        )

    async def __aenter__(self) -> "MemoryMapClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()
        await self._geocoder.aclose()

    async def random_prompt(self) -> Optional[RandomPromptResponse]:
        """A random prompt, or None when the server has none (no prompt bar is shown)."""
        resp = await self._client.get("/prompts/random")
        if resp.status_code == 404:
            return None
        _raise_for_error(resp)
        return RandomPromptResponse.model_validate(resp.json())

    async def list_memories(self) -> list[MemoryResponse]:
        resp = await self._client.get("/memories")
        _raise_for_error(resp)
        data = resp.json()
        if not isinstance(data, list):
            logger.warning("Expected a list of memories but got %s", type(data).__name__)
            return []
        return [MemoryResponse.model_validate(item) for item in data]

    async def list_prompts(self) -> list[PromptResponse]:
        resp = await self._client.get("/prompts")
        _raise_for_error(resp)
        return [PromptResponse.model_validate(item) for item in resp.json()]

    async def list_categories(self) -> list[CategoryResponse]:
        resp = await self._client.get("/categories")
        _raise_for_error(resp)
        return [CategoryResponse.model_validate(item) for item in resp.json()]

    async def create_memory(
        self,
        fields: Mapping[str, Any],
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> MemoryResponse:
        """POST one memory as multipart form data. Raises ApiError with the server message on failure."""
        data = {key: str(value) for key, value in fields.items() if value is not None}
        file_part = (filename, content, content_type) if content_type else (filename, content)
        resp = await self._client.post("/memories", data=data, files={"file": file_part})
        _raise_for_error(resp)
        return MemoryResponse.model_validate(resp.json())

    async def reverse_geocode(self, lng: float, lat: float) -> str:
        """Place name for a point via Mapbox Geocoding v5; '' when unavailable or on any failure."""
        if not self.mapbox_token:
            return ""
        try:
            resp = await self._geocoder.get(
                f"/{lng},{lat}.json",
                params={"access_token": self.mapbox_token},
            )
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Reverse geocode of %s,%s failed: %s", lng, lat, exc)
            return ""
        features = body.get("features") if isinstance(body, dict) else None
        first = features[0] if isinstance(features, list) and features else None
        place = first.get("place_name") if isinstance(first, dict) else None
        return place if isinstance(place, str) else ""
