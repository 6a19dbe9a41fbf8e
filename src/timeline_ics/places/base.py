"""Base place lookup abstraction.

A place lookup turns a place id (as found in the location history) into
``PlaceDetails``: display name, formatted address, precise coordinates,
place types and a canonical URL.

## Contract

- Request: one place id string
- Response: ``PlaceDetails``
- Failure: ``PlaceLookupError`` (``PlaceNotFoundError`` when the id is
  unknown, ``RateLimitError`` when the quota is exhausted)

Callers treat every failure as "no enrichment" for that place; a failed
lookup never fails the conversion of a record.

## Transport

Requests go through one shared ``httpx.AsyncClient`` per lookup. Timeouts
and connection errors are retried (3 attempts, exponential backoff); HTTP
error statuses are not.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from timeline_ics import __version__
from timeline_ics.models.place import PlaceDetails

USER_AGENT = f"timeline-ics/{__version__}"


class PlaceLookupError(Exception):
    """Base exception for place lookup errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body


class PlaceNotFoundError(PlaceLookupError):
    """Raised when the provider does not know the place id."""

    pass


class RateLimitError(PlaceLookupError):
    """Raised when the lookup quota is exhausted."""

    def __init__(
        self,
        provider: str,
        retry_after: int | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            f"Rate limit exceeded for {provider}",
            provider=provider,
            status_code=status_code,
        )
        self.retry_after = retry_after


class PlaceLookup(ABC):
    """Abstract base class for place details providers.

    Attributes:
        name: Provider name used in errors and logs
        base_url: Base URL that request paths are appended to

    Example:
        ```python
        class MyLookup(PlaceLookup):
            name = "my_lookup"
            base_url = "https://api.example.com"

            async def get_place(self, place_id):
                data = await self._get_json(f"/places/{place_id}")
                return self._translate_response(data, place_id)
        ```
    """

    name: str
    base_url: str

    def __init__(
        self,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the lookup.

        Args:
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> PlaceLookup:
        self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the shared HTTP client, if one was opened."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "User-Agent": USER_AGENT,
                    "Accept": "application/json",
                },
            )
        return self._client

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
        reraise=True,
    )
    async def _send(self, path: str, params: dict[str, Any] | None) -> httpx.Response:
        return await self._get_client().get(path, params=params)

    async def _get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """GET a path below ``base_url`` and decode the JSON body.

        Args:
            path: Request path, relative to ``base_url``
            params: Query parameters

        Returns:
            The decoded JSON object

        Raises:
            RateLimitError: On HTTP 429
            PlaceLookupError: On other HTTP errors, transport failures that
                outlast the retries, or a body that is not a JSON object
        """
        try:
            response = await self._send(path, params)
        except httpx.HTTPError as e:
            raise PlaceLookupError(f"Request to {path} failed: {e}", provider=self.name) from e

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                self.name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                status_code=429,
            )

        if response.status_code >= 400:
            raise PlaceLookupError(
                f"API request failed: {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise PlaceLookupError(
                f"Failed to parse response: {e}",
                provider=self.name,
                response_body=response.text,
            ) from e

        if not isinstance(data, dict):
            raise PlaceLookupError(
                "Failed to parse response: not a JSON object",
                provider=self.name,
                response_body=response.text,
            )
        return data

    @abstractmethod
    async def get_place(self, place_id: str) -> PlaceDetails:
        """Get details for a place id.

        Raises:
            PlaceLookupError: If the place cannot be retrieved
        """
        pass

    @abstractmethod
    def _translate_response(
        self,
        response_data: dict[str, Any],
        place_id: str,
    ) -> PlaceDetails:
        """Translate a provider-specific response to ``PlaceDetails``."""
        pass
