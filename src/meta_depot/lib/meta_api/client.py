"""HTTP client for the version metadata API.

Injects the configured credential into every request and limits the
number of requests in flight, since listing assembly fans out one
details request per version.
"""

from __future__ import annotations

import asyncio
from types import TracebackType
from typing import Any

import httpx
from loguru import logger


class MetaApiError(Exception):
    """Raised when a request to the version metadata API fails.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code, or None for transport failures.
        body: Response body, if any.
    """

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class MetaApiAuthError(MetaApiError):
    """Raised when the API rejects the configured credentials (HTTP 401)."""


class MetaApiClient:
    """Async client for the version metadata API.

    The API key takes precedence over the bearer token when both are set.

    Args:
        base_url: API base URL (e.g. ``https://meta-api.neoforged.net/v1/``).
        api_key: Optional API key, sent as ``X-API-Key``.
        token: Optional bearer token, sent as ``Authorization``.
        concurrency: Maximum number of requests in flight.
        timeout: Request timeout in seconds.
        client: Optional preconfigured ``httpx.AsyncClient`` (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None = None,
        token: str | None = None,
        concurrency: int = 10,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        headers: dict[str, str] = {"Accept": "application/json"}
        if api_key:
            headers["X-API-Key"] = api_key
        elif token:
            headers["Authorization"] = f"Bearer {token}"

        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = headers
        self._limit = asyncio.Semaphore(concurrency)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def get_json(self, path: str) -> Any:
        """GET ``path`` relative to the base URL and decode the JSON body.

        Args:
            path: Endpoint path, e.g. ``minecraft-versions/``.

        Returns:
            Decoded JSON response.

        Raises:
            MetaApiAuthError: If the API answers 401.
            MetaApiError: On any other status >= 400 or a transport failure.
        """
        url = self._base_url + path.lstrip("/")

        async with self._limit:
            try:
                response = await self._client.get(url, headers=self._headers)
            except httpx.HTTPError as exc:
                msg = f"Request for {url} failed: {exc}"
                raise MetaApiError(msg) from exc

        if response.status_code == 401:
            msg = f"Authentication against API failed: {response.text}"
            raise MetaApiAuthError(msg, status_code=401, body=response.text)
        if response.status_code >= 400:
            msg = f"Request for {url} failed with status {response.status_code}: {response.text}"
            raise MetaApiError(msg, status_code=response.status_code, body=response.text)

        try:
            return response.json()
        except ValueError as exc:
            msg = f"Invalid JSON response from {url}"
            raise MetaApiError(msg, status_code=response.status_code) from exc

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> MetaApiClient:
        logger.info("Meta-API Base URL: {}", self._base_url)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
