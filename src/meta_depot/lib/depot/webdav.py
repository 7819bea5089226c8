"""WebDAV depot client.

Uploads listings to the depot manager over WebDAV using httpx. WebDAV
requires every parent collection to exist before a PUT, so each write
first creates the missing ancestor collections with MKCOL. Collections
created (or found to exist) are remembered for the lifetime of the
instance so that each prefix is requested at most once.
"""

from types import TracebackType
from urllib.parse import urljoin

import httpx
from loguru import logger

from meta_depot.lib.depot.base import DepotConnectionError, DepotProtocolError, resolve_public_url

# 201 = created, 405 = collection already exists
_MKCOL_OK_STATUSES = frozenset({201, 405})


class WebDAVDepot:
    """Depot backed by a WebDAV server.

    Args:
        public_base_url: URL under which uploaded files are publicly served.
        webdav_url: WebDAV endpoint of the depot manager.
        token: Optional bearer token sent with every request.
        client: Optional preconfigured ``httpx.AsyncClient`` (used by tests).
        timeout: Request timeout in seconds when no client is supplied.
    """

    def __init__(
        self,
        public_base_url: str,
        webdav_url: str,
        token: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 60.0,
    ) -> None:
        self._public_base_url = public_base_url
        self._webdav_url = webdav_url if webdav_url.endswith("/") else webdav_url + "/"
        self._headers: dict[str, str] = {}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._created_directories: set[str] = set()

    @property
    def webdav_url(self) -> str:
        return self._webdav_url

    @property
    def created_directories(self) -> frozenset[str]:
        """Collection prefixes known to exist on the server (``a/``, ``a/b/``)."""
        return frozenset(self._created_directories)

    async def read(self, relative_path: str) -> bytes | None:
        """Download a file from the depot.

        Args:
            relative_path: Path relative to the WebDAV root.

        Returns:
            Raw file bytes, or None if the server answers 404.

        Raises:
            DepotProtocolError: On any other non-success status.
            DepotConnectionError: If the server cannot be reached.
        """
        url = self._url(relative_path)
        response = await self._send("GET", url)

        if response.status_code == 404:
            return None
        if not response.is_success:
            raise DepotProtocolError("GET", url, response.status_code, response.text)
        return response.content

    async def write(self, relative_path: str, content: bytes) -> None:
        """Upload a file, creating any missing parent collections first.

        Args:
            relative_path: Path relative to the WebDAV root.
            content: Raw bytes to upload.

        Raises:
            DepotProtocolError: If MKCOL or PUT is rejected.
            DepotConnectionError: If the server cannot be reached.
        """
        dirname, _, _ = relative_path.rpartition("/")
        if dirname:
            await self._ensure_directory_exists(dirname)

        url = self._url(relative_path)
        response = await self._send(
            "PUT",
            url,
            content=content,
            headers={"Content-Type": "application/octet-stream"},
        )
        if not response.is_success:
            raise DepotProtocolError("PUT", url, response.status_code, response.text)

    def public_url(self, relative_path: str) -> str:
        return resolve_public_url(self._public_base_url, relative_path)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this depot created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "WebDAVDepot":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _url(self, relative_path: str) -> str:
        return urljoin(self._webdav_url, relative_path)

    async def _ensure_directory_exists(self, dir_path: str) -> None:
        """Issue MKCOL for every ancestor collection not yet known to exist."""
        current_path = ""
        for part in (p for p in dir_path.split("/") if p):
            current_path += part + "/"
            if current_path in self._created_directories:
                continue

            url = self._url(current_path)
            response = await self._send("MKCOL", url)
            if response.status_code not in _MKCOL_OK_STATUSES:
                raise DepotProtocolError("MKCOL", url, response.status_code, response.text)

            logger.debug("Collection {} ready (status {})", current_path, response.status_code)
            self._created_directories.add(current_path)

    async def _send(
        self,
        method: str,
        url: str,
        *,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            return await self._client.request(
                method,
                url,
                content=content,
                headers={**self._headers, **(headers or {})},
            )
        except httpx.ConnectError as exc:
            msg = f"Cannot connect to WebDAV server: {self._webdav_url}"
            raise DepotConnectionError(msg) from exc
