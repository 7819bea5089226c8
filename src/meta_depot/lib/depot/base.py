"""Depot storage interface shared by the local and WebDAV backends.

A depot stores published files under relative paths. Reads of missing
files return ``None`` so callers can branch on existence without
exception handling; every other failure is raised.
"""

import json
from typing import Any, Protocol
from urllib.parse import urljoin


class DepotError(Exception):
    """Base class for depot failures."""


class DepotProtocolError(DepotError):
    """Raised when the depot answers a request with an unexpected status.

    Args:
        method: HTTP method of the failed request.
        url: Absolute URL of the failed request.
        status_code: HTTP status code returned by the depot.
        body: Response body, kept for diagnostics.
    """

    def __init__(self, method: str, url: str, status_code: int, body: str = "") -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body
        message = f"WebDAV {method} {url} failed: {status_code}"
        if body:
            message += f" {body}"
        super().__init__(message)


class DepotConnectionError(DepotError):
    """Raised when the depot cannot be reached at all (DNS, refused connection)."""


class Depot(Protocol):
    """Storage backend that listings are published to."""

    async def read(self, relative_path: str) -> bytes | None:
        """Return the file content, or None if the file does not exist."""
        ...

    async def write(self, relative_path: str, content: bytes) -> None:
        """Store ``content`` at ``relative_path``, creating parent directories."""
        ...

    def public_url(self, relative_path: str) -> str:
        """Return the URL under which ``relative_path`` is publicly served."""
        ...


def resolve_public_url(public_base_url: str, relative_path: str) -> str:
    """Join a relative depot path onto the public base URL."""
    return urljoin(public_base_url, relative_path)


async def read_json(depot: Depot, relative_path: str) -> Any | None:
    """Read and decode a JSON document from the depot.

    Args:
        depot: Depot to read from.
        relative_path: Path of the JSON document.

    Returns:
        The decoded document, or None if it does not exist.

    Raises:
        json.JSONDecodeError: If the stored document is not valid JSON.
    """
    content = await depot.read(relative_path)
    if content is None:
        return None
    return json.loads(content.decode("utf-8"))
