"""Depot library — public API for the storage backends listings are published to.

Provides the ``Depot`` protocol, a local-directory backend, a WebDAV
backend, and settings-driven backend selection.
"""

from meta_depot.lib.depot.base import (
    Depot,
    DepotConnectionError,
    DepotError,
    DepotProtocolError,
    read_json,
    resolve_public_url,
)
from meta_depot.lib.depot.factory import create_depot
from meta_depot.lib.depot.local import LocalDepot
from meta_depot.lib.depot.webdav import WebDAVDepot

__all__ = [
    "Depot",
    "DepotConnectionError",
    "DepotError",
    "DepotProtocolError",
    "LocalDepot",
    "WebDAVDepot",
    "create_depot",
    "read_json",
    "resolve_public_url",
]
