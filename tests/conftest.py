"""Shared test fixtures: settings, depots, and canned meta API responses."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from meta_depot.core.config import Settings
from meta_depot.lib.depot.local import LocalDepot

META_API_BASE_URL = "https://meta.example.com/v1/"
DEPOT_BASE_URL = "https://maven.example.com/depot/"


class RecordingDepot(LocalDepot):
    """LocalDepot that records every path written to it."""

    def __init__(self, public_base_url: str, base_path: Path) -> None:
        super().__init__(public_base_url, base_path)
        self.written: list[str] = []

    async def write(self, relative_path: str, content: bytes) -> None:
        await super().write(relative_path, content)
        self.written.append(relative_path)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Test application settings publishing into a local depot."""
    return Settings(
        _env_file=None,
        depot_base_url=DEPOT_BASE_URL,
        local_depot_path=str(tmp_path / "depot"),
        meta_api_base_url=META_API_BASE_URL,
        meta_api_api_key="test-api-key",
        destination_folder=str(tmp_path / "output"),
    )


@pytest.fixture
def depot(tmp_path: Path) -> RecordingDepot:
    """Empty local depot that records uploads."""
    return RecordingDepot(DEPOT_BASE_URL, tmp_path / "depot")


@pytest.fixture
def meta_api_responses() -> dict[str, Any]:
    """Canned meta API responses keyed by absolute URL."""
    base = META_API_BASE_URL
    return {
        f"{base}minecraft-versions/": [
            {"version": "1.21.2-pre1", "type": "snapshot", "latest_neoforge_version": "21.2.0-beta"},
            {"version": "1.21.1", "type": "release", "latest_neoforge_version": "21.1.72"},
            {"version": "1.21", "type": "release", "latest_neoforge_version": None},
        ],
        f"{base}neoforge-versions/": [
            {"version": "21.2.0-beta"},
            {"version": "21.1.72"},
            {"version": "../evil"},
        ],
        f"{base}minecraft-versions/version/1.21.2-pre1/": {
            "version": "1.21.2-pre1",
            "type": "snapshot",
            "released": "2024-10-08T12:00:00Z",
        },
        f"{base}minecraft-versions/version/1.21.1/": {
            "version": "1.21.1",
            "type": "release",
            "released": "2024-08-08T12:00:00Z",
        },
        f"{base}neoforge-versions/version/21.2.0-beta/": {
            "version": "21.2.0-beta",
            "released": "2024-10-09T08:00:00Z",
            "release_notes": "Initial beta",
        },
        f"{base}neoforge-versions/version/21.1.72/": {
            "version": "21.1.72",
            "released": "2024-10-01T08:00:00Z",
            "release_notes": "Bug fixes",
        },
    }


@pytest.fixture
def meta_api_transport(meta_api_responses: dict[str, Any]) -> Callable[[], httpx.MockTransport]:
    """Factory for a MockTransport serving ``meta_api_responses``."""

    def handler(request: httpx.Request) -> httpx.Response:
        payload = meta_api_responses.get(str(request.url))
        if payload is None:
            return httpx.Response(404, text="Not Found")
        return httpx.Response(200, content=json.dumps(payload).encode(), headers={"content-type": "application/json"})

    return lambda: httpx.MockTransport(handler)
