"""Typed access to Minecraft and NeoForge version metadata.

Details lookups are cached per version as shared tasks, so concurrent
callers asking for the same version issue a single request.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar
from urllib.parse import quote

from loguru import logger
from pydantic import BaseModel, TypeAdapter

from meta_depot.lib.meta_api.client import MetaApiClient, MetaApiError
from meta_depot.lib.meta_api.models import (
    MinecraftVersionDetails,
    MinecraftVersionSummary,
    NeoForgeVersionDetails,
    NeoForgeVersionSummary,
)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

_MINECRAFT_SUMMARIES = TypeAdapter(list[MinecraftVersionSummary])
_NEOFORGE_SUMMARIES = TypeAdapter(list[NeoForgeVersionSummary])


class VersionsApi:
    """Version metadata lookups on top of a MetaApiClient.

    Args:
        client: Client used for all requests.
    """

    def __init__(self, client: MetaApiClient) -> None:
        self._client = client
        self._minecraft_details: dict[str, asyncio.Task[MinecraftVersionDetails]] = {}
        self._neoforge_details: dict[str, asyncio.Task[NeoForgeVersionDetails]] = {}

    async def get_minecraft_versions(self) -> list[MinecraftVersionSummary]:
        """List all Minecraft versions known to the API."""
        data = await self._client.get_json("minecraft-versions/")
        if data is None:
            msg = "Failed to load Minecraft versions."
            raise MetaApiError(msg)
        versions = _MINECRAFT_SUMMARIES.validate_python(data)
        logger.info("Loaded {} Minecraft versions", len(versions))
        return versions

    async def get_neoforge_versions(self) -> list[NeoForgeVersionSummary]:
        """List all NeoForge versions known to the API."""
        data = await self._client.get_json("neoforge-versions/")
        if data is None:
            msg = "Failed to load NeoForge versions."
            raise MetaApiError(msg)
        versions = _NEOFORGE_SUMMARIES.validate_python(data)
        logger.info("Loaded {} NeoForge versions", len(versions))
        return versions

    def get_minecraft_details(self, version: str) -> Awaitable[MinecraftVersionDetails]:
        """Fetch details for one Minecraft version (cached)."""
        return self._cached(
            self._minecraft_details,
            version,
            lambda: self._fetch_details(
                f"minecraft-versions/version/{quote(version, safe='')}/",
                MinecraftVersionDetails,
                f"Minecraft {version}",
            ),
        )

    def get_neoforge_details(self, version: str) -> Awaitable[NeoForgeVersionDetails]:
        """Fetch details for one NeoForge version (cached)."""
        return self._cached(
            self._neoforge_details,
            version,
            lambda: self._fetch_details(
                f"neoforge-versions/version/{quote(version, safe='')}/",
                NeoForgeVersionDetails,
                f"NeoForge {version}",
            ),
        )

    @staticmethod
    def _cached(
        cache: dict[str, asyncio.Task[_ModelT]],
        version: str,
        factory: Callable[[], Awaitable[_ModelT]],
    ) -> asyncio.Task[_ModelT]:
        task = cache.get(version)
        if task is None:
            task = asyncio.ensure_future(factory())
            cache[version] = task
        return task

    async def _fetch_details(self, path: str, model: type[_ModelT], label: str) -> _ModelT:
        data = await self._client.get_json(path)
        if data is None:
            msg = f"Failed to load details for {label}"
            raise MetaApiError(msg)
        details = model.model_validate(data)
        logger.debug("Resolved version details for {}", label)
        return details
