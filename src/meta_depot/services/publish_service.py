"""Publish service — orchestrates listing compilation and the depot sync.

Loads version metadata, compiles every listing into the destination
folder, writes the local index listing, then uploads whatever changed.
"""

import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from meta_depot.core.config import Settings
from meta_depot.lib.depot.base import Depot
from meta_depot.lib.depot.factory import create_depot
from meta_depot.lib.depot.webdav import WebDAVDepot
from meta_depot.lib.listing.builder import ListingsBuilder
from meta_depot.lib.listing.sync import sync_with_depot
from meta_depot.lib.meta_api.client import MetaApiClient
from meta_depot.lib.meta_api.versions import VersionsApi
from meta_depot.lib.neoforge.listings import (
    build_minecraft_versions_with_neoforge,
    build_neoforge_listing,
    is_safe_path,
)


@dataclass
class PublishResult:
    """Result of a publish run."""

    listing_count: int
    uploaded: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    unsafe_versions: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0


def reset_destination_folder(destination_folder: Path) -> None:
    """Remove any output of a previous run and recreate the folder."""
    shutil.rmtree(destination_folder, ignore_errors=True)
    destination_folder.mkdir(parents=True)


async def compile_listings(builder: ListingsBuilder, versions: VersionsApi) -> list[str]:
    """Register every listing with the builder and write the index.

    Args:
        builder: Builder for this run.
        versions: Version metadata lookups.

    Returns:
        NeoForge versions that were skipped because they are not safe path names.
    """
    minecraft_versions = await versions.get_minecraft_versions()
    neoforge_versions = await versions.get_neoforge_versions()

    builder.write_listing(
        "minecraft-releases-with-neoforge",
        build_minecraft_versions_with_neoforge(versions, minecraft_versions, True),
    )
    builder.write_listing(
        "minecraft-versions-with-neoforge",
        build_minecraft_versions_with_neoforge(versions, minecraft_versions, False),
    )

    unsafe_versions: list[str] = []
    for neoforge_version in neoforge_versions:
        version = neoforge_version.version
        if not is_safe_path(version):
            logger.warning("Cannot build listing for {} since it's not a safe path name.", version)
            unsafe_versions.append(version)
            continue
        builder.write_listing(f"neoforge/{version}", build_neoforge_listing(versions, version))

    await builder.finish()
    return unsafe_versions


async def publish_listings(
    settings: Settings,
    *,
    full_resync: bool = False,
    depot: Depot | None = None,
    meta_api_client: MetaApiClient | None = None,
) -> PublishResult:
    """Compile all listings and sync them with the configured depot.

    Configuration is validated before any request is made.

    Args:
        settings: Application settings.
        full_resync: Upload everything if the depot has no index yet.
        depot: Depot to publish to; created from settings when omitted.
        meta_api_client: API client; created from settings when omitted.

    Returns:
        PublishResult summarizing the run.

    Raises:
        ConfigurationError: If required settings are missing.
        MissingDepotIndexError: If the depot has no index and ``full_resync`` is False.
    """
    start_time = time.monotonic()

    if meta_api_client is None:
        settings.require_meta_api_credentials()
    if depot is None:
        depot = create_depot(settings)
    if meta_api_client is None:
        meta_api_client = MetaApiClient(
            settings.meta_api_base_url,
            api_key=settings.meta_api_api_key,
            token=settings.meta_api_token,
            concurrency=settings.meta_api_concurrency,
            timeout=settings.meta_api_timeout,
        )

    destination_folder = Path(settings.destination_folder)
    reset_destination_folder(destination_folder)
    builder = ListingsBuilder(destination_folder, format_output=settings.format_output)

    try:
        async with meta_api_client:
            unsafe_versions = await compile_listings(builder, VersionsApi(meta_api_client))

        sync_result = await sync_with_depot(builder, depot, full_resync=full_resync)
    finally:
        if isinstance(depot, WebDAVDepot):
            await depot.aclose()

    return PublishResult(
        listing_count=len(sync_result.uploaded) + len(sync_result.skipped),
        uploaded=sync_result.uploaded,
        skipped=sync_result.skipped,
        unsafe_versions=unsafe_versions,
        duration_seconds=time.monotonic() - start_time,
    )
