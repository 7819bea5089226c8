"""Assembly of the Minecraft + NeoForge listing payloads.

Pure data transformation over the version metadata API; the payloads are
handed to the ListingsBuilder as-is.
"""

import asyncio
import re
from typing import Any

from meta_depot.lib.meta_api.models import (
    MinecraftVersionDetails,
    MinecraftVersionSummary,
    NeoForgeVersionDetails,
)
from meta_depot.lib.meta_api.versions import VersionsApi

_UNSAFE_PATH_CHARS = re.compile(r"[^0-9a-zA-Z_. -]")

_Details = tuple[MinecraftVersionDetails, NeoForgeVersionDetails]


def is_safe_path(value: str) -> bool:
    """Check that an upstream identifier can be used as a listing path segment.

    Only alphanumerics, underscore, period, hyphen and space are allowed.
    The relative segments ``.`` and ``..`` are rejected as well.

    Args:
        value: Identifier supplied by a third party (e.g. a NeoForge version).

    Returns:
        True if the value is safe to embed in a file or depot path.
    """
    if not value or value in (".", ".."):
        return False
    return _UNSAFE_PATH_CHARS.search(value) is None


def _with_neoforge(
    minecraft_versions: list[MinecraftVersionSummary],
) -> list[tuple[MinecraftVersionSummary, str]]:
    """Pair every Minecraft version that has a NeoForge release with that release."""
    pairs = []
    for mv in minecraft_versions:
        if mv.latest_neoforge_version:
            pairs.append((mv, mv.latest_neoforge_version))
    return pairs


async def _fetch_details(versions: VersionsApi, minecraft_version: str, neoforge_version: str) -> _Details:
    return (
        await versions.get_minecraft_details(minecraft_version),
        await versions.get_neoforge_details(neoforge_version),
    )


def _make_version_entry(details: _Details) -> dict[str, Any]:
    minecraft, neoforge = details
    entry: dict[str, Any] = {"version": minecraft.version}
    if minecraft.type != "release":
        entry["type"] = minecraft.type
    entry["released"] = minecraft.released
    entry["neoforge_version"] = neoforge.version
    entry["neoforge_released"] = neoforge.released
    return entry


async def build_minecraft_versions_with_neoforge(
    versions: VersionsApi,
    minecraft_versions: list[MinecraftVersionSummary],
    releases_only: bool,
) -> dict[str, Any]:
    """Build the listing of Minecraft versions that have a NeoForge release.

    Args:
        versions: Version metadata lookups.
        minecraft_versions: All Minecraft versions, newest first.
        releases_only: Only include versions of type ``release``.

    Returns:
        Listing payload with ``versions`` and, if a snapshot has NeoForge
        support, ``latestSnapshot``.
    """
    supported = _with_neoforge(minecraft_versions)
    version_details = await asyncio.gather(
        *(
            _fetch_details(versions, mv.version, neoforge_version)
            for mv, neoforge_version in supported
            if not releases_only or mv.type == "release"
        )
    )

    latest_snapshot = next(((mv, nf) for mv, nf in supported if mv.type == "snapshot"), None)

    listing: dict[str, Any] = {}
    if latest_snapshot is not None:
        snapshot, snapshot_neoforge = latest_snapshot
        listing["latestSnapshot"] = _make_version_entry(
            await _fetch_details(versions, snapshot.version, snapshot_neoforge)
        )
    listing["versions"] = [_make_version_entry(d) for d in version_details]
    return listing


async def build_neoforge_listing(versions: VersionsApi, version: str) -> dict[str, Any]:
    """Build the per-version NeoForge listing."""
    details = await versions.get_neoforge_details(version)
    return {"release_notes": details.release_notes}
