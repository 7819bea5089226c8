"""NeoForge listing library — payload assembly and path-safety checks."""

from meta_depot.lib.neoforge.listings import (
    build_minecraft_versions_with_neoforge,
    build_neoforge_listing,
    is_safe_path,
)

__all__ = [
    "build_minecraft_versions_with_neoforge",
    "build_neoforge_listing",
    "is_safe_path",
]
