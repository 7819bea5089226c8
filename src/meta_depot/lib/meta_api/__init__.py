"""Version metadata API library — client and typed version lookups."""

from meta_depot.lib.meta_api.client import MetaApiAuthError, MetaApiClient, MetaApiError
from meta_depot.lib.meta_api.models import (
    MinecraftVersionDetails,
    MinecraftVersionSummary,
    NeoForgeVersionDetails,
    NeoForgeVersionSummary,
)
from meta_depot.lib.meta_api.versions import VersionsApi

__all__ = [
    "MetaApiAuthError",
    "MetaApiClient",
    "MetaApiError",
    "MinecraftVersionDetails",
    "MinecraftVersionSummary",
    "NeoForgeVersionDetails",
    "NeoForgeVersionSummary",
    "VersionsApi",
]
