"""Pydantic models for version metadata API responses.

Only the fields the listings need are declared; everything else the API
returns is kept as extra data.
"""

from pydantic import BaseModel, ConfigDict


class _ApiModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class MinecraftVersionSummary(_ApiModel):
    version: str
    type: str
    latest_neoforge_version: str | None = None


class NeoForgeVersionSummary(_ApiModel):
    version: str


class MinecraftVersionDetails(_ApiModel):
    version: str
    type: str
    released: str


class NeoForgeVersionDetails(_ApiModel):
    version: str
    released: str
    release_notes: str | None = None
