"""Listing data types.

Dataclasses describing the physical files a listing is published as,
plus the result of a depot sync.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

DEPOT_INDEX_PATH = ".depot-index.json"
INDEX_LISTING_NAME = "index"


class CompressionType(StrEnum):
    """Compression schemes every listing is published with."""

    BROTLI = "brotli"
    GZIP = "gzip"


COMPRESSION_EXTENSIONS: dict[CompressionType, str] = {
    CompressionType.BROTLI: "br",
    CompressionType.GZIP: "gz",
}


def listing_filenames(name: str) -> list[str]:
    """Return the relative paths of every file published for a listing.

    The uncompressed JSON always comes first.
    """
    base = f"{name}.json"
    return [base, *(f"{base}.{ext}" for ext in COMPRESSION_EXTENSIONS.values())]


@dataclass(frozen=True)
class FileDescriptor:
    """A single published file.

    Attributes:
        url: Path of the file relative to the depot root.
        size: Length of the file content in bytes.
        sha256: Lowercase hex SHA256 digest of the file content.
    """

    url: str
    size: int
    sha256: str

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "size": self.size, "sha256": self.sha256}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FileDescriptor":
        return cls(url=data["url"], size=int(data["size"]), sha256=data["sha256"])


@dataclass(frozen=True)
class ListingDescriptor:
    """A logical listing and the files it is published as.

    The top-level ``url``/``size``/``sha256`` describe the uncompressed
    JSON; ``brotli`` and ``gzip`` describe the compressed variants.

    Attributes:
        name: Listing name, unique within a run (may contain ``/``).
        last_modified: ISO-8601 build timestamp shared by all listings of a run.
        url: Relative path of the uncompressed JSON file.
        size: Size of the uncompressed JSON in bytes.
        sha256: SHA256 of the uncompressed JSON.
        brotli: Descriptor of the brotli-compressed file.
        gzip: Descriptor of the gzip-compressed file.
    """

    name: str
    last_modified: str
    url: str
    size: int
    sha256: str
    brotli: FileDescriptor
    gzip: FileDescriptor

    def compressed(self, compression: CompressionType) -> FileDescriptor:
        """Return the descriptor of one compressed variant, looked up by its tag."""
        descriptor: FileDescriptor = getattr(self, CompressionType(compression).value)
        return descriptor

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the flat JSON shape stored in the depot index."""
        return {
            "name": self.name,
            "last_modified": self.last_modified,
            "url": self.url,
            "size": self.size,
            "sha256": self.sha256,
            "brotli": self.brotli.to_dict(),
            "gzip": self.gzip.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ListingDescriptor":
        """Parse an entry of a published depot index.

        Raises:
            ValueError: If a required field is missing or malformed.
        """
        try:
            return cls(
                name=data["name"],
                last_modified=data["last_modified"],
                url=data["url"],
                size=int(data["size"]),
                sha256=data["sha256"],
                brotli=FileDescriptor.from_dict(data["brotli"]),
                gzip=FileDescriptor.from_dict(data["gzip"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            msg = f"Invalid listing descriptor {data!r:.80}: {exc}"
            raise ValueError(msg) from exc


@dataclass
class SyncResult:
    """Outcome of synchronizing the compiled listings with a depot.

    Attributes:
        uploaded: Names of listings whose files were uploaded.
        skipped: Names of listings whose checksum matched the depot index.
        index_size: Size in bytes of the depot index that was published.
    """

    uploaded: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    index_size: int = 0
