"""Incremental synchronization of compiled listings with a depot.

The depot index (``.depot-index.json``) records the descriptor of every
published listing. Listings whose uncompressed SHA256 and size match the
index entry are not uploaded again. The new index always replaces the old
one completely and is uploaded even when nothing changed.
"""

import asyncio

import aiofiles
from loguru import logger

from meta_depot.lib.depot.base import Depot, read_json
from meta_depot.lib.listing.builder import ListingsBuilder, serialize_listing
from meta_depot.lib.listing.compressor import compress
from meta_depot.lib.listing.types import (
    COMPRESSION_EXTENSIONS,
    DEPOT_INDEX_PATH,
    ListingDescriptor,
    SyncResult,
    listing_filenames,
)


class MissingDepotIndexError(RuntimeError):
    """Raised when the depot has no index and a full resync was not requested."""

    def __init__(self) -> None:
        super().__init__("Depot is empty. Full resync required, pass --full-resync")


async def fetch_depot_index(depot: Depot) -> list[ListingDescriptor] | None:
    """Load the published depot index.

    Args:
        depot: Depot to read from.

    Returns:
        Descriptors of the published listings, or None if no index exists.

    Raises:
        ValueError: If the index is not a list of listing descriptors.
        json.JSONDecodeError: If the index is not valid JSON.
    """
    data = await read_json(depot, DEPOT_INDEX_PATH)
    if data is None:
        return None
    if not isinstance(data, list):
        msg = f"Depot index {DEPOT_INDEX_PATH} must be a JSON array"
        raise ValueError(msg)
    return [ListingDescriptor.from_dict(entry) for entry in data]


def is_unchanged(listing: ListingDescriptor, existing: ListingDescriptor | None) -> bool:
    """Whether the published listing has the same uncompressed content."""
    return existing is not None and existing.sha256 == listing.sha256 and existing.size == listing.size


async def _upload_file(builder: ListingsBuilder, depot: Depot, filename: str) -> None:
    async with aiofiles.open(builder.destination_folder / filename, "rb") as f:
        content = await f.read()
    await depot.write(filename, content)
    logger.info("Uploaded {}", filename)


async def _upload_listing(builder: ListingsBuilder, depot: Depot, listing: ListingDescriptor) -> None:
    await asyncio.gather(*(_upload_file(builder, depot, filename) for filename in listing_filenames(listing.name)))


async def publish_depot_index(depot: Depot, content: bytes) -> None:
    """Upload the depot index with its compressed variants.

    The compressed variants are written first so the plain index, which
    the next run diffs against, never points ahead of them.
    """
    compressed = await compress(content)
    await asyncio.gather(
        *(
            depot.write(f"{DEPOT_INDEX_PATH}.{COMPRESSION_EXTENSIONS[compression]}", data)
            for compression, data in compressed.items()
        )
    )
    await depot.write(DEPOT_INDEX_PATH, content)
    logger.info("Uploaded {}", DEPOT_INDEX_PATH)


async def sync_with_depot(builder: ListingsBuilder, depot: Depot, *, full_resync: bool = False) -> SyncResult:
    """Upload changed listings and publish a new depot index.

    Must be called after ``builder.finish()``.

    Args:
        builder: Builder holding the listings compiled in this run.
        depot: Depot to publish to.
        full_resync: Treat a missing depot index as empty instead of failing.

    Returns:
        SyncResult naming the uploaded and skipped listings.

    Raises:
        MissingDepotIndexError: If the depot has no index and ``full_resync`` is False.
    """
    depot_index = await fetch_depot_index(depot)
    if depot_index is None:
        if not full_resync:
            raise MissingDepotIndexError
        logger.warning("Depot index not found, uploading all listings")
        depot_index = []

    existing_listings = {entry.name: entry for entry in depot_index}
    listings = await builder.listings()

    result = SyncResult()
    changed: list[ListingDescriptor] = []
    for listing in listings:
        if is_unchanged(listing, existing_listings.get(listing.name)):
            logger.debug(
                "Skipping upload of listing {} since its sha256 checksum matches ({})",
                listing.name,
                listing.sha256,
            )
            result.skipped.append(listing.name)
            continue
        changed.append(listing)

    await asyncio.gather(*(_upload_listing(builder, depot, listing) for listing in changed))
    result.uploaded = [listing.name for listing in changed]

    new_depot_index = sorted(listings, key=lambda listing: listing.name)
    index_content = serialize_listing([listing.to_dict() for listing in new_depot_index])
    await publish_depot_index(depot, index_content)
    result.index_size = len(index_content)

    logger.info(
        "Synced depot: {} listings uploaded, {} unchanged",
        len(result.uploaded),
        len(result.skipped),
    )
    return result
