"""Listing library — compile JSON listings and sync them with a depot.

Provides concurrent compression, the run-scoped ``ListingsBuilder`` and
the incremental depot sync driven by ``.depot-index.json``.
"""

from meta_depot.lib.listing.builder import (
    DuplicateListingError,
    ListingsBuilder,
    build_file_descriptor,
    serialize_listing,
)
from meta_depot.lib.listing.compressor import compress
from meta_depot.lib.listing.sync import MissingDepotIndexError, fetch_depot_index, sync_with_depot
from meta_depot.lib.listing.types import (
    COMPRESSION_EXTENSIONS,
    DEPOT_INDEX_PATH,
    INDEX_LISTING_NAME,
    CompressionType,
    FileDescriptor,
    ListingDescriptor,
    SyncResult,
    listing_filenames,
)

__all__ = [
    "COMPRESSION_EXTENSIONS",
    "DEPOT_INDEX_PATH",
    "INDEX_LISTING_NAME",
    "CompressionType",
    "DuplicateListingError",
    "FileDescriptor",
    "ListingDescriptor",
    "ListingsBuilder",
    "MissingDepotIndexError",
    "SyncResult",
    "build_file_descriptor",
    "compress",
    "fetch_depot_index",
    "listing_filenames",
    "serialize_listing",
    "sync_with_depot",
]
