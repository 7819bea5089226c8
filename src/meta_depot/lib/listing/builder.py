"""Listing compilation.

``ListingsBuilder`` turns JSON-serializable payloads into listing files in
a local destination folder: ``<name>.json`` plus one compressed variant per
compression type. Listings are registered without being awaited; each one
is compiled in its own task and all tasks are joined by ``finish()``,
which also writes the local ``index`` listing describing every other
listing.
"""

import asyncio
import hashlib
import inspect
import json
from collections.abc import Awaitable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import aiofiles
from loguru import logger

from meta_depot.lib.listing.compressor import compress
from meta_depot.lib.listing.types import (
    COMPRESSION_EXTENSIONS,
    INDEX_LISTING_NAME,
    FileDescriptor,
    ListingDescriptor,
)


class DuplicateListingError(ValueError):
    """Raised when a listing name is registered twice in one run."""


def serialize_listing(content: Any, *, pretty: bool = False) -> bytes:
    """Encode a listing payload as UTF-8 JSON.

    Args:
        content: JSON-serializable payload.
        pretty: Indent the output by two spaces.

    Returns:
        Encoded JSON bytes.

    Raises:
        TypeError: If the payload contains a non-serializable value.
        ValueError: If the payload contains NaN or infinity.
    """
    if pretty:
        text = json.dumps(content, ensure_ascii=False, allow_nan=False, indent=2)
    else:
        text = json.dumps(content, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    return text.encode("utf-8")


def build_file_descriptor(filename: str, content: bytes) -> FileDescriptor:
    """Describe a file by its relative path, size and SHA256 digest."""
    return FileDescriptor(
        url=filename,
        size=len(content),
        sha256=hashlib.sha256(content).hexdigest(),
    )


def _utc_timestamp() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ListingsBuilder:
    """Compiles listings into a destination folder for one publish run.

    Args:
        destination_folder: Folder the listing files are written to.
        format_output: Pretty-print the JSON of every listing.
    """

    def __init__(self, destination_folder: str | Path, *, format_output: bool = False) -> None:
        self._destination_folder = Path(destination_folder)
        self._format_output = format_output
        self._listings: dict[str, asyncio.Task[ListingDescriptor]] = {}
        self._reference_date = _utc_timestamp()
        self._finished = False

    @property
    def destination_folder(self) -> Path:
        return self._destination_folder

    @property
    def reference_date(self) -> str:
        """Build timestamp recorded as ``last_modified`` on every listing."""
        return self._reference_date

    def __contains__(self, name: object) -> bool:
        return name in self._listings

    def write_listing(self, name: str, content: Any | Awaitable[Any]) -> asyncio.Task[ListingDescriptor]:
        """Register a listing and start compiling it in the background.

        Must be called from within a running event loop. The returned task
        does not need to be awaited; ``finish()`` joins all of them.

        Args:
            name: Listing name; the files are written to ``<name>.json*``.
            content: The payload, or an awaitable producing it.

        Returns:
            Task resolving to the listing's descriptor.

        Raises:
            DuplicateListingError: If ``name`` has already been registered.
        """
        if name in self._listings:
            if inspect.iscoroutine(content):
                content.close()
            msg = f"Listing {name} has already been written."
            raise DuplicateListingError(msg)

        task = asyncio.create_task(self._write_listing(name, content), name=f"listing:{name}")
        self._listings[name] = task
        return task

    async def finish(self) -> ListingDescriptor:
        """Wait for every registered listing and write the ``index`` listing.

        The index is only materialized in the destination folder. It is not
        registered, so it is never diffed or uploaded by the depot sync.

        Returns:
            Descriptor of the index listing.

        Raises:
            DuplicateListingError: If called more than once.
            Exception: The first failure of any registered listing.
        """
        if self._finished or INDEX_LISTING_NAME in self._listings:
            msg = f"Listing {INDEX_LISTING_NAME} has already been written."
            raise DuplicateListingError(msg)

        self._finished = True

        descriptors = await asyncio.gather(*self._listings.values())
        files = [d.to_dict() for d in sorted(descriptors, key=lambda d: d.name)]
        return await self._write_listing(INDEX_LISTING_NAME, files)

    async def listings(self) -> list[ListingDescriptor]:
        """Return the descriptors of every registered listing, in registration order."""
        return list(await asyncio.gather(*self._listings.values()))

    async def _write_listing(self, name: str, content: Any | Awaitable[Any]) -> ListingDescriptor:
        if inspect.isawaitable(content):
            content = await content

        buffer = serialize_listing(content, pretty=self._format_output)

        json_filename = f"{name}.json"
        json_path = self._destination_folder / json_filename
        json_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(json_path, "wb") as f:
            await f.write(buffer)

        compressed = await compress(buffer)

        compressed_descriptors: dict[str, FileDescriptor] = {}
        for compression, data in compressed.items():
            filename = f"{json_filename}.{COMPRESSION_EXTENSIONS[compression]}"
            async with aiofiles.open(self._destination_folder / filename, "wb") as f:
                await f.write(data)
            compressed_descriptors[compression.value] = build_file_descriptor(filename, data)

        descriptor = build_file_descriptor(json_filename, buffer)
        logger.debug("Compiled listing {} ({} bytes)", name, descriptor.size)
        return ListingDescriptor(
            name=name,
            last_modified=self._reference_date,
            url=descriptor.url,
            size=descriptor.size,
            sha256=descriptor.sha256,
            **compressed_descriptors,
        )
