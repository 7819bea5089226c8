"""Concurrent compression of listing content.

Each scheme runs in a worker thread so brotli at maximum quality does
not block the event loop while other listings are being compiled.
"""

import asyncio
import gzip
from collections.abc import Callable

import brotli

from meta_depot.lib.listing.types import CompressionType


def _brotli(data: bytes) -> bytes:
    return brotli.compress(data, quality=11)


def _gzip(data: bytes) -> bytes:
    # mtime=0 keeps the output byte-identical across runs
    return gzip.compress(data, compresslevel=9, mtime=0)


COMPRESSORS: dict[CompressionType, Callable[[bytes], bytes]] = {
    CompressionType.BROTLI: _brotli,
    CompressionType.GZIP: _gzip,
}


async def compress(data: bytes) -> dict[CompressionType, bytes]:
    """Compress ``data`` with every registered scheme concurrently.

    Args:
        data: Raw bytes to compress.

    Returns:
        Mapping of compression type to compressed bytes, complete for all schemes.
    """
    types = list(COMPRESSORS)
    results = await asyncio.gather(*(asyncio.to_thread(COMPRESSORS[t], data) for t in types))
    return dict(zip(types, results, strict=True))
