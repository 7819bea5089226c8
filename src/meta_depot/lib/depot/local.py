"""Local filesystem depot.

Mirrors the published layout into a directory, which is useful for
previewing a publish run or serving the depot from a static web server.
"""

from pathlib import Path

import aiofiles

from meta_depot.lib.depot.base import resolve_public_url


class LocalDepot:
    """Depot backed by a local directory.

    Args:
        public_base_url: URL under which ``base_path`` is served.
        base_path: Root directory of the depot.
    """

    def __init__(self, public_base_url: str, base_path: str | Path) -> None:
        self._public_base_url = public_base_url
        self._base_path = Path(base_path)

    @property
    def base_path(self) -> Path:
        return self._base_path

    async def read(self, relative_path: str) -> bytes | None:
        """Read a file from the depot directory.

        Args:
            relative_path: Path relative to the depot root.

        Returns:
            Raw file bytes, or None if the file does not exist.

        Raises:
            OSError: For any I/O failure other than a missing file.
        """
        try:
            async with aiofiles.open(self._base_path / relative_path, "rb") as f:
                return await f.read()
        except FileNotFoundError:
            return None

    async def write(self, relative_path: str, content: bytes) -> None:
        """Write a file into the depot directory, creating parent directories.

        Args:
            relative_path: Path relative to the depot root.
            content: Raw bytes to write.
        """
        full_path = self._base_path / relative_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(full_path, "wb") as f:
            await f.write(content)

    def public_url(self, relative_path: str) -> str:
        return resolve_public_url(self._public_base_url, relative_path)
