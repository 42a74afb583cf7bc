"""Durable storage for generated image files.

Files are written under a local directory that the application serves as
static files, so the returned path can be used directly as an ``<img src>``.
"""

import asyncio
from pathlib import Path

from artswipe.main_config import StorageConfig


class LocalBlobStorage:
    """Writes image bytes to disk and returns their servable path."""

    def __init__(self, config: StorageConfig) -> None:
        self.directory = Path(config.directory)
        self.url_prefix = config.url_prefix

    def ensure_directory(self) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        return self.directory

    def _write(self, filename: str, data: bytes) -> None:
        self.ensure_directory()
        (self.directory / filename).write_bytes(data)

    async def save(self, data: bytes, filename: str) -> str:
        """Persist ``data`` as ``filename``.

        File IO is blocking, so it runs in a worker thread.

        Returns:
            Servable path, e.g. ``/generated/<filename>``

        Raises:
            ValueError: If ``filename`` would escape the storage directory
            OSError: If the write fails
        """
        if Path(filename).name != filename:
            raise ValueError(f"Invalid filename: {filename!r}")

        await asyncio.to_thread(self._write, filename, data)
        return f"{self.url_prefix}/{filename}"

    def _remove(self, filename: str) -> None:
        (self.directory / filename).unlink(missing_ok=True)

    async def delete(self, url: str) -> None:
        """Remove a file previously returned by :meth:`save`.

        Raises:
            ValueError: If ``url`` is not under this storage's URL prefix
        """
        prefix = f"{self.url_prefix}/"
        filename = url[len(prefix):] if url.startswith(prefix) else ""
        if not filename or Path(filename).name != filename:
            raise ValueError(f"Not a stored image: {url!r}")

        await asyncio.to_thread(self._remove, filename)
