"""Durable-write primitive shared by every file-backed store.

The writer knows nothing about JSON or entities: it moves text in and out
of ``<path>/<base_name>.<extension>`` and timestamped backups of it. File
operations run in a worker thread so callers suspend on them.

A write truncates the file before writing the new content. A crash
between the two steps leaves an empty file, which the next ``init``
treats as no data.
"""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Optional, Union

PathLike = Union[str, Path]

EMPTY_COLLECTION = "[]"


def backup_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2024-01-01T00:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _open(directory: Path, filename: str) -> IO[str]:
    directory.mkdir(parents=True, exist_ok=True)
    return open(directory / filename, "a+", encoding="utf-8", errors="surrogateescape")


def _replace_contents(handle: IO[str], content: str) -> None:
    try:
        handle.truncate(0)
        handle.write(content)
    except OSError:
        handle.close()
        raise
    handle.close()


def _read_contents(handle: IO[str]) -> str:
    try:
        handle.seek(0)
        return handle.read()
    finally:
        handle.close()


class FileServiceWriter:
    """Reads and rewrites one named file inside a directory."""

    def __init__(self, base_name: str, file_extension: str = "json"):
        """Initialize the writer.

        Args:
            base_name: File name without extension, e.g. "action_data"
            file_extension: Extension without the dot
        """
        self.base_name = base_name
        self.file_extension = file_extension

    @property
    def filename(self) -> str:
        return f"{self.base_name}.{self.file_extension}"

    def backup_filename(self) -> str:
        return f"{self.base_name}_backup_{backup_timestamp()}.{self.file_extension}"

    async def make_file_handle(self, path: PathLike, name: Optional[str] = None) -> IO[str]:
        """Create ``path`` if needed and open the file for append and read.

        The file is created if it does not exist.
        """
        return await asyncio.to_thread(_open, Path(path), name or self.filename)

    async def write_to_file(
        self,
        path: PathLike,
        content: str,
        file_handle: Optional[IO[str]] = None,
        name: Optional[str] = None,
    ) -> None:
        """Replace the file's contents with ``content`` and close it.

        Errors from any step propagate and the remaining steps are skipped.
        """
        handle = file_handle or await self.make_file_handle(path, name)
        await asyncio.to_thread(_replace_contents, handle, content)

    async def read_file(self, path: PathLike, file_handle: Optional[IO[str]] = None) -> str:
        """Return the whole file as text. An empty file reads as ""."""
        handle = file_handle or await self.make_file_handle(path)
        return await asyncio.to_thread(_read_contents, handle)

    async def write_backup(
        self,
        path: PathLike,
        raw_data: str,
        file_handle: Optional[IO[str]] = None,
        name: Optional[str] = None,
    ) -> None:
        """Write ``raw_data`` to a timestamped backup file inside ``path``."""
        await self.write_to_file(
            path,
            raw_data,
            file_handle=file_handle,
            name=name or self.backup_filename(),
        )

    async def clear_file(
        self,
        path: PathLike,
        empty: str = EMPTY_COLLECTION,
        file_handle: Optional[IO[str]] = None,
    ) -> None:
        """Reset the file to an empty collection marker."""
        await self.write_to_file(path, empty, file_handle=file_handle)
