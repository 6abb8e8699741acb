"""Blocking and suspending filesystem adapters used by the lookup core."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from themeicons.errors import classify_exception

PathLike = str | os.PathLike


class LocalFileSystem:
    """Blocking access to the local filesystem."""

    def list_dir(self, path: PathLike) -> list[str]:
        """Return the entry names of a directory, sorted. Raises ThemeIOError."""
        try:
            return sorted(os.listdir(path))
        except OSError as exc:
            raise classify_exception(exc, Path(path)) from exc

    def exists(self, path: PathLike) -> bool:
        return os.path.exists(path)

    def read_text(self, path: PathLike) -> str:
        """Return the full UTF-8 contents of a file. Raises ThemeIOError."""
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise classify_exception(exc, Path(path)) from exc


class AsyncFileSystem:
    """Suspending counterpart of LocalFileSystem; calls run in a worker thread."""

    def __init__(self, blocking: LocalFileSystem | None = None) -> None:
        self._blocking = blocking or LocalFileSystem()

    async def list_dir(self, path: PathLike) -> list[str]:
        return await asyncio.to_thread(self._blocking.list_dir, path)

    async def exists(self, path: PathLike) -> bool:
        return await asyncio.to_thread(self._blocking.exists, path)

    async def read_text(self, path: PathLike) -> str:
        return await asyncio.to_thread(self._blocking.read_text, path)


DEFAULT_FS = LocalFileSystem()
DEFAULT_ASYNC_FS = AsyncFileSystem(DEFAULT_FS)
