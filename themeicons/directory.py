"""A single icon theme subdirectory and its sizing rules."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Mapping

from themeicons.errors import ErrorCode, IconNotFoundError, ThemeIOError, ThemeValidationError
from themeicons.fs import DEFAULT_ASYNC_FS, DEFAULT_FS, AsyncFileSystem, LocalFileSystem
from themeicons.models import DirectoryType, IconSearchRequest

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 1
DEFAULT_THRESHOLD = 2


@dataclass(slots=True)
class IconDirectory:
    """One theme subdirectory (e.g. ``48x48/apps``) as described by index.theme.

    ``size`` is the nominal unscaled icon size. ``min_size``/``max_size`` bound
    scalable directories and ``threshold`` bounds threshold directories; both
    default from ``size``. The file listing is read on first lookup and kept
    for the lifetime of the instance.
    """

    absolute_path: str
    name: str
    size: int
    scale: int = DEFAULT_SCALE
    context: str | None = None
    type: DirectoryType = DirectoryType.THRESHOLD
    min_size: int | None = None
    max_size: int | None = None
    threshold: int = DEFAULT_THRESHOLD
    _icons: list[str] | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size <= 0:
            raise ThemeValidationError(
                f"Directory {self.name!r}: Size must be a positive integer",
                path=self.absolute_path,
                code=ErrorCode.DESCRIPTOR_INVALID_VALUE,
            )
        if self.min_size is None:
            self.min_size = self.size
        if self.max_size is None:
            self.max_size = self.size

    @classmethod
    def from_section(
        cls,
        section: Mapping[str, str] | None,
        name: str,
        theme_path: str | os.PathLike,
    ) -> "IconDirectory":
        """Build a directory from its index.theme section. Raises ThemeValidationError."""
        absolute_path = os.path.join(os.fspath(theme_path), name)
        if section is None:
            raise ThemeValidationError(
                f"Directory {name!r} has no section in the theme descriptor",
                path=absolute_path,
            )
        raw_size = (section.get("Size") or "").strip()
        if not raw_size:
            raise ThemeValidationError(
                f"Size required for directory {name!r}",
                path=absolute_path,
            )
        size = _parse_int(raw_size)
        if size is None:
            raise ThemeValidationError(
                f"Directory {name!r}: Size is not an integer: {raw_size!r}",
                path=absolute_path,
                code=ErrorCode.DESCRIPTOR_INVALID_VALUE,
            )
        context = (section.get("Context") or "").strip() or None
        return cls(
            absolute_path=absolute_path,
            name=name,
            size=size,
            scale=_parse_int(section.get("Scale")) or DEFAULT_SCALE,
            context=context,
            type=DirectoryType.parse(section.get("Type")),
            min_size=_parse_int(section.get("MinSize")) or None,
            max_size=_parse_int(section.get("MaxSize")) or None,
            threshold=_parse_int(section.get("Threshold")) or DEFAULT_THRESHOLD,
        )

    def accepts(self, request: IconSearchRequest) -> bool:
        """True when this directory satisfies the request's size and context filter."""
        size_ok = request.any_size or self.size == request.size
        context_ok = request.any_context or self.context == request.context
        return size_ok and context_ok

    # -- listing --

    def list_icons_sync(self, fs: LocalFileSystem | None = None) -> list[str]:
        if self._icons is None:
            try:
                names = (fs or DEFAULT_FS).list_dir(self.absolute_path)
            except ThemeIOError as exc:
                logger.debug("cannot list icon directory %s: %s", self.absolute_path, exc)
                names = []
            self._icons = names
        return self._icons

    async def list_icons(self, fs: AsyncFileSystem | None = None) -> list[str]:
        if self._icons is None:
            try:
                names = await (fs or DEFAULT_ASYNC_FS).list_dir(self.absolute_path)
            except ThemeIOError as exc:
                logger.debug("cannot list icon directory %s: %s", self.absolute_path, exc)
                names = []
            self._icons = names
        return self._icons

    # -- lookup --

    def find_icon_sync(self, request: IconSearchRequest, fs: LocalFileSystem | None = None) -> str:
        """Return the path of the first file matching the request. Raises IconNotFoundError."""
        return self._match(request, self.list_icons_sync(fs))

    async def find_icon(self, request: IconSearchRequest, fs: AsyncFileSystem | None = None) -> str:
        """Suspending form of find_icon_sync with the same result."""
        return self._match(request, await self.list_icons(fs))

    def _match(self, request: IconSearchRequest, file_names: list[str]) -> str:
        pattern = icon_file_pattern(request)
        for file_name in file_names:
            if pattern.fullmatch(file_name):
                return os.path.join(self.absolute_path, file_name)
        raise IconNotFoundError(
            f"Icon {request.icon_name!r} not found",
            path=self.absolute_path,
        )


def icon_file_pattern(request: IconSearchRequest) -> re.Pattern[str]:
    """Compile ``<name>.(ext1|ext2|...)`` for the request."""
    extensions = "|".join(re.escape(ext) for ext in request.extensions)
    return re.compile(rf"{re.escape(request.icon_name)}\.({extensions})")


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None
