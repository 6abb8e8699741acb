"""A parsed icon theme and icon search across its directories."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Mapping

from themeicons.directory import IconDirectory
from themeicons.errors import (
    IconNotFoundError,
    NoMatchingDirectoryError,
    ThemeValidationError,
)
from themeicons.fs import AsyncFileSystem, LocalFileSystem
from themeicons.models import ICON_THEME_SECTION, IconSearchRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IconTheme:
    """An icon theme loaded from its index.theme descriptor."""

    path: str
    name: str
    comment: str
    directories: tuple[IconDirectory, ...]
    inherits: tuple[str, ...] | None = None
    scaled_directories: tuple[str, ...] | None = None
    hidden: bool = False
    example: str | None = None

    @property
    def dir_name(self) -> str:
        """Directory name of the theme, which is how themes refer to each other."""
        return os.path.basename(os.path.normpath(self.path))

    @classmethod
    def from_descriptor(
        cls,
        data: Mapping[str, Mapping[str, str]],
        path: str | os.PathLike,
    ) -> "IconTheme":
        """Build a theme from a parsed descriptor. Raises ThemeValidationError.

        Directories whose own section is missing or invalid are dropped; the
        theme itself only fails when Name, Comment or Directories is absent.
        """
        theme_path = os.fspath(path)
        props = data.get(ICON_THEME_SECTION)
        if props is None:
            raise ThemeValidationError(
                f"Missing [{ICON_THEME_SECTION}] section",
                path=theme_path,
            )
        name = _required(props, "Name", theme_path)
        comment = _required(props, "Comment", theme_path)
        raw_directories = _required(props, "Directories", theme_path)

        return cls(
            path=theme_path,
            name=name,
            comment=comment,
            directories=_parse_directories(split_list(raw_directories), data, theme_path),
            inherits=split_list(props.get("Inherits")) or None,
            scaled_directories=split_list(props.get("ScaledDirectories")) or None,
            hidden=(props.get("Hidden") or "").strip().lower() == "true",
            example=(props.get("Example") or "").strip() or None,
        )

    def search_directories(self, request: IconSearchRequest) -> list[IconDirectory]:
        """Directories accepted by the request, in declared order."""
        candidates = [directory for directory in self.directories if directory.accepts(request)]
        if not candidates:
            raise NoMatchingDirectoryError(
                f"No directories of theme {self.name!r} match "
                f"size={request.size!r} context={request.context!r}",
                path=self.path,
            )
        return candidates

    def find_icon_sync(self, request: IconSearchRequest, fs: LocalFileSystem | None = None) -> str:
        """Return the first hit across matching directories in declared order.

        Raises NoMatchingDirectoryError or IconNotFoundError.
        """
        for directory in self.search_directories(request):
            try:
                return directory.find_icon_sync(request, fs)
            except IconNotFoundError:
                continue
        raise self._not_found(request)

    async def find_icon(self, request: IconSearchRequest, fs: AsyncFileSystem | None = None) -> str:
        """Suspending form of find_icon_sync; directories are queried concurrently."""
        candidates = self.search_directories(request)
        results = await asyncio.gather(
            *(_find_or_none(directory, request, fs) for directory in candidates)
        )
        for icon_path in results:
            if icon_path is not None:
                return icon_path
        raise self._not_found(request)

    def _not_found(self, request: IconSearchRequest) -> IconNotFoundError:
        return IconNotFoundError(
            f"Icon {request.icon_name!r} not found in theme {self.name!r}",
            path=self.path,
        )


def split_list(raw: str | None) -> tuple[str, ...]:
    """Split a comma separated descriptor value, dropping blank items."""
    if not raw:
        return ()
    return tuple(item.strip() for item in raw.split(",") if item.strip())


async def _find_or_none(
    directory: IconDirectory,
    request: IconSearchRequest,
    fs: AsyncFileSystem | None,
) -> str | None:
    try:
        return await directory.find_icon(request, fs)
    except IconNotFoundError:
        return None


def _required(props: Mapping[str, str], key: str, theme_path: str) -> str:
    value = (props.get(key) or "").strip()
    if not value:
        raise ThemeValidationError(f"{key} required for theme", path=theme_path)
    return value


def _parse_directories(
    names: tuple[str, ...],
    data: Mapping[str, Mapping[str, str]],
    theme_path: str,
) -> tuple[IconDirectory, ...]:
    parsed: list[IconDirectory] = []
    for name in names:
        try:
            parsed.append(IconDirectory.from_section(data.get(name), name, theme_path))
        except ThemeValidationError as exc:
            logger.debug("skipping directory %s: %s", name, exc)
    return tuple(parsed)
