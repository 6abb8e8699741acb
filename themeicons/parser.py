"""Theme descriptor parsing and theme loading."""

from __future__ import annotations

import asyncio
import configparser
import logging
import os
from pathlib import Path
from typing import Iterable

from themeicons.errors import DescriptorParseError, IconThemeError
from themeicons.fs import DEFAULT_ASYNC_FS, DEFAULT_FS, AsyncFileSystem, LocalFileSystem
from themeicons.theme import IconTheme

logger = logging.getLogger(__name__)


def parse_descriptor(text: str) -> dict[str, dict[str, str]]:
    """Parse index.theme text into ``{section: {key: value}}``.

    Keys keep their case and values are returned raw. Malformed text raises
    DescriptorParseError; no partial structure is returned.
    """
    parser = configparser.ConfigParser(
        interpolation=None,
        strict=False,
        delimiters=("=",),
        comment_prefixes=("#", ";"),
        default_section="\x00defaults",
    )
    parser.optionxform = str
    try:
        parser.read_string(text)
    except configparser.Error as exc:
        raise DescriptorParseError(
            "Malformed theme descriptor",
            details={"original": str(exc).splitlines()[0] if str(exc) else type(exc).__name__},
        ) from exc
    return {
        section: {key: value for key, value in parser.items(section, raw=True)}
        for section in parser.sections()
    }


class ThemeParser:
    """Reads index.theme files and turns them into IconTheme objects."""

    def __init__(
        self,
        fs: LocalFileSystem | None = None,
        async_fs: AsyncFileSystem | None = None,
    ) -> None:
        self._fs = fs or DEFAULT_FS
        self._async_fs = async_fs or (AsyncFileSystem(fs) if fs else DEFAULT_ASYNC_FS)

    def parse_theme_sync(self, index_path: str | os.PathLike) -> IconTheme:
        """Load one theme. Raises IconThemeError subclasses on any failure."""
        text = self._fs.read_text(index_path)
        return self._build(text, index_path)

    async def parse_theme(self, index_path: str | os.PathLike) -> IconTheme:
        text = await self._async_fs.read_text(index_path)
        return self._build(text, index_path)

    def parse_every_theme_sync(self, paths: Iterable[str | os.PathLike]) -> list[IconTheme]:
        """Load every theme that parses and validates, in the order given."""
        themes: list[IconTheme] = []
        for index_path in paths:
            try:
                themes.append(self.parse_theme_sync(index_path))
            except IconThemeError as exc:
                logger.debug("skipping theme %s: %s", index_path, exc)
        return themes

    async def parse_every_theme(self, paths: Iterable[str | os.PathLike]) -> list[IconTheme]:
        """Load themes concurrently; results keep the order given."""
        results = await asyncio.gather(*(self._parse_or_none(path) for path in paths))
        return [theme for theme in results if theme is not None]

    async def _parse_or_none(self, index_path: str | os.PathLike) -> IconTheme | None:
        try:
            return await self.parse_theme(index_path)
        except IconThemeError as exc:
            logger.debug("skipping theme %s: %s", index_path, exc)
            return None

    @staticmethod
    def _build(text: str, index_path: str | os.PathLike) -> IconTheme:
        try:
            data = parse_descriptor(text)
        except DescriptorParseError as exc:
            exc.path = Path(index_path)
            raise
        return IconTheme.from_descriptor(data, os.path.dirname(os.fspath(index_path)))
