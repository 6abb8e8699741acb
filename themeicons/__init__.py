"""Icon file lookup for freedesktop icon themes."""

import logging

from themeicons.directory import IconDirectory
from themeicons.errors import (
    DescriptorParseError,
    IconNotFoundError,
    IconThemeError,
    NoMatchingDirectoryError,
    ThemeIOError,
    ThemeValidationError,
)
from themeicons.finder import ThemeFinder
from themeicons.lookup import (
    IconLookup,
    find_themes_path,
    find_themes_path_sync,
    get_icon,
    get_icon_sync,
)
from themeicons.models import DirectoryType, IconSearchRequest
from themeicons.parser import ThemeParser, parse_descriptor
from themeicons.theme import IconTheme

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DescriptorParseError",
    "DirectoryType",
    "IconDirectory",
    "IconLookup",
    "IconNotFoundError",
    "IconSearchRequest",
    "IconTheme",
    "IconThemeError",
    "NoMatchingDirectoryError",
    "ThemeFinder",
    "ThemeIOError",
    "ThemeParser",
    "ThemeValidationError",
    "find_themes_path",
    "find_themes_path_sync",
    "get_icon",
    "get_icon_sync",
    "parse_descriptor",
]
