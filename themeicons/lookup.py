"""Icon lookup across every installed theme."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Sequence

from themeicons.config.settings import LookupSettings
from themeicons.errors import IconNotFoundError
from themeicons.finder import ThemeFinder
from themeicons.models import IconHit, IconSearchRequest
from themeicons.parser import ThemeParser
from themeicons.theme import IconTheme

logger = logging.getLogger(__name__)

FALLBACK_THEME = "hicolor"

IconOptions = IconSearchRequest | Mapping[str, Any] | str


class IconLookup:
    """Resolves icon names to files using the installed themes.

    Every call rediscovers and reloads the themes; nothing is cached between
    calls. With ``follow_inherits`` a theme that misses is retried through its
    ``Inherits`` chain among the installed themes.
    """

    def __init__(
        self,
        finder: ThemeFinder | None = None,
        parser: ThemeParser | None = None,
        settings: LookupSettings | None = None,
        *,
        follow_inherits: bool | None = None,
    ) -> None:
        self._settings = settings
        self._finder = finder or ThemeFinder(settings=settings)
        self._parser = parser or ThemeParser()
        if follow_inherits is None:
            follow_inherits = settings.follow_inherits if settings is not None else False
        self._follow_inherits = follow_inherits

    @property
    def finder(self) -> ThemeFinder:
        return self._finder

    @property
    def follow_inherits(self) -> bool:
        return self._follow_inherits

    def request_for(self, options: IconOptions) -> IconSearchRequest:
        default_extensions = self._settings.extensions if self._settings is not None else None
        return IconSearchRequest.coerce(options, default_extensions=default_extensions)

    def _request_or_none(self, options: IconOptions, fallback: str) -> IconSearchRequest | None:
        try:
            return self.request_for(options)
        except (TypeError, ValueError) as exc:
            logger.info("unusable icon options %r (%s); using fallback %s", options, exc, fallback)
            return None

    def get_icon_sync(self, options: IconOptions, fallback: str) -> str:
        """Return the best icon path for ``options``, or ``fallback``.

        Unusable options, such as an empty name or a size like ``"large"``,
        also resolve to ``fallback``.
        """
        request = self._request_or_none(options, fallback)
        if request is None:
            return fallback
        themes = self._parser.parse_every_theme_sync(self._finder.find_themes_path_sync())
        by_name = _index_by_dir_name(themes)
        hits: list[IconHit] = []
        for theme in themes:
            icon = self._find_in_theme_sync(theme, request, by_name)
            if icon is not None:
                hits.append(IconHit(icon=icon, theme_name=theme.dir_name))
        if not hits:
            return self._fallback(request, fallback)
        return self._choose(hits, self._finder.get_current_theme_sync())

    async def get_icon(self, options: IconOptions, fallback: str) -> str:
        """Suspending form of get_icon_sync; themes are queried concurrently."""
        request = self._request_or_none(options, fallback)
        if request is None:
            return fallback
        themes = await self._parser.parse_every_theme(await self._finder.find_themes_path())
        by_name = _index_by_dir_name(themes)
        icons = await asyncio.gather(
            *(self._find_in_theme(theme, request, by_name) for theme in themes)
        )
        hits = [
            IconHit(icon=icon, theme_name=theme.dir_name)
            for theme, icon in zip(themes, icons)
            if icon is not None
        ]
        if not hits:
            return self._fallback(request, fallback)
        return self._choose(hits, await self._finder.get_current_theme())

    # -- per theme --

    def _find_in_theme_sync(
        self,
        theme: IconTheme,
        request: IconSearchRequest,
        by_name: Mapping[str, IconTheme],
    ) -> str | None:
        chain = inheritance_chain(theme, by_name) if self._follow_inherits else [theme]
        for member in chain:
            try:
                return member.find_icon_sync(request)
            except IconNotFoundError:
                continue
        return None

    async def _find_in_theme(
        self,
        theme: IconTheme,
        request: IconSearchRequest,
        by_name: Mapping[str, IconTheme],
    ) -> str | None:
        chain = inheritance_chain(theme, by_name) if self._follow_inherits else [theme]
        for member in chain:
            try:
                return await member.find_icon(request)
            except IconNotFoundError:
                continue
        return None

    # -- selection --

    @staticmethod
    def _choose(hits: Sequence[IconHit], preferred: str | None) -> str:
        ordered = prefer_theme(hits, preferred)
        chosen = ordered[0]
        logger.debug("resolved icon %s from theme %s", chosen.icon, chosen.theme_name)
        return chosen.icon

    @staticmethod
    def _fallback(request: IconSearchRequest, fallback: str) -> str:
        logger.info("no theme provides icon %r; using fallback %s", request.icon_name, fallback)
        return fallback


def prefer_theme(hits: Sequence[IconHit], preferred: str | None) -> list[IconHit]:
    """Move the first hit from the preferred theme to the front, keeping the rest in order."""
    ordered = list(hits)
    if not preferred:
        return ordered
    for index, hit in enumerate(ordered):
        if hit.theme_name == preferred:
            ordered.insert(0, ordered.pop(index))
            break
    return ordered


def inheritance_chain(theme: IconTheme, by_name: Mapping[str, IconTheme]) -> list[IconTheme]:
    """The theme followed by its installed ancestors, depth first, hicolor last.

    Unknown names are skipped and each theme appears once, so cycles terminate.
    """
    chain: list[IconTheme] = []
    seen: set[str] = set()

    def visit(current: IconTheme) -> None:
        if current.dir_name in seen:
            return
        seen.add(current.dir_name)
        chain.append(current)
        for parent_name in current.inherits or ():
            parent = by_name.get(parent_name)
            if parent is not None and parent_name != FALLBACK_THEME:
                visit(parent)

    visit(theme)
    hicolor = by_name.get(FALLBACK_THEME)
    if hicolor is not None and FALLBACK_THEME not in seen:
        chain.append(hicolor)
    return chain


def _index_by_dir_name(themes: Sequence[IconTheme]) -> dict[str, IconTheme]:
    index: dict[str, IconTheme] = {}
    for theme in themes:
        index.setdefault(theme.dir_name, theme)
    return index


_default_lookup: IconLookup | None = None


def default_lookup() -> IconLookup:
    """Shared lookup configured from the persistent LookupSettings."""
    global _default_lookup
    if _default_lookup is None:
        settings = LookupSettings()
        _default_lookup = IconLookup(settings=settings)
    return _default_lookup


def get_icon_sync(options: IconOptions, fallback: str) -> str:
    """Find an icon, blocking. ``options`` is an icon name, a mapping or a request."""
    return default_lookup().get_icon_sync(options, fallback)


async def get_icon(options: IconOptions, fallback: str) -> str:
    """Find an icon without blocking the event loop."""
    return await default_lookup().get_icon(options, fallback)


def find_themes_path_sync() -> list[str]:
    return default_lookup().finder.find_themes_path_sync()


async def find_themes_path() -> list[str]:
    return await default_lookup().finder.find_themes_path()
