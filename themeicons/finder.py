"""Installed theme discovery and desktop icon theme preference."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import subprocess
from typing import Mapping

from PySide6.QtCore import QSettings

from themeicons.config.settings import LookupSettings
from themeicons.errors import ThemeIOError
from themeicons.fs import DEFAULT_ASYNC_FS, DEFAULT_FS, AsyncFileSystem, LocalFileSystem
from themeicons.models import DESCRIPTOR_FILENAME

logger = logging.getLogger(__name__)

DEFAULT_XDG_DATA_DIRS = "/usr/local/share:/usr/share"
PIXMAPS_DIR = "/usr/share/pixmaps"
GNOME_SCHEMA = "org.gnome.desktop.interface"
GNOME_ICON_THEME_KEY = "icon-theme"
KDE_ICON_THEME_KEY = "Icons/Theme"


class ThemeFinder:
    """Finds installed index.theme files and the desktop's preferred icon theme."""

    def __init__(
        self,
        settings: LookupSettings | None = None,
        fs: LocalFileSystem | None = None,
        async_fs: AsyncFileSystem | None = None,
        environ: Mapping[str, str] | None = None,
        pixmaps_dir: str = PIXMAPS_DIR,
    ) -> None:
        self._settings = settings
        self._fs = fs or DEFAULT_FS
        self._async_fs = async_fs or (AsyncFileSystem(fs) if fs else DEFAULT_ASYNC_FS)
        self._environ = environ if environ is not None else os.environ
        self._pixmaps_dir = pixmaps_dir

    # -- search roots --

    def lookup_dirs(self) -> list[str]:
        """Search roots in priority order: configured extras, user, XDG data dirs, pixmaps."""
        env = self._environ
        roots: list[str] = []
        if self._settings is not None:
            roots.extend(self._settings.extra_search_roots)

        home = env.get("HOME")
        if home:
            roots.append(os.path.join(home, ".icons"))
        data_home = env.get("XDG_DATA_HOME") or (
            os.path.join(home, ".local", "share") if home else ""
        )
        if data_home:
            roots.append(os.path.join(data_home, "icons"))
        data_dirs = env.get("XDG_DATA_DIRS") or DEFAULT_XDG_DATA_DIRS
        for data_dir in data_dirs.split(os.pathsep):
            if data_dir:
                roots.append(os.path.join(data_dir, "icons"))
        roots.append(self._pixmaps_dir)

        seen: set[str] = set()
        ordered: list[str] = []
        for root in roots:
            key = os.path.normpath(root)
            if key in seen:
                continue
            seen.add(key)
            ordered.append(root)
        return ordered

    # -- theme paths --

    def find_themes_path_sync(self) -> list[str]:
        """Return the existing ``<root>/<theme>/index.theme`` paths, root priority first."""
        found: list[str] = []
        for root in self.lookup_dirs():
            for entry in self._list_root_sync(root):
                candidate = os.path.join(root, entry, DESCRIPTOR_FILENAME)
                if self._fs.exists(candidate):
                    found.append(candidate)
        return found

    async def find_themes_path(self) -> list[str]:
        """Suspending form of find_themes_path_sync with the same result."""
        roots = self.lookup_dirs()
        listings = await asyncio.gather(*(self._list_root(root) for root in roots))
        candidates = [
            os.path.join(root, entry, DESCRIPTOR_FILENAME)
            for root, entries in zip(roots, listings)
            for entry in entries
        ]
        flags = await asyncio.gather(*(self._async_fs.exists(path) for path in candidates))
        return [path for path, exists in zip(candidates, flags) if exists]

    def _list_root_sync(self, root: str) -> list[str]:
        try:
            return self._fs.list_dir(root)
        except ThemeIOError as exc:
            logger.debug("skipping search root %s: %s", root, exc)
            return []

    async def _list_root(self, root: str) -> list[str]:
        try:
            return await self._async_fs.list_dir(root)
        except ThemeIOError as exc:
            logger.debug("skipping search root %s: %s", root, exc)
            return []

    # -- preferred theme --

    def get_current_theme_sync(self) -> str | None:
        """Return the user's icon theme name, or None when no source reports one."""
        override = self._configured_theme()
        if override:
            return override
        for source in self._source_order():
            if source == "kde":
                name = self._kde_theme()
            else:
                name = _clean_gsettings_output(self._gsettings_sync())
            if name:
                return name
        return None

    async def get_current_theme(self) -> str | None:
        override = self._configured_theme()
        if override:
            return override
        for source in self._source_order():
            if source == "kde":
                name = await asyncio.to_thread(self._kde_theme)
            else:
                name = _clean_gsettings_output(await self._gsettings())
            if name:
                return name
        return None

    def _configured_theme(self) -> str:
        if self._settings is None:
            return ""
        return self._settings.preferred_theme

    def _source_order(self) -> tuple[str, ...]:
        desktop = (self._environ.get("XDG_CURRENT_DESKTOP") or "").upper()
        if "KDE" in desktop.split(":"):
            return ("kde", "gnome")
        return ("gnome", "kde")

    def _gsettings_command(self) -> list[str] | None:
        executable = shutil.which("gsettings", path=self._environ.get("PATH"))
        if executable is None:
            return None
        return [executable, "get", GNOME_SCHEMA, GNOME_ICON_THEME_KEY]

    def _gsettings_sync(self) -> str | None:
        command = self._gsettings_command()
        if command is None:
            return None
        try:
            completed = subprocess.run(command, capture_output=True, text=True, check=False)
        except OSError as exc:
            logger.debug("gsettings unavailable: %s", exc)
            return None
        if completed.returncode != 0:
            logger.debug("gsettings exited with %s: %s", completed.returncode, completed.stderr.strip())
            return None
        return completed.stdout

    async def _gsettings(self) -> str | None:
        command = self._gsettings_command()
        if command is None:
            return None
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await process.communicate()
        except OSError as exc:
            logger.debug("gsettings unavailable: %s", exc)
            return None
        if process.returncode != 0:
            logger.debug(
                "gsettings exited with %s: %s",
                process.returncode,
                stderr.decode("utf-8", "replace").strip(),
            )
            return None
        return stdout.decode("utf-8", "replace")

    def _kde_globals_path(self) -> str | None:
        config_home = self._environ.get("XDG_CONFIG_HOME")
        if not config_home:
            home = self._environ.get("HOME")
            if not home:
                return None
            config_home = os.path.join(home, ".config")
        return os.path.join(config_home, "kdeglobals")

    def _kde_theme(self) -> str | None:
        path = self._kde_globals_path()
        if path is None or not self._fs.exists(path):
            return None
        kde = QSettings(path, QSettings.Format.IniFormat)
        value = kde.value(KDE_ICON_THEME_KEY, "", type=str)
        return (value or "").strip() or None


def _clean_gsettings_output(raw: str | None) -> str | None:
    """``'Adwaita'\\n`` -> ``Adwaita``."""
    if not raw:
        return None
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1]
    return value.strip() or None
