"""Lookup settings via QSettings."""

from __future__ import annotations

import os

from PySide6.QtCore import QSettings

from themeicons.models import DEFAULT_EXTENSIONS


class LookupSettings:
    """Wraps QSettings for persistent icon lookup configuration."""

    def __init__(self, qsettings: QSettings | None = None) -> None:
        self._qs = qsettings if qsettings is not None else QSettings("themeicons", "themeicons")

    # -- discovery --

    @property
    def extra_search_roots(self) -> list[str]:
        raw = self._qs.value("discovery/extra_roots", "", type=str)
        return [part.strip() for part in (raw or "").split(os.pathsep) if part.strip()]

    @extra_search_roots.setter
    def extra_search_roots(self, value: list[str]) -> None:
        cleaned = [str(part).strip() for part in value if str(part).strip()]
        self._qs.setValue("discovery/extra_roots", os.pathsep.join(cleaned))

    # -- preferred theme --

    @property
    def preferred_theme(self) -> str:
        raw = self._qs.value("lookup/preferred_theme", "", type=str)
        return (raw or "").strip()

    @preferred_theme.setter
    def preferred_theme(self, value: str) -> None:
        self._qs.setValue("lookup/preferred_theme", (value or "").strip())

    # -- extensions --

    @property
    def extensions(self) -> tuple[str, ...]:
        raw = self._qs.value("lookup/extensions", ",".join(DEFAULT_EXTENSIONS), type=str)
        cleaned = tuple(ext.strip().lstrip(".") for ext in (raw or "").split(",") if ext.strip())
        return cleaned or DEFAULT_EXTENSIONS

    @extensions.setter
    def extensions(self, value: tuple[str, ...] | list[str]) -> None:
        cleaned = [str(ext).strip().lstrip(".") for ext in value if str(ext).strip()]
        self._qs.setValue("lookup/extensions", ",".join(cleaned or DEFAULT_EXTENSIONS))

    # -- inheritance --

    @property
    def follow_inherits(self) -> bool:
        return self._qs.value("lookup/follow_inherits", False, type=bool)

    @follow_inherits.setter
    def follow_inherits(self, value: bool) -> None:
        self._qs.setValue("lookup/follow_inherits", bool(value))

    # -- helpers --

    def sync(self) -> None:
        self._qs.sync()
