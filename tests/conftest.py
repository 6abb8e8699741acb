"""Shared fixtures for icon theme tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from PySide6.QtCore import QSettings

from themeicons.config.settings import LookupSettings
from themeicons.finder import ThemeFinder


def write_theme(
    root: Path,
    dir_name: str,
    directories: dict[str, dict[str, str]],
    icons: dict[str, list[str]] | None = None,
    **props: str,
) -> Path:
    """Write ``root/dir_name/index.theme`` plus empty icon files; return the theme dir."""
    theme_dir = root / dir_name
    theme_dir.mkdir(parents=True, exist_ok=True)
    header = {
        "Name": dir_name,
        "Comment": f"{dir_name} test theme",
        "Directories": ",".join(directories),
    }
    header.update(props)
    lines = ["[Icon Theme]"]
    lines.extend(f"{key}={value}" for key, value in header.items() if value is not None)
    for section, keys in directories.items():
        lines.append("")
        lines.append(f"[{section}]")
        lines.extend(f"{key}={value}" for key, value in keys.items())
    (theme_dir / "index.theme").write_text("\n".join(lines) + "\n", encoding="utf-8")

    for subdir, names in (icons or {}).items():
        target = theme_dir / subdir
        target.mkdir(parents=True, exist_ok=True)
        for name in names:
            (target / name).write_bytes(b"")
    return theme_dir


@pytest.fixture
def settings(tmp_path) -> LookupSettings:
    qs = QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)
    return LookupSettings(qs)


@pytest.fixture
def sandbox(tmp_path) -> dict[str, Path]:
    """An isolated home, data dir, config dir, pixmaps dir and PATH."""
    paths = {
        "home": tmp_path / "home",
        "share": tmp_path / "share",
        "config": tmp_path / "config",
        "pixmaps": tmp_path / "pixmaps",
        "bin": tmp_path / "bin",
    }
    for path in paths.values():
        path.mkdir(parents=True, exist_ok=True)
    return paths


@pytest.fixture
def sandbox_environ(sandbox) -> dict[str, str]:
    return {
        "HOME": str(sandbox["home"]),
        "XDG_DATA_HOME": str(sandbox["home"] / ".local" / "share"),
        "XDG_DATA_DIRS": str(sandbox["share"]),
        "XDG_CONFIG_HOME": str(sandbox["config"]),
        "PATH": str(sandbox["bin"]),
    }


@pytest.fixture
def make_finder(sandbox, sandbox_environ):
    def _make(settings: LookupSettings | None = None, **environ: str) -> ThemeFinder:
        env = dict(sandbox_environ)
        env.update(environ)
        return ThemeFinder(
            settings=settings,
            environ=env,
            pixmaps_dir=str(sandbox["pixmaps"]),
        )

    return _make
