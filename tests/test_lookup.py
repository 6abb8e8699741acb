"""Tests for themeicons.lookup."""

from __future__ import annotations

import asyncio
import logging
import os

import pytest

from conftest import write_theme
from themeicons.lookup import IconLookup, inheritance_chain, prefer_theme
from themeicons.models import IconHit
from themeicons.parser import ThemeParser

APPS = {"48x48/apps": {"Size": "48", "Context": "Apps", "Threshold": "2"}}


@pytest.fixture
def icons_root(sandbox):
    """The XDG data dir icon root of the sandbox."""
    return sandbox["share"] / "icons"


def _both(lookup: IconLookup, options, fallback: str) -> str:
    """Run both lookup forms, check they agree and return the shared result."""
    sync_result = lookup.get_icon_sync(options, fallback)
    async_result = asyncio.run(lookup.get_icon(options, fallback))
    assert sync_result == async_result
    return sync_result


class TestGetIcon:
    """Tests for IconLookup.get_icon_sync and get_icon."""

    def test_fallback_when_nothing_matches(self, make_finder, icons_root):
        """Test a name no theme provides resolves to the fallback."""
        write_theme(icons_root, "A", APPS, icons={"48x48/apps": ["gimp.png"]})
        lookup = IconLookup(finder=make_finder())
        assert _both(lookup, "missing-icon", "/fallback.png") == "/fallback.png"

    def test_fallback_when_no_themes_installed(self, make_finder):
        """Test an empty system resolves to the fallback."""
        lookup = IconLookup(finder=make_finder())
        assert _both(lookup, "missing-icon", "/fallback.png") == "/fallback.png"

    def test_first_theme_wins_without_preference(self, make_finder, icons_root):
        """Test discovery order decides when no theme is preferred."""
        a = write_theme(icons_root, "A", APPS, icons={"48x48/apps": ["x.png"]})
        write_theme(icons_root, "B", APPS, icons={"48x48/apps": ["x.png"]})
        lookup = IconLookup(finder=make_finder())
        assert _both(lookup, "x", "/fallback.png") == os.path.join(str(a), "48x48/apps", "x.png")

    def test_preferred_theme_moves_to_front(self, make_finder, settings, icons_root):
        """Test the preferred theme's hit beats earlier themes."""
        write_theme(icons_root, "A", APPS, icons={"48x48/apps": ["x.png"]})
        b = write_theme(icons_root, "B", APPS, icons={"48x48/apps": ["x.png"]})
        settings.preferred_theme = "B"
        lookup = IconLookup(finder=make_finder(settings), settings=settings)
        assert _both(lookup, "x", "/fallback.png") == os.path.join(str(b), "48x48/apps", "x.png")

    def test_preference_matches_directory_name_not_display_name(self, make_finder, settings, icons_root):
        """Test preference compares directory names, not Name values."""
        a = write_theme(icons_root, "A", APPS, icons={"48x48/apps": ["x.png"]}, Name="Alpha")
        write_theme(icons_root, "Z", APPS, icons={"48x48/apps": ["x.png"]}, Name="B")
        settings.preferred_theme = "B"
        lookup = IconLookup(finder=make_finder(settings), settings=settings)
        assert _both(lookup, "x", "/fallback.png") == os.path.join(str(a), "48x48/apps", "x.png")

    def test_structured_request(self, make_finder, icons_root):
        """Test context and size in a mapping narrow the search."""
        theme = write_theme(icons_root, "A", APPS, icons={"48x48/apps": ["gimp.png"]})
        lookup = IconLookup(finder=make_finder())
        options = {"iconName": "gimp", "context": "Apps", "size": 48}
        assert _both(lookup, options, "/fb.png") == os.path.join(str(theme), "48x48/apps", "gimp.png")
        options = {"iconName": "gimp", "context": "Status", "size": 48}
        assert _both(lookup, options, "/fb.png") == "/fb.png"

    def test_invalid_theme_excluded_without_affecting_others(self, make_finder, icons_root):
        """Test broken descriptors are skipped while valid themes still answer."""
        write_theme(icons_root, "Broken", APPS, icons={"48x48/apps": ["x.png"]}, Directories=None)
        good = write_theme(icons_root, "Good", APPS, icons={"48x48/apps": ["x.png"]})
        (icons_root / "Garbled").mkdir()
        (icons_root / "Garbled" / "index.theme").write_text("not an ini file", encoding="utf-8")
        lookup = IconLookup(finder=make_finder())
        assert _both(lookup, "x", "/fb.png") == os.path.join(str(good), "48x48/apps", "x.png")

    def test_settings_extensions_apply_to_bare_names(self, make_finder, settings, icons_root):
        """Test configured extensions apply to a bare icon name."""
        write_theme(icons_root, "A", APPS, icons={"48x48/apps": ["x.svg"]})
        settings.extensions = ["png"]
        lookup = IconLookup(finder=make_finder(settings), settings=settings)
        assert _both(lookup, "x", "/fb.png") == "/fb.png"

    def test_integral_float_size_matches(self, make_finder, icons_root):
        """Test a size of 48.0 finds the 48 pixel directory."""
        theme = write_theme(icons_root, "A", APPS, icons={"48x48/apps": ["gimp.png"]})
        lookup = IconLookup(finder=make_finder())
        options = {"iconName": "gimp", "size": 48.0}
        assert _both(lookup, options, "/fb.png") == os.path.join(str(theme), "48x48/apps", "gimp.png")

    @pytest.mark.parametrize(
        "options",
        [
            {"iconName": "gimp", "size": "large"},
            {"iconName": "gimp", "size": "48px"},
            {"iconName": "gimp", "size": 47.5},
            {"iconName": ""},
            {"ext": ["png"]},
            42,
        ],
    )
    def test_unusable_options_fall_back(self, make_finder, icons_root, options):
        """Test options that cannot form a request resolve to the fallback."""
        write_theme(icons_root, "A", APPS, icons={"48x48/apps": ["gimp.png"]})
        lookup = IconLookup(finder=make_finder())
        assert _both(lookup, options, "/fb.png") == "/fb.png"

    def test_unusable_options_are_logged(self, make_finder, caplog):
        """Test the fallback for unusable options is logged at INFO."""
        lookup = IconLookup(finder=make_finder())
        with caplog.at_level(logging.INFO, logger="themeicons.lookup"):
            assert lookup.get_icon_sync({"iconName": "gimp", "size": "large"}, "/fb.png") == "/fb.png"
        assert "unusable icon options" in caplog.text

    def test_single_extension_string(self, make_finder, icons_root):
        """Test ext given as one string is an extension, not a list of letters."""
        theme = write_theme(icons_root, "A", APPS, icons={"48x48/apps": ["gimp.p", "gimp.png"]})
        lookup = IconLookup(finder=make_finder())
        options = {"iconName": "gimp", "ext": "png"}
        assert _both(lookup, options, "/fb.png") == os.path.join(str(theme), "48x48/apps", "gimp.png")


class TestInheritance:
    """Tests for the optional Inherits chain search."""

    @pytest.fixture
    def family(self, icons_root):
        """Child inherits Parent; Another is listed first and matches on its own."""
        another = write_theme(icons_root, "Another", APPS, icons={"48x48/apps": ["x.png"]})
        write_theme(icons_root, "Child", APPS, icons={"48x48/apps": []}, Inherits="Parent")
        parent = write_theme(icons_root, "Parent", {"apps": {"Size": "16"}}, icons={"apps": ["x.png"]})
        write_theme(icons_root, "hicolor", APPS, icons={"48x48/apps": []})
        return another, parent

    def test_disabled_by_default(self, make_finder, settings, family):
        """Test a child theme's parents are ignored unless enabled."""
        another, _parent = family
        settings.preferred_theme = "Child"
        lookup = IconLookup(finder=make_finder(settings), settings=settings)
        assert lookup.follow_inherits is False
        assert _both(lookup, "x", "/fb.png") == os.path.join(str(another), "48x48/apps", "x.png")

    def test_inherited_hit_counts_for_child_theme(self, make_finder, settings, family):
        """Test a parent hit is credited to the preferred child theme."""
        _another, parent = family
        settings.preferred_theme = "Child"
        lookup = IconLookup(finder=make_finder(settings), settings=settings, follow_inherits=True)
        assert _both(lookup, "x", "/fb.png") == os.path.join(str(parent), "apps", "x.png")

    def test_settings_flag_enables_inheritance(self, make_finder, settings, family):
        """Test the follow_inherits setting turns traversal on."""
        settings.follow_inherits = True
        lookup = IconLookup(finder=make_finder(settings), settings=settings)
        assert lookup.follow_inherits is True

    def test_chain_order_and_cycles(self, tmp_path):
        """Test the chain is depth first, cycle safe and ends with hicolor."""
        a = write_theme(tmp_path, "a", {"d": {"Size": "16"}}, Inherits="b,hicolor")
        b = write_theme(tmp_path, "b", {"d": {"Size": "16"}}, Inherits="c,a")
        c = write_theme(tmp_path, "c", {"d": {"Size": "16"}})
        h = write_theme(tmp_path, "hicolor", {"d": {"Size": "16"}})
        themes = ThemeParser().parse_every_theme_sync(
            [p / "index.theme" for p in (a, b, c, h)]
        )
        by_name = {theme.dir_name: theme for theme in themes}
        chain = inheritance_chain(by_name["a"], by_name)
        assert [theme.dir_name for theme in chain] == ["a", "b", "c", "hicolor"]

    def test_hicolor_chain_is_itself(self, tmp_path):
        """Test hicolor is not appended to its own chain."""
        h = write_theme(tmp_path, "hicolor", {"d": {"Size": "16"}})
        theme = ThemeParser().parse_theme_sync(h / "index.theme")
        assert inheritance_chain(theme, {"hicolor": theme}) == [theme]


def test_prefer_theme_moves_only_matching_hit():
    """Test prefer_theme moves one hit and keeps the rest in order."""
    hits = [IconHit("/a/x.png", "A"), IconHit("/b/x.png", "B"), IconHit("/c/x.png", "C")]
    assert [hit.theme_name for hit in prefer_theme(hits, "C")] == ["C", "A", "B"]
    assert [hit.theme_name for hit in prefer_theme(hits, "Z")] == ["A", "B", "C"]
    assert [hit.theme_name for hit in prefer_theme(hits, None)] == ["A", "B", "C"]
