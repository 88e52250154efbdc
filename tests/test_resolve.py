"""Marker resolution of archive paths and declared removal paths."""

from pathlib import Path

import pytest

from pawkit.pipelines import PathResolver
from pawkit.utils.paths import EnginePaths, build_location_table


def test_resolves_plain_marker(resolver, home):
    assert resolver.resolve("@documents/readme.txt") == home / "Documents" / "readme.txt"


def test_marker_lookup_is_case_insensitive_with_aliases(resolver, home):
    assert resolver.resolve("@Docs/a.txt") == home / "Documents" / "a.txt"
    assert resolver.resolve("@DOCUMENT/a.txt") == home / "Documents" / "a.txt"


def test_wrapper_directory_before_marker_is_ignored(resolver, home):
    dest = resolver.resolve("MyPaw/@desktop/shortcut.txt")
    assert dest == home / "Desktop" / "shortcut.txt"


def test_all_platforms_grouping_segment(resolver, home):
    dest = resolver.resolve("@all/@applications/Tool.app/Contents/Info.plist")
    assert dest == home / "Applications" / "Tool.app" / "Contents" / "Info.plist"


def test_metadata_goes_to_plugin_metadata(resolver, home):
    dest = resolver.resolve("metadata/icon.png")
    assert dest == home / ".pawkit" / "pluginmetadata" / "icon.png"
    assert resolver.is_metadata(dest)


def test_metadata_after_marker_is_an_ordinary_path(resolver, home):
    dest = resolver.resolve("@documents/metadata/notes.txt")
    assert dest == home / "Documents" / "metadata" / "notes.txt"


@pytest.mark.parametrize(
    "raw",
    [
        "readme.txt",
        "folder/readme.txt",
        "@documents",
        "@documents/",
        "@nowhere/file.txt",
        "@documents/../escape.txt",
        "metadata",
        "",
    ],
)
def test_rejected_paths(resolver, raw):
    assert resolver.resolve(raw) is None


def test_backslashes_and_leading_dots_are_normalised(resolver, home):
    assert resolver.resolve("./@documents\\sub\\a.txt") == home / "Documents" / "sub" / "a.txt"


def test_xdg_locations_on_linux(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    table = build_location_table(tmp_path, "linux")
    assert table["@applicationsupport"] == tmp_path / "data"
    assert table["@preferences"] == tmp_path / "cfg"


def test_darwin_locations(tmp_path):
    table = build_location_table(tmp_path, "darwin")
    assert table["@applications"] == Path("/Applications")
    assert table["@applicationsupport"] == tmp_path / "Library" / "Application Support"
    assert table["@preferences"] == tmp_path / "Library" / "Preferences"


# ---------------------------------------------------------------------------
# declared removal paths
# ---------------------------------------------------------------------------


def test_expand_declared_home_shorthand(resolver, home):
    assert resolver.expand_declared("~/.cache/mypaw") == home / ".cache" / "mypaw"


def test_expand_declared_marker(resolver, home):
    expected = home / ".local" / "share" / "MyPaw"
    assert resolver.expand_declared("@applicationsupport/MyPaw") == expected


def test_expand_declared_absolute(resolver, tmp_path):
    assert resolver.expand_declared(str(tmp_path / "x")) == tmp_path / "x"


@pytest.mark.parametrize("raw", ["", "~/", "@documents", "/", "relative/path", "~/../x"])
def test_expand_declared_refuses_dangerous_values(resolver, raw):
    assert resolver.expand_declared(raw) is None


def test_expand_declared_refuses_home(resolver, home):
    assert resolver.expand_declared(str(home)) is None


def test_escalated_class(tmp_path):
    resolver = PathResolver(
        build_location_table(tmp_path, "darwin"),
        EnginePaths(tmp_path / ".pawkit").metadata_dir,
        tmp_path,
    )
    base = tmp_path / "Library" / "Application Support"
    assert resolver.is_escalated(base / "MyPaw")
    assert not resolver.is_escalated(base)
    assert not resolver.is_escalated(tmp_path / "Documents" / "MyPaw")
