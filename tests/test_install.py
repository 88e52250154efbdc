"""End-to-end installs into an isolated home directory."""

import os
import stat
from dataclasses import replace

import pytest

from pawkit.context import EngineContext
from pawkit.engines import BundleCopier, Toolkit
from pawkit.engines.copy import PortableTreeCopier
from pawkit.errors import (
    ConflictError,
    InstallAborted,
    InvalidFormat,
    NoInstallableFiles,
    NotFound,
    ToolError,
)
from pawkit.pipelines import InstallOptions, install_archive, install_many, install_target


def test_sample_scenario(engine, make_paw, home):
    """A single marked file lands in Documents and is recorded."""
    paw = make_paw(
        "Sample",
        {"@documents/hello.txt": "Hello, world"},
        metadata={"name": "Sample", "version": "1.0.0"},
    )

    record = install_archive(paw, engine)

    target = home / "Documents" / "hello.txt"
    assert target.read_text() == "Hello, world"
    assert record.version == "1.0.0"
    assert record.files == [str(target)]
    stored = engine.manifest.load("Sample")
    assert stored.files == [str(target)]
    assert stored.metadata["name"] == "Sample"
    assert list(engine.manifest.list()) == ["Sample"]


def test_install_preserves_executable_bits(engine, make_paw, home):
    paw = make_paw(
        "Tool",
        {"@userhome/bin/tool": "#!/bin/sh\necho hi\n"},
        modes={"@userhome/bin/tool": 0o744},
    )

    install_archive(paw, engine)

    mode = stat.S_IMODE((home / "bin" / "tool").stat().st_mode)
    assert mode & 0o111 == 0o111


def test_install_recreates_symlinks(engine, make_paw, home):
    paw = make_paw(
        "Links",
        {"@documents/real.txt": "real"},
        symlinks={"@documents/alias.txt": "real.txt"},
    )

    record = install_archive(paw, engine)

    link = home / "Documents" / "alias.txt"
    assert link.is_symlink()
    assert os.readlink(link) == "real.txt"
    assert link.read_text() == "real"
    assert str(link) in record.files


def test_bundle_installed_as_whole_tree(engine, make_paw, home):
    paw = make_paw(
        "Tool",
        {
            "@applications/Tool.app/Contents/Info.plist": "<plist/>",
            "@applications/Tool.app/Contents/MacOS/Tool": "#!/bin/sh\n",
            "@applications/Tool.app/Contents/Resources/icon.icns": "icon",
        },
    )

    record = install_archive(paw, engine)

    app = home / "Applications" / "Tool.app"
    entry = app / "Contents" / "MacOS" / "Tool"
    assert entry.exists()
    assert stat.S_IMODE(entry.stat().st_mode) == 0o755
    assert len(record.files) == 3


def test_conflict_without_confirmation_raises(engine, make_paw, home):
    docs = home / "Documents"
    docs.mkdir()
    (docs / "a.txt").write_text("old")
    paw = make_paw("A", {"@documents/a.txt": "new"})

    with pytest.raises(ConflictError) as info:
        install_archive(paw, engine)

    assert info.value.conflicts == [docs / "a.txt"]
    assert (docs / "a.txt").read_text() == "old"
    assert engine.manifest.get("A") is None


def test_conflict_declined_aborts(engine, make_paw, home):
    docs = home / "Documents"
    docs.mkdir()
    (docs / "a.txt").write_text("old")
    paw = make_paw("A", {"@documents/a.txt": "new"})
    seen = []

    def decline(plan):
        seen.append(plan)
        return False

    with pytest.raises(InstallAborted):
        install_archive(paw, engine, InstallOptions(confirm=decline))

    assert seen and seen[0].conflicts
    assert (docs / "a.txt").read_text() == "old"


def test_force_overwrites(engine, make_paw, home):
    docs = home / "Documents"
    docs.mkdir()
    (docs / "a.txt").write_text("old")
    paw = make_paw("A", {"@documents/a.txt": "new"})

    install_archive(paw, engine, InstallOptions(force=True))

    assert (docs / "a.txt").read_text() == "new"


def test_required_confirmation_is_asked_without_conflicts(engine, make_paw, home):
    paw = make_paw("A", {"@documents/a.txt": "new"})

    with pytest.raises(InstallAborted):
        install_archive(
            paw,
            engine,
            InstallOptions(confirm=lambda plan: False, require_confirmation=True),
        )

    assert not (home / "Documents" / "a.txt").exists()


def test_progress_events_are_emitted(home, make_paw):
    events = []
    ctx = EngineContext.create(
        home=home,
        platform="linux",
        toolkit=Toolkit.portable("linux"),
        progress=events.append,
    )
    install_archive(make_paw("A", {"@documents/a.txt": "a"}), ctx)

    assert [e.action for e in events] == ["file"]
    assert events[0].path == home / "Documents" / "a.txt"


def test_invalid_and_empty_archives(engine, make_paw, tmp_path):
    bogus = tmp_path / "bogus.paw"
    bogus.write_bytes(b"nope")
    with pytest.raises(InvalidFormat):
        install_archive(bogus, engine)

    with pytest.raises(NoInstallableFiles):
        install_archive(make_paw("Empty", {"loose.txt": "x"}), engine)


def test_install_target_missing_file(engine, tmp_path):
    with pytest.raises(NotFound):
        install_target(str(tmp_path / "missing.paw"), engine)


def test_install_target_without_repositories(engine):
    with pytest.raises(NotFound, match="No repositories configured"):
        install_target("SomePaw", engine)


def test_install_many_continues_after_errors(engine, make_paw, tmp_path, home):
    good = make_paw("Good", {"@documents/good.txt": "g"}, metadata={"name": "Good"})
    bad = tmp_path / "bad.paw"
    bad.write_text("x")

    result = install_many([str(bad), str(good)], engine)

    assert result.succeeded == ["Good"]
    assert set(result.errors) == {str(bad)}
    assert not result.ok
    assert (home / "Documents" / "good.txt").exists()


def test_install_many_survives_damaged_archive(engine, make_paw, home):
    bad = make_paw("Bad", {"@documents/bad.txt": "b"}, symlinks={"@documents/link": b"\xff\xfe"})
    good = make_paw("Good", {"@documents/good.txt": "g"}, metadata={"name": "Good"})

    result = install_many([str(bad), str(good)], engine)

    assert result.succeeded == ["Good"]
    assert isinstance(result.errors[str(bad)], InvalidFormat)
    assert (home / "Documents" / "good.txt").read_text() == "g"


def test_force_replaces_directory_in_the_way(engine, make_paw, home):
    blocker = home / "Documents" / "a.txt"
    (blocker / "inner").mkdir(parents=True)

    install_archive(make_paw("A", {"@documents/a.txt": "new"}), engine, InstallOptions(force=True))

    assert blocker.is_file()
    assert blocker.read_text() == "new"


def test_install_recreates_absolute_symlinks(engine, make_paw, home, tmp_path):
    shared = tmp_path / "shared.txt"
    shared.write_text("shared")
    paw = make_paw(
        "Abs",
        {"@documents/real.txt": "real"},
        symlinks={"@documents/shared": str(shared)},
    )

    record = install_archive(paw, engine)

    link = home / "Documents" / "shared"
    assert link.is_symlink()
    assert os.readlink(link) == str(shared)
    assert link.read_text() == "shared"
    assert str(link) in record.files


# ---------------------------------------------------------------------------
# bundles
# ---------------------------------------------------------------------------

BUNDLE_FILES = {
    "@applications/Tool.app/Contents/Info.plist": "<plist/>",
    "@applications/Tool.app/Contents/MacOS/Tool": "#!/bin/sh\n",
}
BUNDLE_MODES = {"@applications/Tool.app/Contents/MacOS/Tool": 0o755}


class _FailingCopier(BundleCopier):
    name = "ditto"

    def copy_tree(self, source, dest):
        raise ToolError("ditto failed (code=1)")


def _context(home, toolkit, events):
    return EngineContext.create(
        home=home, platform="linux", toolkit=toolkit, progress=events.append
    )


def test_bundle_copy_falls_back_to_per_file_install(home, make_paw):
    failing = _FailingCopier()
    events = []
    ctx = _context(
        home, replace(Toolkit.portable("linux"), copier=failing, fallback_copier=failing), events
    )

    record = install_archive(make_paw("Tool", BUNDLE_FILES, modes=BUNDLE_MODES), ctx)

    app = home / "Applications" / "Tool.app"
    assert (app / "Contents" / "Info.plist").read_text() == "<plist/>"
    assert stat.S_IMODE((app / "Contents" / "MacOS" / "Tool").stat().st_mode) & 0o111
    assert [e.action for e in events] == ["file", "file"]
    assert len(record.files) == 2


def test_bundle_copy_uses_fallback_copier(home, make_paw):
    events = []
    ctx = _context(
        home,
        replace(
            Toolkit.portable("linux"), copier=_FailingCopier(), fallback_copier=PortableTreeCopier()
        ),
        events,
    )

    install_archive(make_paw("Tool", BUNDLE_FILES), ctx)

    assert [(e.action, e.detail) for e in events] == [("bundle", "copytree")]
    assert (home / "Applications" / "Tool.app" / "Contents" / "MacOS" / "Tool").exists()


def test_forced_bundle_reinstall_drops_stale_files(engine, make_paw, home):
    install_archive(make_paw("Tool", BUNDLE_FILES), engine)
    stale = home / "Applications" / "Tool.app" / "Contents" / "Resources" / "old.icns"
    stale.parent.mkdir()
    stale.write_text("old")

    record = install_archive(make_paw("Tool", BUNDLE_FILES), engine, InstallOptions(force=True))

    assert not stale.exists()
    assert (home / "Applications" / "Tool.app" / "Contents" / "Info.plist").exists()
    assert len(record.files) == 2
