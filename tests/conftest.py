"""Pytest configuration for pawkit tests.

Every test runs against a throw-away home directory so nothing ever touches
the real ``~/.pawkit`` or user locations.
"""

import json
import stat
import zipfile
from pathlib import Path

import pytest

from pawkit.context import EngineContext
from pawkit.engines import Toolkit
from pawkit.pipelines import PathResolver
from pawkit.utils.paths import EnginePaths


@pytest.fixture
def home(tmp_path: Path, monkeypatch) -> Path:
    """Isolated home directory with ``$PAWKIT_HOME`` pointing below it."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("PAWKIT_HOME", str(home / ".pawkit"))
    for var in ("XDG_DATA_HOME", "XDG_CONFIG_HOME", "PAWKIT_LOG_DIR"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def resolver(home: Path) -> PathResolver:
    return PathResolver.for_user(EnginePaths.default(home), home=home, platform="linux")


@pytest.fixture
def engine(home: Path) -> EngineContext:
    """Engine context on the portable toolkit with linux locations."""
    return EngineContext.create(
        home=home,
        platform="linux",
        toolkit=Toolkit.portable("linux"),
    )


@pytest.fixture
def make_paw(tmp_path: Path):
    """Return a factory building ``.paw`` archives.

    The factory accepts ``files`` (archive path → text/bytes), optional
    ``symlinks`` (archive path → link target), optional ``metadata`` written
    to ``metadata/data.json`` and optional executable ``modes``.
    """
    out_dir = tmp_path / "paws"
    out_dir.mkdir()

    def _make(
        name: str,
        files: dict,
        *,
        symlinks: dict | None = None,
        metadata: dict | None = None,
        modes: dict | None = None,
    ) -> Path:
        archive = out_dir / f"{name}.paw"
        modes = modes or {}
        with zipfile.ZipFile(archive, "w") as zf:
            if metadata is not None:
                zf.writestr("metadata/data.json", json.dumps(metadata))
            for member, content in files.items():
                info = zipfile.ZipInfo(member)
                info.external_attr = (stat.S_IFREG | modes.get(member, 0o644)) << 16
                data = content.encode() if isinstance(content, str) else content
                zf.writestr(info, data)
            for member, target in (symlinks or {}).items():
                info = zipfile.ZipInfo(member)
                info.external_attr = (stat.S_IFLNK | 0o777) << 16
                zf.writestr(info, target)
        return archive

    return _make
