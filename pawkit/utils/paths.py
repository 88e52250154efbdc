"""Per-user engine locations and the special-location marker table.

These helpers centralise every filesystem location *pawkit* derives from the
user's home directory so the rest of the package receives plain, already
resolved :class:`pathlib.Path` objects.

Two concepts live here:

* :class:`EnginePaths` – where *pawkit* keeps its own state
  (``~/.pawkit`` by default, ``$PAWKIT_HOME`` when set).
* :func:`build_location_table` – the read-only mapping from marker tokens such
  as ``@documents`` to absolute base directories.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

# --------------------------------------------------------------------------- #
# Engine state directories
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class EnginePaths:
    """Locations of the files *pawkit* owns.

    Attributes:
        config_dir: Root of the engine state (``~/.pawkit``).
    """

    config_dir: Path

    @classmethod
    def default(cls, home: Path | None = None) -> "EnginePaths":
        """Return paths under ``$PAWKIT_HOME`` or ``<home>/.pawkit``."""
        env_dir = os.environ.get("PAWKIT_HOME")
        if env_dir:
            return cls(config_dir=Path(env_dir).expanduser())
        base = home if home is not None else Path.home()
        return cls(config_dir=base / ".pawkit")

    @property
    def config_file(self) -> Path:
        return self.config_dir / "config.json"

    @property
    def repos_file(self) -> Path:
        return self.config_dir / "repos.json"

    @property
    def manifest_file(self) -> Path:
        return self.config_dir / "paws.json"

    @property
    def metadata_dir(self) -> Path:
        return self.config_dir / "pluginmetadata"

    @property
    def log_dir(self) -> Path:
        env_dir = os.environ.get("PAWKIT_LOG_DIR")
        if env_dir:
            return Path(env_dir).expanduser()
        return self.config_dir / "logs"


# --------------------------------------------------------------------------- #
# Special-location table
# --------------------------------------------------------------------------- #

#: Canonical marker for every accepted spelling. Keys are lower-case.
MARKER_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "@userhome": "@userhome",
        "@documents": "@documents",
        "@document": "@documents",
        "@docs": "@documents",
        "@applicationsupport": "@applicationsupport",
        "@desktop": "@desktop",
        "@downloads": "@downloads",
        "@applications": "@applications",
        "@userapplications": "@userapplications",
        "@library": "@library",
        "@preferences": "@preferences",
    }
)

#: Grouping segment that may precede a marker ("install on all platforms").
ALL_PLATFORMS_MARKER = "@all"

#: Marker whose base directory forms the escalated removal class.
ESCALATED_MARKER = "@applicationsupport"


def _xdg(var: str, home: Path, default: str) -> Path:
    value = os.environ.get(var)
    return Path(value).expanduser() if value else home / default


def build_location_table(
    home: Path | None = None,
    platform: str | None = None,
) -> Mapping[str, Path]:
    """Return the marker → base directory mapping for *platform*.

    macOS uses the Finder conventions (``~/Library/Application Support``,
    ``/Applications``); every other platform maps the same markers onto
    the XDG base directories.

    Args:
        home: Home directory; defaults to :meth:`Path.home`.
        platform: ``sys.platform`` style identifier; defaults to the
            running interpreter's platform.

    Returns:
        Read-only mapping keyed by canonical lower-case marker.
    """
    home = home if home is not None else Path.home()
    platform = platform or sys.platform

    if platform == "darwin":
        library = home / "Library"
        table = {
            "@userhome": home,
            "@documents": home / "Documents",
            "@applicationsupport": library / "Application Support",
            "@desktop": home / "Desktop",
            "@downloads": home / "Downloads",
            "@applications": Path("/Applications"),
            "@userapplications": home / "Applications",
            "@library": library,
            "@preferences": library / "Preferences",
        }
    else:
        data_home = _xdg("XDG_DATA_HOME", home, ".local/share")
        table = {
            "@userhome": home,
            "@documents": home / "Documents",
            "@applicationsupport": data_home,
            "@desktop": home / "Desktop",
            "@downloads": home / "Downloads",
            "@applications": home / "Applications",
            "@userapplications": home / "Applications",
            "@library": data_home,
            "@preferences": _xdg("XDG_CONFIG_HOME", home, ".config"),
        }
    return MappingProxyType(table)


def is_within(path: Path, base: Path) -> bool:
    """Return ``True`` when *path* equals *base* or lies below it."""
    try:
        path.relative_to(base)
    except ValueError:
        return False
    return True


__all__ = [
    "EnginePaths",
    "MARKER_ALIASES",
    "ALL_PLATFORMS_MARKER",
    "ESCALATED_MARKER",
    "build_location_table",
    "is_within",
]
