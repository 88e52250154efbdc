"""
Map namespaced archive paths onto absolute destinations.

The resolver implements a closed-world policy: an archive member is installed
only when its path contains one of the recognised ``@marker`` segments (or
belongs to the reserved ``metadata/`` area).  Everything else is rejected,
never guessed, so an untrusted archive cannot write to arbitrary locations.

Accepted shapes::

    @documents/notes.txt                 → ~/Documents/notes.txt
    MyPaw/@desktop/shortcut              → ~/Desktop/shortcut   (wrapper dir)
    @all/@applications/Tool.app/...      → /Applications/Tool.app/...
    metadata/icon.png                    → ~/.pawkit/pluginmetadata/icon.png
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Mapping, Optional

from pawkit.utils.paths import (
    ALL_PLATFORMS_MARKER,
    ESCALATED_MARKER,
    MARKER_ALIASES,
    EnginePaths,
    build_location_table,
    is_within,
)

log = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"^@\w+$")
_JUNK_SEGMENTS = {"", ".", "__MACOSX"}
METADATA_SEGMENT = "metadata"


def _segments(raw: str) -> list[str]:
    """Normalise separators, strip leading ``/`` and ``.`` and junk segments."""
    clean = raw.replace("\\", "/").lstrip("/.")
    return [s for s in clean.split("/") if s not in _JUNK_SEGMENTS]


class PathResolver:
    """Resolve archive paths against a :data:`SpecialLocationTable`.

    Args:
        table: Marker → base directory mapping (see
            :func:`pawkit.utils.paths.build_location_table`).
        metadata_dir: Per-user directory receiving ``metadata/`` members.
        home: Home directory used for ``~/`` shorthand in declared paths.
    """

    def __init__(self, table: Mapping[str, Path], metadata_dir: Path, home: Path) -> None:
        self.table = table
        self.metadata_dir = metadata_dir
        self.home = home

    @classmethod
    def for_user(
        cls,
        paths: EnginePaths,
        *,
        home: Path | None = None,
        platform: str | None = None,
    ) -> "PathResolver":
        """Build a resolver for the current (or given) user and platform."""
        home = home if home is not None else Path.home()
        return cls(build_location_table(home, platform), paths.metadata_dir, home)

    # ------------------------------------------------------------------ #
    @property
    def markers(self) -> list[str]:
        """Every accepted marker spelling, for user-facing messages."""
        return sorted(MARKER_ALIASES)

    def _lookup(self, token: str) -> Optional[Path]:
        canonical = MARKER_ALIASES.get(token.lower())
        return self.table.get(canonical) if canonical else None

    def resolve(self, archive_path: str) -> Optional[Path]:
        """Return the absolute destination for *archive_path* or *None*.

        Args:
            archive_path: Archive-relative member path.

        Returns:
            Destination path, or *None* when the path is rejected.
        """
        segments = _segments(archive_path)
        if not segments or ".." in segments:
            log.debug("Path rejected (empty or traversal): %s", archive_path)
            return None

        marker_idx = next((i for i, s in enumerate(segments) if _TOKEN_RE.match(s)), None)
        meta_idx = next((i for i, s in enumerate(segments) if s == METADATA_SEGMENT), None)

        if meta_idx is not None and (marker_idx is None or meta_idx < marker_idx):
            rest = segments[meta_idx + 1:]
            if not rest:
                return None
            return self.metadata_dir.joinpath(*rest)

        if marker_idx is None:
            log.debug("Path rejected (no @ marker): %s", archive_path)
            return None

        tail = segments[marker_idx:]
        if tail[0].lower() == ALL_PLATFORMS_MARKER:
            tail = tail[1:]
        if len(tail) < 2:
            return None

        base = self._lookup(tail[0])
        if base is None:
            log.debug("Path rejected (unknown marker %s): %s", tail[0], archive_path)
            return None
        return base.joinpath(*tail[1:])

    # ------------------------------------------------------------------ #
    def expand_declared(self, declared: str) -> Optional[Path]:
        """Expand a descriptor ``deletePaths`` item into an absolute path.

        Supports ``~/`` shorthand and the same marker substitution as
        :meth:`resolve`.  A bare marker or the home directory itself is
        refused so a descriptor can never ask for a whole base directory to
        be removed.
        """
        text = declared.strip().replace("\\", "/")
        if not text:
            return None

        if text.startswith("~/"):
            rest = [s for s in text[2:].split("/") if s not in _JUNK_SEGMENTS]
            if not rest or ".." in rest:
                return None
            return self.home.joinpath(*rest)

        segments = [s for s in text.split("/") if s not in _JUNK_SEGMENTS]
        if ".." in segments:
            return None
        marker_idx = next((i for i, s in enumerate(segments) if _TOKEN_RE.match(s)), None)
        if marker_idx is not None:
            tail = segments[marker_idx:]
            if tail[0].lower() == ALL_PLATFORMS_MARKER:
                tail = tail[1:]
            base = self._lookup(tail[0]) if tail else None
            if base is None or len(tail) < 2:
                return None
            return base.joinpath(*tail[1:])

        path = Path(text)
        if not path.is_absolute() or path in (Path("/"), self.home):
            return None
        return path

    def is_metadata(self, destination: Path) -> bool:
        """Return ``True`` for destinations inside the metadata directory."""
        return is_within(destination, self.metadata_dir)

    def is_escalated(self, path: Path) -> bool:
        """Return ``True`` for paths below the application-support base."""
        base = self.table.get(ESCALATED_MARKER)
        return base is not None and path != base and is_within(path, base)


__all__ = ["PathResolver", "METADATA_SEGMENT"]
