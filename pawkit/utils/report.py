"""Human-readable summary of paths an uninstall could not remove.

The summary groups survivors by parent directory and ends with commands the
user can paste into a terminal.  On macOS the commands clear immutable flags
first (``chflags``), elsewhere a plain ``rm -rf`` is suggested.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, Protocol

#: Paths per ``sudo sh -c`` line, keeps each line a sane length.
GROUP_SIZE = 5
#: Directory-level ``sudo rm -rf`` suggestions on macOS.
MAX_DIR_HINTS = 3
#: ``rm -rf`` suggestions on other platforms.
MAX_PATH_HINTS = 5


class _Failure(Protocol):
    path: Path
    reason: str


def _chunks(items: list[Path], size: int) -> Iterable[list[Path]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


def format_failure_summary(
    failures: Iterable[_Failure],
    platform: str | None = None,
) -> list[str]:
    """Return the summary lines for *failures* (empty when nothing failed).

    Args:
        failures: Objects with ``path`` and ``reason`` attributes, typically
            :class:`pawkit.pipelines.types.RemovalFailure`.
        platform: ``sys.platform`` style identifier; defaults to the current one.

    Returns:
        Plain-text lines without trailing newlines.
    """
    items = list(failures)
    if not items:
        return []
    platform = platform or sys.platform

    by_dir: dict[Path, list[Path]] = {}
    for item in items:
        by_dir.setdefault(Path(item.path).parent, []).append(Path(item.path))

    lines = [f"Could not remove {len(items)} item(s):"]
    for directory, paths in by_dir.items():
        lines.append(f"Directory: {directory}")
        lines.extend(f"   - {p.name}" for p in paths)

    lines.append("Commands to manually remove these items:")
    paths = [Path(item.path) for item in items]
    if platform == "darwin":
        lines.append("   # To remove all items at once:")
        for group in _chunks(paths, GROUP_SIZE):
            quoted = " ".join(f'"{p}"' for p in group)
            lines.append(
                f"   sudo sh -c 'chflags -R 0 {quoted} && chmod -R 777 {quoted} && rm -Rf {quoted}'"
            )
        lines.append("   # Or for individual directories/files:")
        dirs = list(by_dir)
        lines.extend(f'   sudo rm -rf "{d}"' for d in dirs[:MAX_DIR_HINTS])
        if len(dirs) > MAX_DIR_HINTS:
            lines.append(f"   # ... and {len(dirs) - MAX_DIR_HINTS} more directories")
    else:
        lines.append("   # You may need administrator privileges to remove these items")
        lines.extend(f'   rm -rf "{p}"' for p in paths[:MAX_PATH_HINTS])
        if len(paths) > MAX_PATH_HINTS:
            lines.append(f"   # ... and {len(paths) - MAX_PATH_HINTS} more items")
    return lines


__all__ = ["format_failure_summary"]
