"""Deletion primitives used by the remover.

The helpers only touch the filesystem; reporting to the user is left to the
callers.  Each attempted deletion is logged at *INFO* or *ERROR* level so the
rotating log keeps a breadcrumb of what an uninstall actually did.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional

log = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# rm_file / rm_dir – primitives
# ─────────────────────────────────────────────────────────────────────────────


def rm_file(path: Path) -> Optional[str]:
    """Unlink a file or symlink.

    Args:
        path: File to remove.  Symlinks are removed, never followed.

    Returns:
        *None* when the file vanished (or was already gone), otherwise the
        error text.
    """
    try:
        path.unlink()
        log.info("Deleted %s", path)
        return None
    except FileNotFoundError:
        return None
    except OSError as exc:
        log.error("Could not delete %s: %s", path, exc)
        return str(exc)


def rm_dir(path: Path) -> Optional[str]:
    """Recursively remove *path* via :func:`shutil.rmtree`.

    Mirrors :func:`rm_file`; a symlink to a directory is unlinked instead.
    """
    if path.is_symlink() or not path.is_dir():
        return rm_file(path)
    try:
        shutil.rmtree(path)
        log.info("Deleted directory %s", path)
        return None
    except OSError as exc:
        log.error("Could not delete %s: %s", path, exc)
        return str(exc)


# ─────────────────────────────────────────────────────────────────────────────
# Post-condition helpers
# ─────────────────────────────────────────────────────────────────────────────


def leftovers(path: Path) -> List[Path]:
    """Return everything still present at or below *path*.

    Directory contents are listed first, the directory itself last, so the
    result can be fed to a failure report verbatim.
    """
    if not os.path.lexists(path):
        return []
    if path.is_symlink() or not path.is_dir():
        return [path]
    found: list[Path] = []
    for root, dirs, files in os.walk(path, topdown=False):
        base = Path(root)
        found.extend(base / name for name in sorted(files))
        found.extend(base / name for name in sorted(dirs))
    found.append(path)
    return found


__all__ = ["rm_file", "rm_dir", "leftovers"]
