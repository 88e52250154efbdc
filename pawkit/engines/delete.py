"""Recursive deletion back-ends and the symlink attribute marker."""

from __future__ import annotations

import os
import shlex
import shutil
from pathlib import Path

import structlog

from pawkit.errors import ToolError
from pawkit.utils.process import run

from .base import Deleter, PrivilegedDeleter, SymlinkMarker

log = structlog.get_logger()

#: FinderInfo payload whose type field marks the file as a symlink.
FINDER_INFO_SYMLINK = "0000000000000000000400000000000000000000000000000000000000000000"


class NativeRmDeleter(Deleter):
    """Remove with ``rm -rf``."""

    name = "rm"

    def delete_tree(self, path: Path) -> None:
        log.info("delete.native", path=str(path))
        run(["rm", "-rf", str(path)], "rm")


class PortableDeleter(Deleter):
    """Remove with :func:`os.unlink` / :func:`shutil.rmtree`."""

    name = "rmtree"

    def delete_tree(self, path: Path) -> None:
        log.info("delete.portable", path=str(path))
        try:
            if path.is_symlink() or path.is_file():
                path.unlink()
            elif path.is_dir():
                shutil.rmtree(path)
        except OSError as exc:
            raise ToolError(f"could not remove {path}: {exc}") from exc


class SudoDeleter(PrivilegedDeleter):
    """Run the flag-clear / chmod / remove sequence through ``sudo``.

    ``chflags`` only exists on BSD-derived systems and is left out elsewhere.
    """

    name = "sudo"

    def __init__(self, *, clear_flags: bool = True) -> None:
        self.clear_flags = clear_flags

    def command(self, path: Path) -> list[str]:
        quoted = shlex.quote(str(path))
        steps = [f"chmod -R 777 {quoted}", f"rm -Rf {quoted}"]
        if self.clear_flags:
            steps.insert(0, f"chflags -R 0 {quoted}")
        return ["sudo", "sh", "-c", " && ".join(steps)]

    def delete_tree(self, path: Path) -> None:
        log.warning("delete.privileged", path=str(path))
        run(self.command(path), "sudo")


class XattrSymlinkMarker(SymlinkMarker):
    """Write ``com.apple.FinderInfo`` on the link itself via ``xattr -s``."""

    name = "xattr"

    def mark(self, link: Path) -> None:
        run(
            ["xattr", "-s", "-wx", "com.apple.FinderInfo", FINDER_INFO_SYMLINK, str(link)],
            "xattr",
        )


class NullSymlinkMarker(SymlinkMarker):
    """No-op marker for platforms without Finder metadata."""

    name = "none"

    def mark(self, link: Path) -> None:
        if not os.path.islink(link):
            log.debug("marker.not_a_link", path=str(link))


__all__ = [
    "FINDER_INFO_SYMLINK",
    "NativeRmDeleter",
    "PortableDeleter",
    "SudoDeleter",
    "XattrSymlinkMarker",
    "NullSymlinkMarker",
]
