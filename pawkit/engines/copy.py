"""Whole-tree copy back-ends used for application bundles."""

from __future__ import annotations

import shutil
from pathlib import Path

import structlog

from pawkit.errors import ToolError
from pawkit.utils.process import run

from .base import BundleCopier

log = structlog.get_logger()


class DittoCopier(BundleCopier):
    """Copy with macOS ``ditto`` so resource forks and HFS compression survive."""

    name = "ditto"

    def __init__(self, binary: str = "ditto") -> None:
        self.binary = binary

    def copy_tree(self, source: Path, dest: Path) -> None:
        log.info("copy.ditto", source=str(source), dest=str(dest))
        run(
            [self.binary, "--preserve-hfs-compression", "--noqtn", str(source), str(dest)],
            "ditto",
        )


class PortableTreeCopier(BundleCopier):
    """Copy with :func:`shutil.copytree`, keeping symlinks as links."""

    name = "copytree"

    def copy_tree(self, source: Path, dest: Path) -> None:
        log.info("copy.portable", source=str(source), dest=str(dest))
        try:
            shutil.copytree(source, dest, symlinks=True, dirs_exist_ok=True)
        except (OSError, shutil.Error) as exc:
            raise ToolError(f"copytree failed: {exc}") from exc


__all__ = ["DittoCopier", "PortableTreeCopier"]
