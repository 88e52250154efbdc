"""Zip extraction back-ends."""

from __future__ import annotations

import os
import shutil
import stat
import zipfile
import zlib
from pathlib import Path, PurePosixPath

import structlog

from pawkit.errors import ToolError
from pawkit.utils.process import run

from .base import Extractor

log = structlog.get_logger()


class NativeUnzipExtractor(Extractor):
    """Extract with the system ``unzip`` binary.

    On macOS the ``-X -K`` flags additionally restore ownership and
    SUID/SGID bits the way Finder-created archives expect.
    """

    name = "unzip"

    def __init__(self, binary: str = "unzip", *, keep_attributes: bool = False) -> None:
        self.binary = binary
        self.keep_attributes = keep_attributes

    def extract(self, archive: Path, dest: Path) -> None:
        cmd = [self.binary]
        if self.keep_attributes:
            cmd += ["-X", "-K"]
        cmd += ["-o", "-q", str(archive), "-d", str(dest)]
        log.info("extract.native", archive=str(archive), dest=str(dest))
        run(cmd, "unzip")


def _member_path(dest: Path, name: str) -> Path | None:
    """Return the on-disk path for zip member *name* or *None* if unsafe."""
    pure = PurePosixPath(name.replace("\\", "/"))
    if pure.is_absolute() or ".." in pure.parts:
        return None
    parts = [p for p in pure.parts if p not in ("", ".")]
    if not parts:
        return None
    return dest.joinpath(*parts)


def _through_symlink(dest: Path, target: Path) -> bool:
    """Return *True* when a parent of *target* below *dest* is a symlink."""
    current = dest
    for part in target.relative_to(dest).parts[:-1]:
        current = current / part
        if current.is_symlink():
            return True
    return False


#: Everything :mod:`zipfile` raises on damaged, encrypted or exotic members.
_ZIP_ERRORS = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    OSError,
    EOFError,
    RuntimeError,
    ValueError,
    zlib.error,
)


class PortableZipExtractor(Extractor):
    """In-process extractor built on :mod:`zipfile`.

    Unlike :meth:`zipfile.ZipFile.extractall` it recreates symlinks stored
    with Unix mode bits and restores the permission bits of every member.
    Members with absolute or ``..`` paths, and members that would be written
    through a previously extracted symlink, are skipped.
    """

    name = "zipfile"

    def extract(self, archive: Path, dest: Path) -> None:
        log.info("extract.portable", archive=str(archive), dest=str(dest))
        try:
            with zipfile.ZipFile(archive) as zf:
                for info in zf.infolist():
                    self._extract_member(zf, info, dest)
        except _ZIP_ERRORS as exc:
            raise ToolError(f"zipfile failed: {exc}") from exc

    # ------------------------------------------------------------------ #
    @staticmethod
    def _extract_member(zf: zipfile.ZipFile, info: zipfile.ZipInfo, dest: Path) -> None:
        target = _member_path(dest, info.filename)
        if target is None or _through_symlink(dest, target):
            log.warning("extract.skip_unsafe", member=info.filename)
            return

        mode = info.external_attr >> 16
        if info.is_dir():
            target.mkdir(parents=True, exist_ok=True)
            return

        target.parent.mkdir(parents=True, exist_ok=True)
        if os.path.lexists(target):
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            else:
                target.unlink()

        if stat.S_ISLNK(mode):
            link_target = zf.read(info).decode("utf-8")
            os.symlink(link_target, target)
            return

        with zf.open(info) as src, open(target, "wb") as dst:
            shutil.copyfileobj(src, dst)
        perms = stat.S_IMODE(mode)
        if perms:
            os.chmod(target, perms)


__all__ = ["NativeUnzipExtractor", "PortableZipExtractor"]
