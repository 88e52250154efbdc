"""
Archive inspection: signature check, scratch extraction and entry listing.

:func:`inspect_archive` never touches a user location.  It copies the paw
into a caller-owned scratch directory, unpacks it with the toolkit's
preferred extractor (falling back to the in-process one), walks the result
without following symlinks and reads the embedded descriptor.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import stat
from pathlib import Path
from typing import Any, Optional

from pawkit.engines import Toolkit
from pawkit.errors import InstallIOError, InvalidFormat, ToolError
from pawkit.models import PackageDescriptor
from pawkit.utils.archive import has_zip_signature

from .resolve import METADATA_SEGMENT
from .types import Entry, EntryKind, InspectResult

log = logging.getLogger(__name__)

DESCRIPTOR_NAME = "data.json"
_JUNK_NAMES = {"__MACOSX", ".DS_Store"}


def _is_junk(name: str) -> bool:
    return name in _JUNK_NAMES or name.startswith("._")


def _is_text(value: str) -> bool:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


# ---------------------------------------------------------------------------
# 1 – extraction
# ---------------------------------------------------------------------------


def _reset_dir(path: Path) -> None:
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True)


def _extract(archive: Path, dest: Path, toolkit: Toolkit) -> str:
    """Extract with the preferred extractor, then the fallback; return its name."""
    _reset_dir(dest)
    try:
        toolkit.extractor.extract(archive, dest)
        return toolkit.extractor.name
    except ToolError as exc:
        if toolkit.fallback_extractor is toolkit.extractor:
            raise InvalidFormat(archive) from exc
        log.warning(
            "%s extraction failed, retrying with %s: %s",
            toolkit.extractor.name,
            toolkit.fallback_extractor.name,
            exc,
        )

    _reset_dir(dest)
    try:
        toolkit.fallback_extractor.extract(archive, dest)
    except ToolError as exc:
        raise InvalidFormat(archive) from exc
    return toolkit.fallback_extractor.name


# ---------------------------------------------------------------------------
# 2 – descriptor
# ---------------------------------------------------------------------------


def _read_descriptor(root: Path, base_name: str) -> tuple[Any, Optional[Path]]:
    """Return the parsed descriptor document and the file it came from."""
    candidates = (
        root / METADATA_SEGMENT / DESCRIPTOR_NAME,
        root / base_name / METADATA_SEGMENT / DESCRIPTOR_NAME,
    )
    for candidate in candidates:
        if candidate.is_symlink() or not candidate.is_file():
            continue
        try:
            return json.loads(candidate.read_text(encoding="utf-8")), candidate
        except (ValueError, OSError) as exc:
            log.warning("Could not parse %s, using default metadata: %s", candidate.name, exc)
            return None, candidate
    log.debug("No embedded metadata found in archive")
    return None, None


# ---------------------------------------------------------------------------
# 3 – walk
# ---------------------------------------------------------------------------


def _walk(
    current: Path,
    prefix: str,
    exclude: Optional[Path],
    entries: list[Entry],
    skipped: list[str],
) -> None:
    with os.scandir(current) as it:
        items = sorted(it, key=lambda d: d.name)

    for item in items:
        rel = f"{prefix}{item.name}"
        if _is_junk(item.name):
            skipped.append(rel)
            continue

        path = Path(item.path)
        if item.is_symlink():
            target = os.readlink(path)
            if not _is_text(target):
                log.warning("Skipping %s: link target is not valid UTF-8", rel)
                skipped.append(rel)
                continue
            resolved = (
                target
                if os.path.isabs(target)
                else os.path.normpath(os.path.join(os.path.dirname(path), target))
            )
            entries.append(
                Entry(
                    path=rel,
                    kind=EntryKind.SYMLINK,
                    source=path,
                    mode=stat.S_IMODE(item.stat(follow_symlinks=False).st_mode),
                    link_target=target,
                    resolved_target=resolved,
                )
            )
        elif item.is_dir(follow_symlinks=False):
            _walk(path, f"{rel}/", exclude, entries, skipped)
        elif item.is_file(follow_symlinks=False):
            if exclude is not None and path == exclude:
                continue
            entries.append(
                Entry(
                    path=rel,
                    kind=EntryKind.FILE,
                    source=path,
                    mode=stat.S_IMODE(item.stat(follow_symlinks=False).st_mode),
                )
            )
        else:
            skipped.append(rel)


# ---------------------------------------------------------------------------
# 4 – public entry point
# ---------------------------------------------------------------------------


def inspect_archive(
    archive: Path,
    scratch: Path,
    toolkit: Toolkit,
    *,
    name_hint: str | None = None,
) -> InspectResult:
    """Unpack *archive* into *scratch* and describe its content.

    The descriptor document itself (``metadata/data.json``) is consumed here
    and not listed among the entries.

    Args:
        archive: Paw file on disk.
        scratch: Existing directory owned by the caller; removed by the
            caller after installation.
        toolkit: Capability set providing the extractors.
        name_hint: Base name used for the nested descriptor lookup and as the
            default package name; defaults to the archive's stem.

    Returns:
        :class:`InspectResult` with File and Symlink entries in walk order.

    Raises:
        InvalidFormat: When the file is not a zip archive or cannot be
            extracted by any extractor.
        InstallIOError: When the archive cannot be staged in *scratch*.
    """
    archive = Path(archive)
    if not has_zip_signature(archive):
        raise InvalidFormat(archive)

    base_name = name_hint or archive.stem
    local = scratch / archive.name
    try:
        shutil.copyfile(archive, local)
    except OSError as exc:
        raise InstallIOError(archive, exc) from exc

    extract_dir = scratch / "extracted"
    extractor = _extract(local, extract_dir, toolkit)
    log.info("Extracted %s with %s", archive.name, extractor)

    document, descriptor_file = _read_descriptor(extract_dir, base_name)
    descriptor = PackageDescriptor.from_document(document, default_name=base_name)

    entries: list[Entry] = []
    skipped: list[str] = []
    _walk(extract_dir, "", descriptor_file, entries, skipped)
    log.debug("Archive %s: %d entries, %d junk", archive.name, len(entries), len(skipped))

    return InspectResult(
        archive=archive,
        extract_dir=extract_dir,
        entries=tuple(entries),
        descriptor=descriptor,
        extractor=extractor,
        skipped=tuple(skipped),
    )


__all__ = ["inspect_archive", "DESCRIPTOR_NAME"]
