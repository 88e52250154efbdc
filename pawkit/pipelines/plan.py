"""Turn inspected entries into a de-duplicated, conflict-annotated plan."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from pawkit.errors import NoInstallableFiles
from pawkit.models import PackageDescriptor
from pawkit.utils.paths import is_within

from .resolve import METADATA_SEGMENT, PathResolver
from .types import Entry, InstallPlan, PlanEntry

log = logging.getLogger(__name__)

#: Rejected paths quoted in the "no installable files" message.
MAX_EXAMPLES = 3


def _mentions_metadata(archive_path: str) -> bool:
    return METADATA_SEGMENT in archive_path.replace("\\", "/").split("/")


def _no_files_error(rejected: list[str]) -> NoInstallableFiles:
    examples = [p for p in rejected if not _mentions_metadata(p)][:MAX_EXAMPLES]
    if not examples:
        return NoInstallableFiles()
    message = (
        "No valid files found to install. Files must be placed under a "
        "location marker directory such as @documents/, @desktop/ or "
        "@applications/. Found: " + ", ".join(examples)
    )
    return NoInstallableFiles(message, examples=examples)


def build_plan(
    entries: Iterable[Entry],
    resolver: PathResolver,
    metadata_dir: Path | None = None,
    *,
    descriptor: PackageDescriptor | None = None,
) -> InstallPlan:
    """Resolve *entries* and collect conflicts.

    The first entry resolving to a destination wins; later duplicates are
    dropped before the conflict check so each destination is checked once.

    Args:
        entries: Entries in archive walk order.
        resolver: Marker resolver.
        metadata_dir: Destinations below this directory never conflict;
            defaults to the resolver's metadata directory.
        descriptor: Package the plan belongs to, carried along for prompts.

    Returns:
        The immutable :class:`InstallPlan`.

    Raises:
        NoInstallableFiles: When no entry resolves.
    """
    metadata_dir = metadata_dir if metadata_dir is not None else resolver.metadata_dir

    planned: list[PlanEntry] = []
    seen: set[Path] = set()
    conflicts: set[Path] = set()
    rejected: list[str] = []

    for entry in entries:
        dest = resolver.resolve(entry.path)
        if dest is None:
            rejected.append(entry.path)
            continue
        if dest in seen:
            log.debug("Duplicate destination %s from %s skipped", dest, entry.path)
            continue
        seen.add(dest)
        planned.append(
            PlanEntry(
                source=entry.source,
                destination=dest,
                kind=entry.kind,
                mode=entry.mode,
                link_target=entry.link_target,
                resolved_target=entry.resolved_target,
            )
        )
        if os.path.lexists(dest) and not is_within(dest, metadata_dir):
            conflicts.add(dest)

    if not planned:
        raise _no_files_error(rejected)

    if rejected:
        log.info("%d archive path(s) without a location marker were ignored", len(rejected))
    return InstallPlan(
        entries=tuple(planned),
        conflicts=frozenset(conflicts),
        rejected=tuple(rejected),
        descriptor=descriptor,
    )


__all__ = ["build_plan"]
