"""
Execute an :class:`InstallPlan` against the real filesystem.

Order of work:

1. Confirmation gate (conflicts, optional pre-install prompt).
2. Bundle units with a recovered source root are copied as whole trees.
3. Everything else is written entry by entry.

The first filesystem error aborts with :class:`InstallIOError`; files already
written stay in place and no manifest record is produced.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Optional

from pawkit.engines import Toolkit
from pawkit.errors import ConflictError, InstallAborted, InstallIOError, ToolError

from .types import BundleUnit, Grouping, InstallOptions, InstallPlan, PlanEntry, ProgressEvent

log = logging.getLogger(__name__)

EXECUTABLE_BITS = 0o111
ENTRY_POINT_MODE = 0o755


# ---------------------------------------------------------------------------
# 1 – confirmation gate
# ---------------------------------------------------------------------------


def confirm_gate(plan: InstallPlan, options: InstallOptions) -> None:
    """Raise unless the install may proceed.

    Raises:
        ConflictError: Conflicts, not forced, nobody to ask.
        InstallAborted: The confirmation callback declined.
    """
    if plan.conflicts and not options.force:
        if options.confirm is None:
            raise ConflictError(plan.conflicts)
        if not options.confirm(plan):
            raise InstallAborted()
    elif options.require_confirmation and options.confirm is not None:
        if not options.confirm(plan):
            raise InstallAborted()


# ---------------------------------------------------------------------------
# 2 – helpers
# ---------------------------------------------------------------------------


def _ensure_dir(path: Path, made: set[Path]) -> None:
    if path in made:
        return
    path.mkdir(parents=True, exist_ok=True)
    made.add(path)


def _clear(path: Path) -> None:
    """Remove whatever occupies *path* (file, link or directory)."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _copy_unit(
    unit: BundleUnit,
    toolkit: Toolkit,
    made: set[Path],
    emit: Callable[[ProgressEvent], None],
    *,
    replace: bool = False,
) -> bool:
    """Copy *unit* as a whole tree; return ``False`` to request per-file install.

    With *replace* an existing bundle at ``unit.root`` is removed first so no
    stale files from a previous version survive inside it.
    """
    try:
        _ensure_dir(unit.root.parent, made)
        if replace and os.path.lexists(unit.root):
            log.info("Replacing existing bundle %s", unit.root)
            _clear(unit.root)
    except OSError as exc:
        raise InstallIOError(unit.root, exc) from exc

    copiers = [toolkit.copier]
    if toolkit.fallback_copier is not toolkit.copier:
        copiers.append(toolkit.fallback_copier)

    used = None
    for copier in copiers:
        try:
            copier.copy_tree(unit.source_root, unit.root)
            used = copier
            break
        except ToolError as exc:
            log.warning("Bundle copy of %s with %s failed: %s", unit.root.name, copier.name, exc)
    if used is None:
        log.warning("Installing %s file by file", unit.root.name)
        return False

    entry_point = unit.entry_point
    if entry_point.is_file():
        try:
            os.chmod(entry_point, ENTRY_POINT_MODE)
        except OSError as exc:
            log.warning("Could not make %s executable: %s", entry_point, exc)
    emit(ProgressEvent(action="bundle", path=unit.root, detail=used.name))
    return True


def _install_entry(
    entry: PlanEntry,
    toolkit: Toolkit,
    made: set[Path],
    emit: Callable[[ProgressEvent], None],
) -> None:
    dest = entry.destination
    try:
        _ensure_dir(dest.parent, made)
        if entry.is_symlink:
            if os.path.lexists(dest):
                _clear(dest)
            os.symlink(entry.link_target or entry.resolved_target, dest)
        else:
            if os.path.lexists(dest) and (dest.is_symlink() or not dest.is_file()):
                _clear(dest)
            shutil.copyfile(entry.source, dest)
    except OSError as exc:
        raise InstallIOError(dest, exc) from exc

    if entry.is_symlink:
        try:
            toolkit.marker.mark(dest)
        except ToolError as exc:
            log.debug("Symlink marker skipped for %s: %s", dest, exc)
        emit(ProgressEvent(action="symlink", path=dest, detail=entry.link_target or ""))
        return

    mode = entry.mode
    if mode & EXECUTABLE_BITS:
        mode |= EXECUTABLE_BITS
    if mode:
        try:
            os.chmod(dest, mode)
        except OSError as exc:
            log.warning("Could not set permissions on %s: %s", dest, exc)
    emit(ProgressEvent(action="file", path=dest, detail=oct(mode)))


# ---------------------------------------------------------------------------
# 3 – public entry point
# ---------------------------------------------------------------------------


def materialize(
    plan: InstallPlan,
    grouping: Grouping,
    toolkit: Toolkit,
    options: InstallOptions,
    progress: Optional[Callable[[ProgressEvent], None]] = None,
) -> list[Path]:
    """Write *plan* to disk.

    Args:
        plan: Conflict-annotated plan from :func:`build_plan`.
        grouping: Bundle grouping of the same plan entries.
        toolkit: Capability set (bundle copier, symlink marker).
        options: Force / confirmation switches.
        progress: Optional receiver of one event per action.

    Returns:
        De-duplicated destinations in install order.

    Raises:
        ConflictError: See :func:`confirm_gate`.
        InstallAborted: See :func:`confirm_gate`.
        InstallIOError: On the first filesystem failure.
    """
    confirm_gate(plan, options)
    emit = progress or (lambda event: None)

    made: set[Path] = set()
    realized: list[Path] = []
    pending: list[PlanEntry] = []

    for unit in grouping.units:
        replace = any(m.destination in plan.conflicts for m in unit.members)
        if unit.source_root is not None and _copy_unit(
            unit, toolkit, made, emit, replace=replace
        ):
            realized.extend(m.destination for m in unit.members)
        else:
            pending.extend(unit.members)
    pending.extend(grouping.loose)

    for entry in pending:
        _install_entry(entry, toolkit, made, emit)
        realized.append(entry.destination)

    log.info("Materialized %d destination(s)", len(realized))
    return list(dict.fromkeys(realized))


__all__ = ["confirm_gate", "materialize"]
