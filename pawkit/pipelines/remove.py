"""
Reverse an installation using only its manifest record.

Removal order: application bundles (whole trees), then the descriptor's
declared extra paths, then the remaining recorded files.  Failures never
stop the run; they are collected in the returned :class:`RemovalReport` and
the manifest record is deleted in every case.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional

from pawkit.engines import Toolkit
from pawkit.errors import PawkitError, ToolError
from pawkit.utils.cleanup import leftovers, rm_dir

from .bundles import group_destinations
from .types import BatchResult, ProgressEvent, RemovalFailure, RemovalReport

if TYPE_CHECKING:
    from pawkit.context import EngineContext

log = logging.getLogger(__name__)

STILL_PRESENT = "still present after removal"


def _delete_tree(path: Path, toolkit: Toolkit) -> Optional[str]:
    """Delete *path* with the preferred deleter, then the fallback.

    Returns:
        *None* on success, otherwise the last error text.
    """
    deleters = [toolkit.deleter]
    if toolkit.fallback_deleter is not toolkit.deleter:
        deleters.append(toolkit.fallback_deleter)

    reason: Optional[str] = None
    for deleter in deleters:
        try:
            deleter.delete_tree(path)
        except ToolError as exc:
            reason = str(exc)
            log.warning("%s could not remove %s: %s", deleter.name, path, exc)
            continue
        if not os.path.lexists(path):
            return None
        reason = STILL_PRESENT
    return reason


def _failures_for(path: Path, reason: Optional[str]) -> list[RemovalFailure]:
    return [
        RemovalFailure(path=p, reason=reason or STILL_PRESENT) for p in leftovers(path)
    ]


def _remove_declared(path: Path, ctx: EngineContext) -> list[RemovalFailure]:
    """Remove one declared extra path, escalating when allowed."""
    reason = _delete_tree(path, ctx.toolkit)
    if reason is None:
        return []

    privileged = ctx.toolkit.privileged
    if privileged is not None and ctx.resolver.is_escalated(path):
        log.warning("Retrying removal of %s with elevated privileges", path)
        try:
            privileged.delete_tree(path)
            reason = None
        except ToolError as exc:
            reason = str(exc)

    # Post-condition: report every survivor, the directory itself last.
    return _failures_for(path, reason)


def uninstall(name: str, ctx: EngineContext) -> RemovalReport:
    """Remove package *name*.

    Args:
        name: Manifest key.
        ctx: Engine context (manifest, resolver, toolkit, progress).

    Returns:
        :class:`RemovalReport`; ``report.ok`` is ``False`` when anything
        survived.

    Raises:
        NotInstalled: When *name* has no manifest record.
    """
    record = ctx.manifest.load(name)
    removed = 0
    failed: list[RemovalFailure] = []

    try:
        units, loose = group_destinations(record.files)

        # --- 1) application bundles ------------------------------------------
        for unit in units:
            if not os.path.lexists(unit.root):
                continue
            reason = _delete_tree(unit.root, ctx.toolkit)
            if reason is None:
                removed += 1
                ctx.progress(ProgressEvent(action="remove-bundle", path=unit.root))
            else:
                failed.extend(_failures_for(unit.root, reason))

        # --- 2) declared extra paths -----------------------------------------
        for declared in record.descriptor.extra_paths:
            path = ctx.resolver.expand_declared(declared)
            if path is None:
                log.warning("Ignoring deletePaths entry %r for %s", declared, name)
                continue
            if not os.path.lexists(path):
                log.debug("Declared path %s already gone", path)
                continue
            problems = _remove_declared(path, ctx)
            if problems:
                failed.extend(problems)
            else:
                removed += 1
                ctx.progress(ProgressEvent(action="remove-path", path=path))

        # --- 3) remaining files ----------------------------------------------
        for path in loose:
            if not os.path.lexists(path):
                continue
            reason = rm_dir(path)
            if reason is None:
                removed += 1
                ctx.progress(ProgressEvent(action="remove-file", path=path))
            else:
                failed.append(RemovalFailure(path=path, reason=reason))
    finally:
        ctx.manifest.delete(name)

    log.info("Removed %s: %d item(s) deleted, %d failure(s)", name, removed, len(failed))
    return RemovalReport(name=name, removed=removed, failed=tuple(failed))


def remove_many(names: Iterable[str], ctx: EngineContext) -> BatchResult:
    """Uninstall every name, collecting per-package errors."""
    result = BatchResult()
    for name in names:
        try:
            report = uninstall(name, ctx)
        except PawkitError as exc:
            log.error("Failed to remove %s: %s", name, exc)
            result.errors[name] = exc
            continue
        result.reports[name] = report
        result.succeeded.append(name)
    return result


__all__ = ["uninstall", "remove_many"]
