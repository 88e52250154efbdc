"""
Application-bundle grouping.

A destination belongs to a bundle when one of its segments ends in ``.app``
and is immediately followed by ``Contents``; the bundle root is the
destination truncated after the *shallowest* such segment, so nested helper
apps stay part of their outer bundle.  Both helpers are pure and return
immutable results.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Sequence

from pawkit.utils.paths import is_within

from .types import BundleUnit, Grouping, PlanEntry

BUNDLE_SUFFIX = ".app"
CONTENTS = "Contents"


def _bundle_index(parts: Sequence[str]) -> Optional[int]:
    for i in range(len(parts) - 1):
        if parts[i].endswith(BUNDLE_SUFFIX) and parts[i + 1] == CONTENTS:
            return i
    return None


def bundle_root(path: Path) -> Optional[Path]:
    """Return the ``.app`` root *path* lives in, or *None*."""
    idx = _bundle_index(path.parts)
    return Path(*path.parts[: idx + 1]) if idx is not None else None


def _source_root(members: Sequence[PlanEntry]) -> Optional[Path]:
    """Shallowest ``.app`` directory in the scratch tree holding every member."""
    parts = members[0].source.parts
    for i in range(len(parts) - 1):
        if not (parts[i].endswith(BUNDLE_SUFFIX) and parts[i + 1] == CONTENTS):
            continue
        candidate = Path(*parts[: i + 1])
        if all(is_within(m.source, candidate) for m in members):
            return candidate
    return None


def group_plan(entries: Iterable[PlanEntry]) -> Grouping:
    """Split plan entries into bundle units and loose entries.

    Args:
        entries: Plan entries in plan order.

    Returns:
        :class:`Grouping`; units keep first-seen order, every entry lands in
        exactly one unit or in ``loose``.
    """
    members: dict[Path, list[PlanEntry]] = {}
    loose: list[PlanEntry] = []
    for entry in entries:
        root = bundle_root(entry.destination)
        if root is None:
            loose.append(entry)
        else:
            members.setdefault(root, []).append(entry)

    units = tuple(
        BundleUnit(root=root, members=tuple(group), source_root=_source_root(group))
        for root, group in members.items()
    )
    return Grouping(units=units, loose=tuple(loose))


def group_destinations(
    paths: Iterable[Path | str],
) -> tuple[tuple[BundleUnit, ...], tuple[Path, ...]]:
    """Apply the bundle rule to plain destinations, as recorded in a manifest.

    Returns:
        ``(units, loose)`` where units carry only their root.
    """
    roots: dict[Path, None] = {}
    loose: list[Path] = []
    for raw in paths:
        path = Path(raw)
        root = bundle_root(path)
        if root is None:
            loose.append(path)
        else:
            roots.setdefault(root, None)
    return tuple(BundleUnit(root=r) for r in roots), tuple(loose)


__all__ = ["bundle_root", "group_plan", "group_destinations"]
