"""
Typed, immutable value objects that circulate between pipeline stages.

Every value class inherits from :class:`pydantic.BaseModel` with ``frozen=True``
to guarantee hash-ability and prevent accidental mutation once the objects
have been created.  The install flow threads them in this order::

    Entry → PlanEntry / InstallPlan → BundleUnit / Grouping → ProgressEvent

and the removal flow produces :class:`RemovalReport`.  :class:`InstallOptions`
and the mutable :class:`BatchResult` accumulator are plain dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from pydantic import BaseModel

from pawkit.models import PackageDescriptor


class EntryKind(str, Enum):
    """Classification of one extracted archive member."""

    FILE = "file"
    SYMLINK = "symlink"
    DIRECTORY = "directory"


class Entry(BaseModel, frozen=True):
    """One unit extracted from an archive.

    Attributes
    ----------
    path
        Archive-relative path with ``/`` separators.
    kind
        File or Symlink (directories are walked, never emitted).
    source
        Absolute location inside the scratch extraction tree.
    mode
        Permission bits of the extracted member.
    link_target
        Original target string; present iff ``kind`` is Symlink.
    resolved_target
        Absolute resolution of a relative *link_target* against the link's
        own directory; equals *link_target* for absolute links.
    """

    path: str
    kind: EntryKind
    source: Path
    mode: int = 0o644
    link_target: Optional[str] = None
    resolved_target: Optional[str] = None

    @property
    def is_symlink(self) -> bool:
        return self.kind is EntryKind.SYMLINK


class InspectResult(BaseModel, frozen=True):
    """Return object of :func:`pawkit.pipelines.inspect.inspect_archive`."""

    archive: Path
    extract_dir: Path
    entries: tuple[Entry, ...]
    descriptor: PackageDescriptor
    extractor: str
    skipped: tuple[str, ...] = ()


class PlanEntry(BaseModel, frozen=True):
    """An :class:`Entry` bound to its resolved absolute destination."""

    source: Path
    destination: Path
    kind: EntryKind
    mode: int = 0o644
    link_target: Optional[str] = None
    resolved_target: Optional[str] = None

    @property
    def is_symlink(self) -> bool:
        return self.kind is EntryKind.SYMLINK


class InstallPlan(BaseModel, frozen=True):
    """Derived, ephemeral installation plan.

    Attributes
    ----------
    entries
        Unique-destination plan entries in archive walk order.
    conflicts
        Destinations that already exist outside the metadata directory.
    rejected
        Archive paths the resolver refused (diagnostics only).
    descriptor
        Package being installed, shown by confirmation prompts.
    """

    entries: tuple[PlanEntry, ...]
    conflicts: frozenset[Path] = frozenset()
    rejected: tuple[str, ...] = ()
    descriptor: Optional[PackageDescriptor] = None

    @property
    def destinations(self) -> list[Path]:
        return [e.destination for e in self.entries]


class BundleUnit(BaseModel, frozen=True):
    """Application bundle installed or removed as one transaction.

    ``source_root`` is the matching ``.app`` directory inside the scratch
    tree; *None* when it could not be recovered (file-by-file fallback) or
    when the unit was derived from manifest destinations only.
    """

    root: Path
    members: tuple[PlanEntry, ...] = ()
    source_root: Optional[Path] = None

    @property
    def entry_point(self) -> Path:
        """``<root>/Contents/MacOS/<bundle stem>``."""
        return self.root / "Contents" / "MacOS" / self.root.stem


class Grouping(BaseModel, frozen=True):
    """Output of :func:`pawkit.pipelines.bundles.group_plan`."""

    units: tuple[BundleUnit, ...] = ()
    loose: tuple[PlanEntry, ...] = ()


class ProgressEvent(BaseModel, frozen=True):
    """One successful materialization or removal action."""

    action: str
    path: Path
    detail: str = ""


class RemovalFailure(BaseModel, frozen=True):
    """A path the remover could not delete, with the reason."""

    path: Path
    reason: str


class RemovalReport(BaseModel, frozen=True):
    """Summary returned by :func:`pawkit.pipelines.remove.uninstall`."""

    name: str
    removed: int = 0
    failed: tuple[RemovalFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass(frozen=True)
class InstallOptions:
    """Per-request install switches.

    Attributes:
        force: Overwrite conflicting destinations without asking.
        confirm: Interactive gate; receives the plan, returns consent.
            *None* means nobody can be asked.
        require_confirmation: Consult *confirm* even when nothing conflicts.
    """

    force: bool = False
    confirm: Optional[Callable[[InstallPlan], bool]] = None
    require_confirmation: bool = False


@dataclass
class BatchResult:
    """Outcome of a multi-package install or removal.

    Errors are collected per package instead of aborting the batch.
    """

    succeeded: list[str] = field(default_factory=list)
    errors: dict[str, Exception] = field(default_factory=dict)
    reports: dict[str, RemovalReport] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors and all(r.ok for r in self.reports.values())


__all__ = [
    "EntryKind",
    "Entry",
    "InspectResult",
    "PlanEntry",
    "InstallPlan",
    "BundleUnit",
    "Grouping",
    "ProgressEvent",
    "RemovalFailure",
    "RemovalReport",
    "InstallOptions",
    "BatchResult",
]
