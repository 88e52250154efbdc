"""
Public façade for the *pipelines* sub-package.

This module exposes the high-level helpers used by the CLI:

* **Install flow**
    * :func:`inspect_archive` → :func:`build_plan` → :func:`group_plan`
      → :func:`materialize`
    * :func:`install_archive`, :func:`install_from_repository`,
      :func:`install_many`

* **Removal flow**
    * :func:`group_destinations` → :func:`uninstall`, :func:`remove_many`

* **Updates**
    * :func:`update_package`, :func:`update_all`, :func:`update_target`

Importing from ``pawkit.pipelines`` rather than individual modules keeps
call-sites stable even when underlying filenames change.
"""

from __future__ import annotations

# ────────────────────────────────────────────────────────────────────────────
# Public helpers – ordered as a typical install runs.
# (1)  Resolve → (2)  Inspect → (3)  Plan → (4)  Group → (5)  Materialize.
# ────────────────────────────────────────────────────────────────────────────
from .types import (
    BatchResult,
    BundleUnit,
    Entry,
    EntryKind,
    Grouping,
    InspectResult,
    InstallOptions,
    InstallPlan,
    PlanEntry,
    ProgressEvent,
    RemovalFailure,
    RemovalReport,
)
from .resolve import PathResolver
from .inspect import inspect_archive
from .plan import build_plan
from .bundles import group_destinations, group_plan
from .materialize import materialize
from .remove import remove_many, uninstall
from .install import install_archive, install_from_repository, install_many, install_target
from .update import UpdateSummary, update_all, update_package, update_target

__all__: list[str] = [
    # value objects
    "BatchResult",
    "BundleUnit",
    "Entry",
    "EntryKind",
    "Grouping",
    "InspectResult",
    "InstallOptions",
    "InstallPlan",
    "PlanEntry",
    "ProgressEvent",
    "RemovalFailure",
    "RemovalReport",
    "UpdateSummary",
    # install flow
    "PathResolver",
    "inspect_archive",
    "build_plan",
    "group_plan",
    "materialize",
    "install_archive",
    "install_from_repository",
    "install_target",
    "install_many",
    # removal / update
    "group_destinations",
    "uninstall",
    "remove_many",
    "update_package",
    "update_all",
    "update_target",
]
