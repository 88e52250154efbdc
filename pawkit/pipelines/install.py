"""
Install service: archive → plan → disk → manifest.

:func:`install_archive` runs the full pipeline for one local paw file;
:func:`install_from_repository` downloads the paw first and layers the
repository's metadata over the embedded descriptor.  :func:`install_many`
drives either of them for a list of CLI targets, reporting each failure and
carrying on with the next target.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional

from pawkit.errors import NotFound, PawkitError
from pawkit.io.repository import download_archive, locate_package
from pawkit.models import InstalledRecord
from pawkit.utils.archive import looks_like_paw
from pawkit.utils.scratch import scratch_directory

from .bundles import group_plan
from .inspect import inspect_archive
from .materialize import materialize
from .plan import build_plan
from .types import BatchResult, InstallOptions

if TYPE_CHECKING:
    from pawkit.context import EngineContext

log = logging.getLogger(__name__)


def install_archive(
    archive: Path,
    ctx: EngineContext,
    options: Optional[InstallOptions] = None,
    *,
    overrides: Optional[Mapping[str, Any]] = None,
    name_hint: Optional[str] = None,
) -> InstalledRecord:
    """Install the paw at *archive* and record it in the manifest.

    Args:
        archive: Local paw file.
        ctx: Engine context.
        options: Force / confirmation switches.
        overrides: Descriptor fields that win over the embedded document.
        name_hint: Default package name; the archive stem otherwise.

    Returns:
        The :class:`InstalledRecord` that was saved.

    Raises:
        InvalidFormat: Not a zip archive.
        NoInstallableFiles: No entry carries a location marker.
        ConflictError: Conflicts and nobody to confirm.
        InstallAborted: Confirmation declined.
        InstallIOError: Filesystem failure while writing.
    """
    options = options or InstallOptions()
    with scratch_directory() as scratch:
        inspected = inspect_archive(Path(archive), scratch, ctx.toolkit, name_hint=name_hint)
        descriptor = inspected.descriptor.merged(overrides)
        plan = build_plan(inspected.entries, ctx.resolver, descriptor=descriptor)
        if plan.conflicts:
            log.info("%d destination(s) already exist for %s", len(plan.conflicts), descriptor.name)
        grouping = group_plan(plan.entries)
        files = materialize(plan, grouping, ctx.toolkit, options, ctx.progress)

    record = InstalledRecord.create(descriptor, files)
    ctx.manifest.save(descriptor.name, record)
    log.info("Installed %s %s (%d files)", descriptor.name, descriptor.version, len(files))
    return record


def install_from_repository(
    name: str,
    ctx: EngineContext,
    options: Optional[InstallOptions] = None,
) -> InstalledRecord:
    """Download *name* from the first repository listing it, then install it.

    Raises:
        NotFound: No repository configured or none lists *name*.
    """
    repos = ctx.repos.all()
    if not repos:
        raise NotFound("No repositories configured. Add one with 'pawkit addrepo <url>'")
    timeout = ctx.settings.http_timeout
    package = locate_package(repos, name, timeout=timeout)
    with scratch_directory() as scratch:
        local = download_archive(package.download_url, scratch / f"{name}.paw", timeout=timeout)
        return install_archive(
            local,
            ctx,
            options,
            overrides=package.descriptor_overrides(),
            name_hint=name,
        )


def install_target(
    target: str,
    ctx: EngineContext,
    options: Optional[InstallOptions] = None,
) -> InstalledRecord:
    """Install a CLI target: a local ``.paw`` file or a repository package name."""
    if looks_like_paw(target):
        path = Path(target).expanduser()
        if not path.is_file():
            raise NotFound(f"Paw file not found: {path}")
        return install_archive(path, ctx, options)
    return install_from_repository(target, ctx, options)


def install_many(
    targets: Iterable[str],
    ctx: EngineContext,
    options: Optional[InstallOptions] = None,
) -> BatchResult:
    """Install every target, collecting per-target errors."""
    result = BatchResult()
    for target in targets:
        try:
            record = install_target(target, ctx, options)
        except PawkitError as exc:
            log.error("Failed to install %s: %s", target, exc)
            result.errors[target] = exc
            continue
        result.succeeded.append(str(record.metadata.get("name", target)))
    return result


__all__ = ["install_archive", "install_from_repository", "install_target", "install_many"]
