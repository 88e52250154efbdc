"""
Update service.

An update is "uninstall, then install the newest repository version".  There
is no rollback: when the reinstall fails after the removal, the package stays
uninstalled and the error propagates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Callable, Optional

from pawkit.errors import NotFound, PawkitError
from pawkit.io.repository import latest_version, refresh_repository
from pawkit.versions import compare_versions

from .install import install_from_repository
from .remove import uninstall
from .types import InstallOptions

if TYPE_CHECKING:
    from pawkit.context import EngineContext

log = logging.getLogger(__name__)

ALL_TARGET = "all"

#: ``(name, installed_version, available_version) -> consent``
UpdateConfirm = Callable[[str, str, str], bool]


@dataclass
class UpdateSummary:
    """Counts reported after ``update all`` (or a single package)."""

    updated: list[str] = field(default_factory=list)
    current: list[str] = field(default_factory=list)
    errors: dict[str, Exception] = field(default_factory=dict)
    repositories: list[str] = field(default_factory=list)

    @property
    def any_updated(self) -> bool:
        return bool(self.updated)


def update_package(
    name: str,
    ctx: EngineContext,
    options: Optional[InstallOptions] = None,
    *,
    confirm: Optional[UpdateConfirm] = None,
) -> bool:
    """Replace *name* with the newest repository version.

    Args:
        name: Installed package name.
        ctx: Engine context.
        options: Install switches for the reinstall.
        confirm: Asked once before anything is removed; *None* means yes.

    Returns:
        ``True`` when the package was reinstalled, ``False`` when it is up
        to date or the update was declined.

    Raises:
        NotInstalled: *name* is not installed.
        NotFound: No repository lists a version of *name*.
    """
    record = ctx.manifest.load(name)
    latest = latest_version(ctx.repos.all(), name, timeout=ctx.settings.http_timeout)

    if compare_versions(latest, record.version) <= 0:
        log.info("Paw %s is already at the latest version (%s)", name, record.version)
        return False

    log.info("Update available for %s: %s -> %s", name, record.version, latest)
    if confirm is not None and not confirm(name, record.version, latest):
        log.info("Update of %s cancelled", name)
        return False

    report = uninstall(name, ctx)
    if not report.ok:
        log.warning("%d item(s) of %s could not be removed before reinstall", len(report.failed), name)

    # Consent was given above.
    reinstall = replace(options or InstallOptions(), require_confirmation=False)
    install_from_repository(name, ctx, reinstall)
    return True


def update_all(
    ctx: EngineContext,
    options: Optional[InstallOptions] = None,
    *,
    confirm: Optional[UpdateConfirm] = None,
) -> UpdateSummary:
    """Refresh every repository, then try to update every installed package."""
    summary = UpdateSummary()
    timeout = ctx.settings.http_timeout

    for repo in ctx.repos.all():
        try:
            refresh_repository(ctx.repos, repo.name, timeout=timeout)
            summary.repositories.append(repo.name)
        except PawkitError as exc:
            log.warning("%s", exc)
            summary.errors[repo.name] = exc

    for name in ctx.manifest.names():
        try:
            if update_package(name, ctx, options, confirm=confirm):
                summary.updated.append(name)
            else:
                summary.current.append(name)
        except PawkitError as exc:
            log.error("Error updating %s: %s", name, exc)
            summary.errors[name] = exc

    log.info(
        "Update check completed. Updated: %d, already up-to-date: %d, errors: %d",
        len(summary.updated),
        len(summary.current),
        len(summary.errors),
    )
    return summary


def update_target(
    target: str,
    ctx: EngineContext,
    options: Optional[InstallOptions] = None,
    *,
    confirm: Optional[UpdateConfirm] = None,
) -> UpdateSummary:
    """Dispatch ``pawkit update <target>``.

    ``all`` updates everything, an installed package name updates that
    package, any other value is taken as a repository name to refresh.

    Raises:
        NotFound: *target* is neither installed nor a known repository.
    """
    if target == ALL_TARGET:
        return update_all(ctx, options, confirm=confirm)

    summary = UpdateSummary()
    if ctx.manifest.get(target) is not None:
        if update_package(target, ctx, options, confirm=confirm):
            summary.updated.append(target)
        else:
            summary.current.append(target)
        return summary

    try:
        refresh_repository(ctx.repos, target, timeout=ctx.settings.http_timeout)
    except NotFound as exc:
        raise NotFound(f"{target} is neither an installed paw nor a repository") from exc
    summary.repositories.append(target)
    return summary


__all__ = ["ALL_TARGET", "UpdateSummary", "update_package", "update_all", "update_target"]
