"""Helpers shared by the sub-command modules.

Only glue lives here: building the :class:`~pawkit.context.EngineContext`
from the Click object, translating progress events into log lines and the
interactive confirmation prompts.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

import click
import structlog

from pawkit.config import Settings
from pawkit.context import EngineContext
from pawkit.errors import PawkitError
from pawkit.pipelines.types import InstallOptions, InstallPlan, ProgressEvent
from pawkit.utils.display import echo_item, echo_warning

log = structlog.get_logger()

#: Destinations listed in the confirmation summary before eliding the rest.
PREVIEW_LIMIT = 10


# ---------------------------------------------------------------------------
# helper – confirmation prompt
# ---------------------------------------------------------------------------
def _ask_yes_no(msg: str) -> bool:
    """Interactive *Y/N* prompt.

    Args:
        msg: Prompt displayed before the ``[Y/N]`` suffix.

    Returns:
        ``True`` for an affirmative answer; ``False`` otherwise.
    """
    while True:
        ans = click.prompt(f"{msg} [Y/N]", default="", show_default=False).strip().lower()
        if ans in {"y", "yes"}:
            return True
        if ans in {"n", "no"}:
            return False
        click.echo("Please answer Y or N.", err=True)


# ---------------------------------------------------------------------------
# context / progress
# ---------------------------------------------------------------------------
def _progress_printer(verbose: bool) -> Callable[[ProgressEvent], None]:
    def _emit(event: ProgressEvent) -> None:
        log.debug(event.action, path=str(event.path), detail=event.detail)
        if verbose:
            echo_item(str(event.path), event.detail or event.action)

    return _emit


def engine_context(ctx_obj: Mapping[str, Any]) -> EngineContext:
    """Build the engine context for one CLI invocation.

    Raises:
        click.ClickException: When the state files cannot be read.
    """
    verbose = bool(ctx_obj.get("verbose", False) or ctx_obj.get("debug", False))
    try:
        return EngineContext.create(
            paths=ctx_obj.get("paths"),
            progress=_progress_printer(verbose),
        )
    except PawkitError as exc:
        raise click.ClickException(str(exc)) from exc


# ---------------------------------------------------------------------------
# install confirmation
# ---------------------------------------------------------------------------
def _show_plan(plan: InstallPlan) -> None:
    descriptor = plan.descriptor
    if descriptor is not None:
        click.echo(f"\nPaw: {descriptor.name} (version {descriptor.version})")
    destinations = plan.destinations
    click.echo(f"Files to install: {len(destinations)}")
    for dest in destinations[:PREVIEW_LIMIT]:
        click.echo(f"  {dest}")
    if len(destinations) > PREVIEW_LIMIT:
        click.echo(f"  ... and {len(destinations) - PREVIEW_LIMIT} more")
    if plan.conflicts:
        echo_warning(f"{len(plan.conflicts)} file(s) already exist and will be overwritten:")
        for dest in sorted(plan.conflicts)[:PREVIEW_LIMIT]:
            click.echo(f"  {dest}", err=True)


def _confirm_plan(plan: InstallPlan) -> bool:
    _show_plan(plan)
    return _ask_yes_no("\nProceed with installation?")


def install_options(force: bool, settings: Settings) -> InstallOptions:
    """Map ``--force`` and the ``confirm_installation`` setting to options.

    Forced installs and disabled confirmation never prompt.  Otherwise the
    plan is shown and the user is asked once per package.
    """
    if force:
        return InstallOptions(force=True)
    if not settings.confirm_installation:
        return InstallOptions()
    return InstallOptions(confirm=_confirm_plan, require_confirmation=True)


def update_confirm(force: bool, settings: Settings) -> Optional[Callable[[str, str, str], bool]]:
    """Return the per-package update prompt, or *None* to update silently."""
    if force or not settings.confirm_installation:
        return None

    def _ask(name: str, current: str, latest: str) -> bool:
        click.echo(f"\nUpdate available for {name}: {current} -> {latest}")
        return _ask_yes_no("Update now?")

    return _ask


__all__ = [
    "engine_context",
    "install_options",
    "update_confirm",
]
