"""Update repositories and installed paws.

Exposed as ``pawkit update`` (aliases ``u`` / ``up``).

* ``pawkit update`` / ``pawkit update all`` – refresh every repository, then
  update every installed paw that has a newer version.
* ``pawkit update <paw>`` – update a single installed paw.
* ``pawkit update <repository>`` – refresh one repository.
"""

from __future__ import annotations

import click
import structlog

from pawkit.errors import PawkitError
from pawkit.pipelines import update_target
from pawkit.pipelines.update import ALL_TARGET
from pawkit.utils.display import echo_banner, echo_error, echo_success

from ._common import engine_context, install_options, update_confirm

log = structlog.get_logger()


@click.command(
    name="update",
    help="Update all paws and repositories, one paw, or one repository.",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument("target", default=ALL_TARGET)
@click.option("-f", "--force", is_flag=True, help="Update without asking.")
@click.pass_obj
def update(ctx_obj, target: str, force: bool) -> None:  # noqa: D401
    """Entry-point for ``pawkit update``.

    Args:
        ctx_obj: Click object populated by the root group.
        target:  ``all``, an installed paw or a repository name.
        force:   Skip the per-package prompt and overwrite conflicts.
    """
    engine = engine_context(ctx_obj)
    settings = ctx_obj["settings"]

    echo_banner(f"Update {target}")
    log.info("update", target=target, force=force)
    try:
        summary = update_target(
            target,
            engine,
            install_options(force, settings),
            confirm=update_confirm(force, settings),
        )
    except PawkitError as exc:
        raise click.ClickException(str(exc)) from exc

    for name in summary.repositories:
        echo_success(f"Refreshed repository {name}")
    for name in summary.updated:
        echo_success(f"Updated {name}")
    for name in summary.current:
        click.echo(f"{name} is already up-to-date")
    for name, exc in summary.errors.items():
        echo_error(f"{name}: {exc}")

    if target == ALL_TARGET:
        click.echo(
            f"Updated: {len(summary.updated)}, "
            f"Already up-to-date: {len(summary.current)}, "
            f"Errors: {len(summary.errors)}"
        )
    if summary.errors:
        raise SystemExit(1)
