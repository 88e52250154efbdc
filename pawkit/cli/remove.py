"""Remove installed paws.

Exposed as ``pawkit delete`` with the aliases ``d``, ``remove`` and
``uninstall``.  Each package is removed from its manifest record alone; items
that could not be deleted are listed together with copy-pasteable commands.
"""

from __future__ import annotations

import click
import structlog

from pawkit.pipelines import remove_many
from pawkit.utils.display import echo_banner, echo_error, echo_hint, echo_success, echo_warning
from pawkit.utils.report import format_failure_summary

from ._common import engine_context

log = structlog.get_logger()


@click.command(
    name="delete",
    help="Remove one or more installed paws.",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument("paws", nargs=-1, required=True)
@click.pass_obj
def delete(ctx_obj, paws: tuple[str, ...]) -> None:  # noqa: D401
    """Entry-point for ``pawkit delete``.

    Args:
        ctx_obj: Click object populated by the root group.
        paws:    Installed package names.
    """
    engine = engine_context(ctx_obj)

    echo_banner("Remove paws")
    log.info("delete", targets=list(paws))
    result = remove_many(paws, engine)

    failures = []
    for name in result.succeeded:
        report = result.reports[name]
        if report.ok:
            echo_success(f"Removed {name}")
        else:
            echo_warning(f"Removed {name} with {len(report.failed)} leftover item(s)")
            failures.extend(report.failed)
    for name, exc in result.errors.items():
        echo_error(f"{name}: {exc}")

    # ------------------------- manual cleanup hints --------------------------
    for line in format_failure_summary(failures):
        echo_hint(line)

    if not result.ok or failures:
        raise SystemExit(1)
