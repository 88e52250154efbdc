"""Install paws from local files or configured repositories.

Exposed as ``pawkit install`` (alias ``i``) and ``pawkit finstall`` (aliases
``fi`` / ``f``).  A target ending in ``.paw`` or naming an existing file is
installed from disk; anything else is looked up in the repositories.

Key flags
------------
* ``-f`` / ``--force`` – overwrite existing files without asking.
"""

from __future__ import annotations

import click
import structlog

from pawkit.errors import ConflictError, NoInstallableFiles, PawkitError
from pawkit.pipelines import install_many, install_target
from pawkit.utils.display import echo_banner, echo_error, echo_hint, echo_success

from ._common import engine_context, install_options

log = structlog.get_logger()


def _explain(target: str, exc: Exception) -> None:
    echo_error(f"{target}: {exc}")
    if isinstance(exc, NoInstallableFiles):
        for example in exc.examples:
            echo_hint(example)
    elif isinstance(exc, ConflictError):
        for path in exc.conflicts[:5]:
            echo_hint(str(path))


# ---------------------------------------------------------------------------
# Click commands
# ---------------------------------------------------------------------------
@click.command(
    name="install",
    help="Install one or more paws (files or repository names).",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument("paws", nargs=-1, required=True)
@click.option("-f", "--force", is_flag=True, help="Overwrite existing files.")
@click.pass_obj
def install(ctx_obj, paws: tuple[str, ...], force: bool) -> None:  # noqa: D401
    """Entry-point for ``pawkit install``.

    Args:
        ctx_obj: Click object populated by the root group.
        paws:    Paw files or repository package names.
        force:   Skip conflict checks and prompts.
    """
    engine = engine_context(ctx_obj)
    options = install_options(force, ctx_obj["settings"])

    echo_banner("Install paws")
    log.info("install", targets=list(paws), force=force)
    result = install_many(paws, engine, options)

    for name in result.succeeded:
        echo_success(f"Installed {name}")
    for target, exc in result.errors.items():
        _explain(target, exc)

    if not result.ok:
        raise SystemExit(1)


@click.command(
    name="finstall",
    help="Force-install a single paw, overwriting existing files.",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument("paw")
@click.pass_obj
def finstall(ctx_obj, paw: str) -> None:  # noqa: D401
    """Entry-point for ``pawkit finstall``."""
    engine = engine_context(ctx_obj)
    log.info("finstall", target=paw)
    try:
        record = install_target(paw, engine, install_options(True, ctx_obj["settings"]))
    except PawkitError as exc:
        raise click.ClickException(str(exc)) from exc
    echo_success(f"Installed {record.metadata.get('name', paw)} {record.version}")
