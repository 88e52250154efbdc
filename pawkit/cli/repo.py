"""Manage the repository list: ``pawkit addrepo`` and ``pawkit removerepo``."""

from __future__ import annotations

import click
import structlog

from pawkit.errors import PawkitError
from pawkit.io import add_repository
from pawkit.store import RepoStore
from pawkit.utils.display import echo_success

log = structlog.get_logger()


def _store(ctx_obj) -> RepoStore:
    return RepoStore(ctx_obj["paths"].repos_file)


@click.command(
    name="addrepo",
    help="Register a repository index (http(s):// or file:// URL).",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument("url")
@click.pass_obj
def addrepo(ctx_obj, url: str) -> None:  # noqa: D401
    """Entry-point for ``pawkit addrepo``."""
    log.info("addrepo", url=url)
    try:
        record = add_repository(
            _store(ctx_obj), url, timeout=ctx_obj["settings"].http_timeout
        )
    except PawkitError as exc:
        raise click.ClickException(str(exc)) from exc
    echo_success(f"Added repository {record.name}")


@click.command(
    name="removerepo",
    help="Unregister a repository by name.",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument("name")
@click.pass_obj
def removerepo(ctx_obj, name: str) -> None:  # noqa: D401
    """Entry-point for ``pawkit removerepo``."""
    log.info("removerepo", name=name)
    try:
        _store(ctx_obj).remove(name)
    except PawkitError as exc:
        raise click.ClickException(str(exc)) from exc
    echo_success(f"Removed repository {name}")
