"""Read-only views of the manifest: ``pawkit info`` and ``pawkit list``."""

from __future__ import annotations

import os

import click

from pawkit.errors import PawkitError
from pawkit.store import ManifestStore
from pawkit.utils.display import echo_banner

# Descriptor keys shown in the header rather than the attribute list.
_HEADER_KEYS = {"name", "version", "deletePaths"}


def _manifest(ctx_obj) -> ManifestStore:
    return ManifestStore(ctx_obj["paths"].manifest_file)


def _print_installed(store: ManifestStore) -> None:
    try:
        records = store.list()
    except PawkitError as exc:
        raise click.ClickException(str(exc)) from exc
    if not records:
        click.echo("No paws are currently installed.")
        return
    click.echo("Installed paws:")
    for name, record in sorted(records.items()):
        click.echo(f"  {name} (version {record.version})")


@click.command(
    name="list",
    help="List installed paws.",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.pass_obj
def list_installed(ctx_obj) -> None:  # noqa: D401
    """Entry-point for ``pawkit list``."""
    _print_installed(_manifest(ctx_obj))


@click.command(
    name="info",
    help="Show details of an installed paw (lists all paws without a name).",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument("name", required=False)
@click.pass_obj
def info(ctx_obj, name: str | None) -> None:  # noqa: D401
    """Entry-point for ``pawkit info``.

    Args:
        ctx_obj: Click object populated by the root group.
        name:    Installed package; omitted → same output as ``list``.
    """
    store = _manifest(ctx_obj)
    if not name:
        _print_installed(store)
        return

    try:
        record = store.load(name)
    except PawkitError as exc:
        raise click.ClickException(str(exc)) from exc

    descriptor = record.descriptor
    echo_banner(f"{descriptor.name} {descriptor.version}")
    click.echo(f"Installed: {record.install_date.isoformat()}")
    for key, value in sorted(descriptor.attributes.items()):
        if key not in _HEADER_KEYS:
            click.echo(f"{key}: {value}")
    if descriptor.extra_paths:
        click.echo("Extra removal paths:")
        for path in descriptor.extra_paths:
            click.echo(f"  {path}")

    click.echo(f"Files ({len(record.files)}):")
    for path in record.files:
        state = "present" if os.path.lexists(path) else "missing"
        click.echo(f"  [{state}] {path}")
