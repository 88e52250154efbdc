"""Read and edit ``config.json``.

``pawkit config`` and ``pawkit config get`` print every setting,
``pawkit config get <key>`` prints one and ``pawkit config set <key> <value>``
stores a value (``true``/``false`` and numbers are recognised).
"""

from __future__ import annotations

import click

from pawkit.config import SettingsStore
from pawkit.errors import NotFound, PawkitError
from pawkit.utils.display import echo_success, echo_warning


@click.command(
    name="config",
    help="Show or change settings: config [get|set] [key] [value].",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument("action", type=click.Choice(["get", "set"]), default="get")
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.pass_obj
def config(ctx_obj, action: str, key: str | None, value: str | None) -> None:  # noqa: D401
    """Entry-point for ``pawkit config``."""
    store = SettingsStore(ctx_obj["paths"].config_file)

    if action == "get":
        try:
            if key is None:
                for name, current in store.load().model_dump().items():
                    click.echo(f"{name}: {current}")
                return
            click.echo(f"{key}: {store.get(key)}")
        except NotFound:
            echo_warning(f"Config key not found: {key}")
        except PawkitError as exc:
            raise click.ClickException(str(exc)) from exc
        return

    # --------------------------------- set -----------------------------------
    if not key:
        raise click.UsageError("config set requires a key")
    if value is None:
        raise click.UsageError("config set requires a value")
    try:
        if key not in store.load().model_dump():
            echo_warning(f"Creating new config key: {key}")
        stored = store.set(key, value)
    except PawkitError as exc:
        raise click.ClickException(str(exc)) from exc
    echo_success(f"Set {key} to {stored}")
