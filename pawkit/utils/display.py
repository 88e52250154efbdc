"""Utility functions to print formatted CLI messages for progress updates."""

from __future__ import annotations

import click

__all__ = [
    "echo_banner",
    "echo_item",
    "echo_success",
    "echo_warning",
    "echo_error",
    "echo_hint",
]


def echo_banner(text: str) -> None:
    """Print a colourful banner announcing a processing step.

    Args:
        text: Banner text.
    """
    click.secho(f"\n=== {text} ===", fg="cyan")


def echo_item(text: str, detail: str | None = None) -> None:
    """Echo a bullet, optionally followed by a dimmed detail."""
    if detail:
        click.echo(f"  • {text} " + click.style(f"({detail})", dim=True))
    else:
        click.echo(f"  • {text}")


def echo_success(text: str) -> None:
    """Echo a green success message prefixed with a tick.

    Args:
        text: Message to display.
    """
    click.secho(f"✓ {text}", fg="green")


def echo_warning(text: str) -> None:
    click.secho(f"! {text}", fg="yellow", err=True)


def echo_error(text: str) -> None:
    click.secho(f"✗ {text}", fg="red", err=True)


def echo_hint(text: str) -> None:
    """Echo a grey line, used for copy-pasteable commands."""
    click.secho(f"   {text}", fg="bright_black")
