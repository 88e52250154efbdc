"""Expose the project-wide Click group for the ``pawkit`` script.

The module:

* declares a single Click *group* called :pyfunc:`main`;
* wires the global flags (verbosity, debug, plain-text log mirror);
* loads ``~/.pawkit/config.json`` so settings can supply flag defaults;
* sets up logging via :pyfunc:`pawkit.utils.logging.setup_logging`;
* registers every sub-command (and its aliases) lazily from sibling modules.

No state is mutated outside the Click context, which keeps the CLI layer
side effect free and easy to test.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import click

from pawkit import __version__
from pawkit.config import SettingsStore
from pawkit.errors import PawkitError
from pawkit.utils.logging import setup_logging
from pawkit.utils.paths import EnginePaths


class LazyGroup(click.Group):
    """Click group that imports sub-commands lazily."""

    def __init__(self, *args, **kwargs):
        """Initialise the base class and prepare the lazy registry."""
        self._lazy: dict[str, str] = {}
        self._primary: set[str] = set()
        super().__init__(*args, **kwargs)

    def set_lazy_command(self, name: str, target: str, *aliases: str) -> None:
        """Register *name* (and *aliases*) to be imported from ``target`` on first use."""
        self._lazy[name] = target
        self._primary.add(name)
        for alias in aliases:
            self._lazy[alias] = target

    def list_commands(self, ctx):  # noqa: D401 - Click signature
        """Return the primary names; aliases stay out of ``--help``."""
        return sorted((set(super().list_commands(ctx)) - set(self._lazy)) | self._primary)

    def get_command(self, ctx, cmd_name):  # noqa: D401 - Click signature
        """Resolve *cmd_name* from the eager map or import table."""
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd
        target = self._lazy.get(cmd_name)
        if not target:
            return None
        module_name, attr = target.split(":", 1)
        import importlib

        module = importlib.import_module(module_name)
        cmd = getattr(module, attr)
        self.add_command(cmd, name=cmd_name)
        return cmd


# ─────────────────────────────────────────────────────────────────────────────
# Context settings shared by the entire Click hierarchy
# ─────────────────────────────────────────────────────────────────────────────
_CTX: Dict[str, Any] = dict(
    help_option_names=["-h", "--help"],
    show_default=True,
    max_content_width=120,
)


# ─────────────────────────────────────────────────────────────────────────────
# Top-level Click *group*
# ─────────────────────────────────────────────────────────────────────────────
@click.group(
    cls=LazyGroup,
    context_settings=_CTX,
    help="""\b
pawkit – install and remove .paw packages.

""",
)
@click.version_option(__version__)
@click.option("-v", "--verbose", is_flag=True, help="INFO-level console output.")
@click.option("-d", "--debug", is_flag=True, help="DEBUG console output and logfile.")
@click.option(
    "--save-logfile",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Mirror console output into this plain-text file.",
)
@click.pass_context
def main(  # noqa: D401 – Click requires the callback to be named “main”.
    ctx: click.Context,
    verbose: bool,
    debug: bool,
    save_logfile: Path | None,
) -> None:
    """Root command executed by *pawkit*.

    Args:
        ctx: Click runtime context that carries objects across sub-commands.
        verbose: Emit INFO-level messages.
        debug: Emit DEBUG-level messages.
        save_logfile: Optional path for a plain-text log that mirrors console
            output.

    Raises:
        click.ClickException: When ``config.json`` cannot be read.
    """
    paths = EnginePaths.default()
    try:
        settings = SettingsStore(paths.config_file).load()
    except PawkitError as exc:
        raise click.ClickException(str(exc)) from exc

    verbose = verbose or settings.verbose_logging
    debug = debug or settings.debug

    # Logging must be configured before any output is produced ----------------
    setup_logging(
        log_dir=paths.log_dir,
        verbose=verbose,
        debug=debug,
        extra_text_log=save_logfile,
    )

    ctx.obj = {
        "paths": paths,
        "settings": settings,
        "verbose": verbose,
        "debug": debug,
    }


main.set_lazy_command("install", "pawkit.cli.install:install", "i")
main.set_lazy_command("finstall", "pawkit.cli.install:finstall", "fi", "f")
main.set_lazy_command("delete", "pawkit.cli.remove:delete", "d", "remove", "uninstall")
main.set_lazy_command("info", "pawkit.cli.info:info", "inf")
main.set_lazy_command("list", "pawkit.cli.info:list_installed", "ls")
main.set_lazy_command("addrepo", "pawkit.cli.repo:addrepo")
main.set_lazy_command("removerepo", "pawkit.cli.repo:removerepo")
main.set_lazy_command("update", "pawkit.cli.update:update", "u", "up")
main.set_lazy_command("config", "pawkit.cli.config:config")

# The public symbol exported by this module.  Required for ``python -m`` entry-points.
cli = main
__all__: list[str] = ["main"]
