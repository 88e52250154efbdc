"""
Explicit run-time context threaded through the service layer.

Nothing in *pawkit* reads force/debug flags from globals or the environment;
the CLI builds one :class:`EngineContext` per invocation and one
:class:`InstallOptions` per install request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from pawkit.config import Settings, SettingsStore
from pawkit.engines import Toolkit, probe_toolkit
from pawkit.pipelines.resolve import PathResolver
from pawkit.pipelines.types import InstallOptions, InstallPlan, ProgressEvent
from pawkit.store import ManifestStore, RepoStore
from pawkit.utils.paths import EnginePaths

ProgressCallback = Callable[[ProgressEvent], None]
ConfirmCallback = Callable[[InstallPlan], bool]


def _ignore(event: ProgressEvent) -> None:
    return None


@dataclass(frozen=True)
class EngineContext:
    """Everything a pipeline needs besides its direct arguments."""

    paths: EnginePaths
    settings: Settings
    resolver: PathResolver
    toolkit: Toolkit
    manifest: ManifestStore
    repos: RepoStore
    progress: ProgressCallback = field(default=_ignore)

    @classmethod
    def create(
        cls,
        *,
        paths: EnginePaths | None = None,
        home: Path | None = None,
        platform: str | None = None,
        toolkit: Toolkit | None = None,
        progress: ProgressCallback | None = None,
    ) -> "EngineContext":
        """Assemble a context for the current user.

        Args:
            paths: Engine state locations; defaults to :meth:`EnginePaths.default`.
            home: Home directory for the location table.
            platform: ``sys.platform`` override.
            toolkit: Capability set; probed when omitted.
            progress: Receiver of :class:`ProgressEvent` objects.
        """
        paths = paths or EnginePaths.default(home)
        settings = SettingsStore(paths.config_file).load()
        if toolkit is None:
            toolkit = probe_toolkit(platform, allow_privileged=settings.allow_privileged_delete)
        return cls(
            paths=paths,
            settings=settings,
            resolver=PathResolver.for_user(paths, home=home, platform=platform),
            toolkit=toolkit,
            manifest=ManifestStore(paths.manifest_file),
            repos=RepoStore(paths.repos_file),
            progress=progress or _ignore,
        )


__all__ = ["EngineContext", "InstallOptions", "ProgressCallback", "ConfirmCallback"]
