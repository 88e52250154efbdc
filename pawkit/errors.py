"""Exception taxonomy shared by the install and removal engine.

Every error raised on purpose by *pawkit* derives from :class:`PawkitError`
so batch callers can report one package's failure and continue with the next.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence


class PawkitError(RuntimeError):
    """Base class for expected, user-reportable failures."""


class InvalidFormat(PawkitError):
    """Raised when a file does not start with a zip signature."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Invalid paw file: {path} is not a valid zip file")
        self.path = path


class NoInstallableFiles(PawkitError):
    """Raised when no archive entry maps to a destination."""

    def __init__(
        self,
        message: str = "No valid files found to install",
        *,
        examples: Sequence[str] = (),
    ) -> None:
        super().__init__(message)
        self.examples = list(examples)


class ConflictError(PawkitError):
    """Raised when existing files block an unforced install."""

    def __init__(self, conflicts: Iterable[Path]) -> None:
        self.conflicts = sorted(conflicts)
        super().__init__(
            f"Installation cancelled: {len(self.conflicts)} files already exist. "
            "Use -f or --force to overwrite."
        )


class InstallAborted(PawkitError):
    """Raised when the confirmation callback declines the install."""

    def __init__(self, message: str = "Installation cancelled by user") -> None:
        super().__init__(message)


class InstallIOError(PawkitError, OSError):
    """Wraps the first unrecoverable filesystem failure of a materialization.

    Files written before the failure stay on disk; nothing is rolled back and
    the manifest is not updated.
    """

    def __init__(self, path: Path, cause: BaseException) -> None:
        super().__init__(f"Failed to install file {path}: {cause}")
        self.path = path
        self.cause = cause


class NotFound(PawkitError):
    """Raised when a repository or manifest lookup misses."""


class NotInstalled(NotFound):
    """Raised when a remove/update target has no manifest record."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Paw {name} is not installed")
        self.name = name


class ToolError(PawkitError):
    """Raised by capability backends when an external tool fails."""


__all__ = [
    "PawkitError",
    "InvalidFormat",
    "NoInstallableFiles",
    "ConflictError",
    "InstallAborted",
    "InstallIOError",
    "NotFound",
    "NotInstalled",
    "ToolError",
]
