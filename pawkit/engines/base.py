from __future__ import annotations

"""Capability interfaces for platform-specific filesystem work.

Concrete implementations either shell out to a native tool (``unzip``,
``ditto``, ``rm``, ``xattr``, ``sudo``) or do the same job in-process.  The
interfaces are intentionally small so the pipelines never branch on the
platform themselves; :func:`pawkit.engines.probe.probe_toolkit` picks one
implementation per capability once per run.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class Extractor(ABC):
    """Unpack a zip archive into a directory."""

    name: str = "extractor"

    @abstractmethod
    def extract(self, archive: Path, dest: Path) -> None:
        """Extract *archive* into *dest*, preserving symlinks and modes.

        Args:
            archive: Zip file to unpack.
            dest: Existing, empty target directory.

        Raises:
            ToolError: When extraction fails.
        """
        raise NotImplementedError


class BundleCopier(ABC):
    """Copy an application bundle as a single tree."""

    name: str = "copier"

    @abstractmethod
    def copy_tree(self, source: Path, dest: Path) -> None:
        """Copy the directory *source* to *dest* (created when missing).

        Raises:
            ToolError: When the copy fails.
        """
        raise NotImplementedError


class Deleter(ABC):
    """Remove a file, symlink or whole directory tree."""

    name: str = "deleter"

    @abstractmethod
    def delete_tree(self, path: Path) -> None:
        """Remove *path* recursively; a missing *path* is not an error.

        Raises:
            ToolError: When the removal fails.
        """
        raise NotImplementedError


class SymlinkMarker(ABC):
    """Attach a platform attribute that flags a file as a symlink."""

    name: str = "marker"

    @abstractmethod
    def mark(self, link: Path) -> None:
        """Best-effort marking of *link*; callers log and ignore failures."""
        raise NotImplementedError


class PrivilegedDeleter(ABC):
    """Remove a protected tree with elevated privileges."""

    name: str = "privileged"

    @abstractmethod
    def delete_tree(self, path: Path) -> None:
        """Clear flags, open permissions and remove *path* recursively.

        Raises:
            ToolError: When the elevated removal fails.
        """
        raise NotImplementedError
