"""JSON-backed persistence for installed packages and repositories."""

from .manifest import ManifestStore
from .repos import RepoRecord, RepoStore

__all__ = ["ManifestStore", "RepoRecord", "RepoStore"]
