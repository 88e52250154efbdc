"""Platform capability back-ends (extract, copy, delete, mark, escalate)."""

from .base import BundleCopier, Deleter, Extractor, PrivilegedDeleter, SymlinkMarker
from .probe import Toolkit, probe_toolkit

__all__ = [
    "Extractor",
    "BundleCopier",
    "Deleter",
    "SymlinkMarker",
    "PrivilegedDeleter",
    "Toolkit",
    "probe_toolkit",
]
