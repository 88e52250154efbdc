"""Select the capability implementations for the running platform.

:func:`probe_toolkit` is called once per CLI invocation; the returned
:class:`Toolkit` travels inside the engine context so no pipeline ever checks
``sys.platform`` or ``shutil.which`` itself.
"""

from __future__ import annotations

import shutil
import sys
from dataclasses import dataclass
from typing import Callable, Optional

import structlog

from .base import BundleCopier, Deleter, Extractor, PrivilegedDeleter, SymlinkMarker
from .copy import DittoCopier, PortableTreeCopier
from .delete import (
    NativeRmDeleter,
    NullSymlinkMarker,
    PortableDeleter,
    SudoDeleter,
    XattrSymlinkMarker,
)
from .extract import NativeUnzipExtractor, PortableZipExtractor

log = structlog.get_logger()


@dataclass(frozen=True)
class Toolkit:
    """One implementation per capability, plus the portable fallbacks.

    Attributes:
        platform: ``sys.platform`` identifier the toolkit was probed for.
        extractor: Preferred extractor.
        fallback_extractor: Used when *extractor* fails.
        copier: Preferred bundle copier.
        fallback_copier: Used when *copier* fails (before per-file install).
        deleter: Preferred recursive deleter.
        fallback_deleter: Used when *deleter* fails.
        marker: Symlink attribute marker.
        privileged: Elevated deleter, or *None* when not enabled.
    """

    platform: str
    extractor: Extractor
    fallback_extractor: Extractor
    copier: BundleCopier
    fallback_copier: BundleCopier
    deleter: Deleter
    fallback_deleter: Deleter
    marker: SymlinkMarker
    privileged: Optional[PrivilegedDeleter] = None

    @classmethod
    def portable(cls, platform: str | None = None) -> "Toolkit":
        """Return a toolkit that never spawns a subprocess."""
        extractor = PortableZipExtractor()
        copier = PortableTreeCopier()
        deleter = PortableDeleter()
        return cls(
            platform=platform or sys.platform,
            extractor=extractor,
            fallback_extractor=extractor,
            copier=copier,
            fallback_copier=copier,
            deleter=deleter,
            fallback_deleter=deleter,
            marker=NullSymlinkMarker(),
        )


def probe_toolkit(
    platform: str | None = None,
    *,
    which: Callable[[str], Optional[str]] = shutil.which,
    allow_privileged: bool = False,
) -> Toolkit:
    """Return the best available :class:`Toolkit` for *platform*.

    Args:
        platform: ``sys.platform`` style identifier; defaults to the current one.
        which: Binary lookup, injectable for tests.
        allow_privileged: Enable the ``sudo`` deleter when ``sudo`` exists.

    Returns:
        Frozen toolkit.
    """
    platform = platform or sys.platform
    darwin = platform == "darwin"
    base = Toolkit.portable(platform)

    extractor: Extractor = base.extractor
    if which("unzip"):
        extractor = NativeUnzipExtractor(keep_attributes=darwin)

    copier: BundleCopier = base.copier
    deleter: Deleter = base.deleter
    marker: SymlinkMarker = base.marker
    if darwin:
        if which("ditto"):
            copier = DittoCopier()
        if which("rm"):
            deleter = NativeRmDeleter()
        if which("xattr"):
            marker = XattrSymlinkMarker()

    privileged: Optional[PrivilegedDeleter] = None
    if allow_privileged and which("sudo"):
        privileged = SudoDeleter(clear_flags=darwin)

    toolkit = Toolkit(
        platform=platform,
        extractor=extractor,
        fallback_extractor=base.fallback_extractor,
        copier=copier,
        fallback_copier=base.fallback_copier,
        deleter=deleter,
        fallback_deleter=base.fallback_deleter,
        marker=marker,
        privileged=privileged,
    )
    log.debug(
        "toolkit.probe",
        platform=platform,
        extractor=extractor.name,
        copier=copier.name,
        deleter=deleter.name,
        marker=marker.name,
        privileged=privileged.name if privileged else None,
    )
    return toolkit


__all__ = ["Toolkit", "probe_toolkit"]
