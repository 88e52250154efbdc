"""Temporary working areas that are always cleaned up."""

from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

log = logging.getLogger(__name__)


@contextmanager
def scratch_directory(prefix: str = "pawkit-") -> Iterator[Path]:
    """Yield a fresh temporary directory and remove it on every exit path.

    A failure to remove the directory is logged as a warning and never
    replaces the exception (or result) of the ``with`` body.

    Args:
        prefix: Name prefix of the directory created under the system
            temporary location.

    Yields:
        Absolute path of the directory.
    """
    path = Path(tempfile.mkdtemp(prefix=prefix))
    log.debug("Created scratch directory %s", path)
    try:
        yield path
    finally:
        try:
            shutil.rmtree(path)
            log.debug("Removed scratch directory %s", path)
        except OSError as exc:
            log.warning("Could not remove scratch directory %s: %s", path, exc)


__all__ = ["scratch_directory"]
