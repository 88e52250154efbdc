"""Whole-document JSON persistence shared by the stores."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable

from pawkit.errors import PawkitError

log = logging.getLogger(__name__)


def read_document(path: Path, default: Callable[[], dict[str, Any]]) -> dict[str, Any]:
    """Return the JSON object stored at *path*, or ``default()`` when absent.

    Raises:
        PawkitError: When the file exists but is not a JSON object.
    """
    if not path.exists():
        return default()
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise PawkitError(f"Could not read {path}: {exc}") from exc
    if not isinstance(document, dict):
        raise PawkitError(f"Could not read {path}: expected a JSON object")
    return document


def write_document(path: Path, document: dict[str, Any]) -> None:
    """Atomically replace *path* with *document* (pretty-printed)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(document, fh, indent=2)
            fh.write("\n")
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise
    log.debug("Wrote %s", path)
