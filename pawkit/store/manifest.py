"""
Installed-package manifest.

The manifest is a single JSON document::

    {"installed": {"<name>": {"version": ..., "installDate": ...,
                              "files": [...], "metadata": {...}}}}

Every mutation is a whole-document read-modify-write; there is no locking,
concurrent writers can lose updates.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from pawkit.errors import NotInstalled, PawkitError
from pawkit.models import InstalledRecord

from ._json import read_document, write_document

log = logging.getLogger(__name__)

INSTALLED_KEY = "installed"


def _empty() -> dict[str, Any]:
    return {INSTALLED_KEY: {}}


class ManifestStore:
    """Read and write :class:`InstalledRecord` entries keyed by package name.

    Args:
        path: Location of ``paws.json``.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    # ------------------------------------------------------------------ #
    def _read(self) -> dict[str, Any]:
        document = read_document(self.path, _empty)
        if not isinstance(document.get(INSTALLED_KEY), dict):
            document[INSTALLED_KEY] = {}
        return document

    @staticmethod
    def _parse(name: str, raw: Any) -> InstalledRecord:
        try:
            return InstalledRecord.model_validate(raw)
        except ValidationError as exc:
            raise PawkitError(f"Manifest entry for {name} is malformed: {exc}") from exc

    # ------------------------------------------------------------------ #
    def save(self, name: str, record: InstalledRecord) -> None:
        """Insert or replace the record for *name*."""
        document = self._read()
        document[INSTALLED_KEY][name] = record.to_document()
        write_document(self.path, document)
        log.info("Recorded %s %s (%d files)", name, record.version, len(record.files))

    def get(self, name: str) -> Optional[InstalledRecord]:
        """Return the record for *name* or *None*."""
        raw = self._read()[INSTALLED_KEY].get(name)
        return None if raw is None else self._parse(name, raw)

    def load(self, name: str) -> InstalledRecord:
        """Return the record for *name*.

        Raises:
            NotInstalled: When *name* has no record.
        """
        record = self.get(name)
        if record is None:
            raise NotInstalled(name)
        return record

    def delete(self, name: str) -> bool:
        """Drop the record for *name*; return whether one existed."""
        document = self._read()
        if document[INSTALLED_KEY].pop(name, None) is None:
            return False
        write_document(self.path, document)
        log.info("Removed manifest entry %s", name)
        return True

    def names(self) -> list[str]:
        return sorted(self._read()[INSTALLED_KEY])

    def list(self) -> Dict[str, InstalledRecord]:
        """Return every parseable record, sorted by name.

        Malformed entries are skipped with a warning.
        """
        records: Dict[str, InstalledRecord] = {}
        for name, raw in sorted(self._read()[INSTALLED_KEY].items()):
            try:
                records[name] = self._parse(name, raw)
            except PawkitError as exc:
                log.warning("%s", exc)
        return records


__all__ = ["ManifestStore", "INSTALLED_KEY"]
