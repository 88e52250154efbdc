"""Registered package repositories (``repos.json``)."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pawkit.errors import NotFound, PawkitError

from ._json import read_document, write_document

log = logging.getLogger(__name__)

REPOSITORIES_KEY = "repositories"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RepoRecord(BaseModel, frozen=True):
    """One registered repository."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    url: str
    added_date: datetime = Field(default_factory=_now, alias="addedDate")
    last_updated: Optional[datetime] = Field(default=None, alias="lastUpdated")


def _empty() -> dict[str, Any]:
    return {REPOSITORIES_KEY: []}


class RepoStore:
    """CRUD over the repository list.

    Args:
        path: Location of ``repos.json``.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> List[RepoRecord]:
        raw = read_document(self.path, _empty).get(REPOSITORIES_KEY) or []
        records: List[RepoRecord] = []
        for item in raw:
            try:
                records.append(RepoRecord.model_validate(item))
            except ValidationError as exc:
                log.warning("Skipping malformed repository entry %r: %s", item, exc)
        return records

    def _write(self, records: List[RepoRecord]) -> None:
        write_document(
            self.path,
            {
                REPOSITORIES_KEY: [
                    r.model_dump(mode="json", by_alias=True, exclude_none=True)
                    for r in records
                ]
            },
        )

    # ------------------------------------------------------------------ #
    def all(self) -> List[RepoRecord]:
        """Return the repositories in registration order."""
        return self._read()

    def get(self, name: str) -> RepoRecord:
        """Return the repository called *name*.

        Raises:
            NotFound: When no repository has that name.
        """
        for record in self._read():
            if record.name == name:
                return record
        raise NotFound(f"Repository {name} not found")

    def add(self, name: str, url: str) -> RepoRecord:
        """Register *url* under *name*.

        Raises:
            PawkitError: When the URL is already registered.
        """
        records = self._read()
        if any(r.url == url for r in records):
            raise PawkitError(f"Repository {url} is already added")
        record = RepoRecord(name=name, url=url)
        records.append(record)
        self._write(records)
        log.info("Added repository %s (%s)", name, url)
        return record

    def remove(self, name: str) -> RepoRecord:
        """Unregister the repository called *name*.

        Raises:
            NotFound: When no repository has that name.
        """
        records = self._read()
        kept = [r for r in records if r.name != name]
        if len(kept) == len(records):
            raise NotFound(f"Repository {name} not found")
        self._write(kept)
        log.info("Removed repository %s", name)
        return next(r for r in records if r.name == name)

    def touch(self, name: str) -> RepoRecord:
        """Stamp ``lastUpdated`` on *name* and return the new record."""
        records = self._read()
        for i, record in enumerate(records):
            if record.name == name:
                records[i] = record.model_copy(update={"last_updated": _now()})
                self._write(records)
                return records[i]
        raise NotFound(f"Repository {name} not found")


__all__ = ["RepoRecord", "RepoStore"]
