"""
Domain-level data models shared across the engine, the stores and the CLI.

The module provides:

* **`PackageDescriptor`** – name, version, free-form attributes and the
  declared auxiliary removal paths of a paw.  Built leniently from whatever
  ``metadata/data.json`` document an archive carries.
* **`InstalledRecord`** – the persisted manifest entry written after a
  successful install and consumed by the remover.

Both models round-trip through the JSON documents owned by
:mod:`pawkit.store.manifest` using the original wire names
(``installDate``, ``metadata``, ``deletePaths``).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from pawkit.versions import DEFAULT_VERSION, is_valid_version

log = logging.getLogger(__name__)

#: Descriptor keys that are never part of the free-form attribute mapping.
_URL_KEYS = ("downloadUrl", "downloadURL")


class PackageDescriptor(BaseModel, frozen=True):
    """Identity and metadata of a paw.

    Attributes:
        name: Package name used as the manifest key.
        version: Dot-separated non-negative integers; ``"0.0.0"`` when the
            embedded document is missing or carries no valid version.
        attributes: The complete descriptor document (open mapping).
        extra_paths: Auxiliary paths to delete on uninstall (``deletePaths``).
    """

    name: str
    version: str = DEFAULT_VERSION
    attributes: dict[str, Any] = Field(default_factory=dict)
    extra_paths: tuple[str, ...] = ()

    # ------------------------------------------------------------------ #
    @classmethod
    def from_document(
        cls,
        document: Any,
        *,
        default_name: str,
    ) -> "PackageDescriptor":
        """Build a descriptor from a parsed JSON document.

        Malformed input never raises: non-mapping documents, non-string names
        and invalid versions fall back to defaults with a warning.

        Args:
            document: Parsed ``data.json`` content (any JSON value) or *None*.
            default_name: Name used when the document does not provide one,
                normally the archive's base filename.

        Returns:
            A fully populated descriptor.
        """
        if document is None:
            document = {}
        if not isinstance(document, Mapping):
            log.warning("Paw metadata is not a JSON object, using defaults")
            document = {}

        attrs = {str(k): v for k, v in document.items() if k not in _URL_KEYS}

        name = attrs.get("name")
        if not isinstance(name, str) or not name.strip():
            name = default_name
        name = name.strip()

        version = attrs.get("version")
        if isinstance(version, (int, float)) and not isinstance(version, bool):
            version = str(version)
        if not is_valid_version(version) or version == DEFAULT_VERSION:
            if version not in (None, DEFAULT_VERSION):
                log.warning("Paw metadata has invalid version %r, using %s", version, DEFAULT_VERSION)
            version = DEFAULT_VERSION
        version = version.strip()

        raw_paths = attrs.get("deletePaths") or []
        if isinstance(raw_paths, str):
            raw_paths = [raw_paths]
        if not isinstance(raw_paths, list):
            log.warning("Ignoring non-list deletePaths in metadata for %s", name)
            raw_paths = []
        extra = tuple(p for p in raw_paths if isinstance(p, str) and p.strip())

        attrs["name"] = name
        attrs["version"] = version
        return cls(name=name, version=version, attributes=attrs, extra_paths=extra)

    def merged(self, overrides: Mapping[str, Any] | None) -> "PackageDescriptor":
        """Return a descriptor with *overrides* layered over this document."""
        if not overrides:
            return self
        document = {**self.attributes, **dict(overrides)}
        return PackageDescriptor.from_document(document, default_name=self.name)

    def to_document(self) -> dict[str, Any]:
        """Return the JSON document persisted as the record's ``metadata``."""
        document = dict(self.attributes)
        document["name"] = self.name
        document["version"] = self.version
        if self.extra_paths:
            document["deletePaths"] = list(self.extra_paths)
        return document


class InstalledRecord(BaseModel, frozen=True):
    """Manifest entry for one installed package.

    Attributes:
        version: Installed version string.
        install_date: UTC timestamp of the install (``installDate``).
        files: Ordered, de-duplicated absolute destinations.
        metadata: Descriptor document as stored on disk.
    """

    model_config = ConfigDict(populate_by_name=True)

    version: str = DEFAULT_VERSION
    install_date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="installDate",
    )
    files: List[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def create(
        cls,
        descriptor: PackageDescriptor,
        files: List[Path],
        *,
        when: Optional[datetime] = None,
    ) -> "InstalledRecord":
        """Return a record for *descriptor* covering *files* (order kept)."""
        unique = list(dict.fromkeys(str(f) for f in files))
        return cls(
            version=descriptor.version,
            install_date=when or datetime.now(timezone.utc),
            files=unique,
            metadata=descriptor.to_document(),
        )

    @property
    def descriptor(self) -> PackageDescriptor:
        """Descriptor rebuilt from the stored metadata document."""
        name = self.metadata.get("name") if isinstance(self.metadata, dict) else None
        return PackageDescriptor.from_document(self.metadata, default_name=str(name or "unknown"))

    def to_document(self) -> dict[str, Any]:
        """Serialise with the on-disk key names."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["PackageDescriptor", "InstalledRecord"]
