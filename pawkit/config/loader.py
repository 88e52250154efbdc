"""
JSON settings loader.

:class:`SettingsStore` owns ``config.json``: it creates the file with
defaults on first use, validates it into :class:`Settings` and applies
``pawkit config set`` edits.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pawkit.errors import NotFound, PawkitError
from pawkit.store._json import read_document, write_document

from .schema import Settings

log = logging.getLogger(__name__)

_TRUE = {"true", "yes", "on"}
_FALSE = {"false", "no", "off"}


def coerce_value(raw: str) -> Any:
    """Turn CLI text into a JSON value (booleans and numbers recognised)."""
    text = raw.strip()
    lowered = text.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    for cast in (int, float):
        try:
            return cast(text)
        except ValueError:
            pass
    return text


class SettingsStore:
    """Persisted :class:`Settings`.

    Args:
        path: Location of ``config.json``.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> Settings:
        """Return the validated settings, writing defaults when absent.

        Raises:
            PawkitError: When the file holds invalid values.
        """
        if not self.path.exists():
            settings = Settings()
            write_document(self.path, settings.model_dump())
            log.debug("Created default settings at %s", self.path)
            return settings
        document = read_document(self.path, dict)
        try:
            return Settings.model_validate(document)
        except ValidationError as exc:
            raise PawkitError(f"Invalid settings in {self.path}: {exc}") from exc

    def get(self, key: str) -> Any:
        """Return the value stored under *key*.

        Raises:
            NotFound: For unknown keys.
        """
        values = self.load().model_dump()
        if key not in values:
            raise NotFound(f"Unknown setting {key}")
        return values[key]

    def set(self, key: str, raw: str) -> Any:
        """Store *raw* under *key* and return the coerced value.

        Raises:
            PawkitError: When the value fails validation.
        """
        values = self.load().model_dump()
        if key not in values:
            log.warning("Creating new setting %s", key)
        values[key] = coerce_value(raw)
        try:
            settings = Settings.model_validate(values)
        except ValidationError as exc:
            raise PawkitError(f"Invalid value for {key}: {raw}") from exc
        write_document(self.path, settings.model_dump())
        return settings.model_dump()[key]


__all__ = ["Settings", "SettingsStore", "coerce_value"]
