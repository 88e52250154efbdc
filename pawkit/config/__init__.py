"""
Configuration package façade.

* :class:`Settings` – Pydantic model of ``config.json``.
* :class:`SettingsStore` – load / get / set with defaults on first use.
"""

from .loader import SettingsStore  # noqa: F401
from .schema import Settings  # noqa: F401

__all__: list[str] = ["Settings", "SettingsStore"]
