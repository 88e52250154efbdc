"""
Pydantic model that mirrors ``~/.pawkit/config.json``.

Unknown keys are kept (``extra="allow"``) so ``pawkit config set`` can store
values this version does not know about yet.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Settings(BaseModel):
    """User settings.

    Attributes:
        confirm_installation: Ask before every install.
        verbose_logging: Default for ``--verbose``.
        debug: Default for ``--debug``.
        allow_privileged_delete: Let the remover retry protected
            application-support paths through ``sudo``.
        http_timeout: Seconds before a repository request is abandoned.
    """

    model_config = ConfigDict(extra="allow")

    confirm_installation: bool = True
    verbose_logging: bool = False
    debug: bool = False
    allow_privileged_delete: bool = False
    http_timeout: float = Field(10.0, gt=0)


__all__ = ["Settings"]
