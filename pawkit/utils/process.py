"""Thin subprocess wrapper shared by the native capability backends."""

from __future__ import annotations

import subprocess
from typing import Sequence

from pawkit.errors import ToolError


def run(cmd: Sequence[str], kind: str) -> subprocess.CompletedProcess:
    """Run *cmd* and propagate a non-zero return code as :class:`ToolError`.

    Args:
        cmd: Full argument vector; never interpreted by a shell.
        kind: Short tool label used in the error message.

    Returns:
        The completed process (stdout/stderr captured as text).

    Raises:
        ToolError: When the binary is missing or exits non-zero.
    """
    try:
        result = subprocess.run(list(cmd), capture_output=True, text=True)
    except OSError as exc:
        raise ToolError(f"{kind} could not be started: {exc}") from exc
    if result.returncode != 0:
        raise ToolError(
            f"{kind} failed (code={result.returncode}):\n"
            f"stdout: {result.stdout}\n"
            f"stderr: {result.stderr}"
        )
    return result


__all__ = ["run"]
