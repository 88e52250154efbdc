"""Dot-separated version helpers used by descriptors and the update flow."""

from __future__ import annotations

import re

DEFAULT_VERSION = "0.0.0"

_VERSION_RE = re.compile(r"^\d+(\.\d+)*$")


def is_valid_version(value: object) -> bool:
    """Return ``True`` for strings such as ``"1"``, ``"1.2"`` or ``"1.2.3"``."""
    return isinstance(value, str) and bool(_VERSION_RE.match(value.strip()))


def _parts(value: str) -> list[int]:
    parts: list[int] = []
    for piece in str(value).strip().split("."):
        try:
            parts.append(int(piece))
        except ValueError:
            parts.append(0)
    return parts


def compare_versions(left: str, right: str) -> int:
    """Compare two versions numerically.

    Missing trailing components count as zero, so ``"1.2"`` equals
    ``"1.2.0"``.

    Args:
        left: First version string.
        right: Second version string.

    Returns:
        ``1`` when *left* is newer, ``-1`` when *right* is newer, else ``0``.
    """
    a, b = _parts(left), _parts(right)
    width = max(len(a), len(b))
    a += [0] * (width - len(a))
    b += [0] * (width - len(b))
    for x, y in zip(a, b):
        if x > y:
            return 1
        if x < y:
            return -1
    return 0


__all__ = ["DEFAULT_VERSION", "compare_versions", "is_valid_version"]
