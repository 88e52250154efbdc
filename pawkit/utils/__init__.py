"""
Public façade for the *utils* package.

Anything imported here becomes part of the *stable* public API.
Internal helpers live in their own modules and are **not** re-exported.
"""

from __future__ import annotations

# ─── locations ───────────────────────────────────────────────────────────
from .paths import EnginePaths, build_location_table, is_within

# ─── archive / scratch / cleanup ─────────────────────────────────────────
from .archive import has_zip_signature, looks_like_paw
from .scratch import scratch_directory
from .cleanup import leftovers, rm_dir, rm_file

# ─── reporting ───────────────────────────────────────────────────────────
from .report import format_failure_summary
from .display import echo_banner, echo_error, echo_hint, echo_item, echo_success, echo_warning

# ------------------------------------------------------------------------
__all__: list[str] = [
    "EnginePaths",
    "build_location_table",
    "is_within",
    "has_zip_signature",
    "looks_like_paw",
    "scratch_directory",
    "leftovers",
    "rm_dir",
    "rm_file",
    "format_failure_summary",
    "echo_banner",
    "echo_error",
    "echo_hint",
    "echo_item",
    "echo_success",
    "echo_warning",
]
