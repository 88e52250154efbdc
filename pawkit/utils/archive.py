"""
Helpers for identifying paw archives.

A paw is a plain zip file whatever its suffix, so the check reads the leading
magic bytes instead of trusting the file name::

    >>> has_zip_signature(Path("Hello.paw"))   # doctest: +SKIP
    True

The three accepted signatures are the local-file header, the empty-archive
end-of-central-directory record and the spanned-archive marker.
"""

from __future__ import annotations

from pathlib import Path

#: Recognised four-byte zip signatures.
ZIP_SIGNATURES: tuple[bytes, ...] = (
    b"PK\x03\x04",
    b"PK\x05\x06",
    b"PK\x07\x08",
)

#: Suffix a local target must carry to be treated as a file path by the CLI.
PAW_SUFFIX = ".paw"


def has_zip_signature(path: Path) -> bool:
    """Return *True* when *path* is a file starting with a zip signature.

    Args:
        path: Filesystem path to test.

    Returns:
        ``False`` for directories, missing files and unreadable files.
    """
    if not path.is_file():
        return False
    try:
        with open(path, "rb") as fh:
            head = fh.read(4)
    except OSError:
        return False
    return head in ZIP_SIGNATURES


def looks_like_paw(target: str | Path) -> bool:
    """Return *True* when a CLI target names a local paw file."""
    path = Path(target).expanduser()
    return path.suffix.lower() == PAW_SUFFIX or path.is_file()


__all__ = ["ZIP_SIGNATURES", "PAW_SUFFIX", "has_zip_signature", "looks_like_paw"]
