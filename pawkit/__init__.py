"""
pawkit package initialisation.

``pawkit.__version__`` is resolved at import-time from the installed
distribution metadata so that all runtime contexts (install, editable,
frozen app) surface the same canonical value.

Module attributes
-----------------
__version__ : str
    Semantic version derived from the installed wheel.
"""

from importlib.metadata import PackageNotFoundError, version

# --------------------------------------------------------------------------- #
# Version resolution
# --------------------------------------------------------------------------- #
try:
    __version__: str = version("pawkit")
except PackageNotFoundError:
    # Source tree without an installed wheel.
    __version__ = "0.0.0"

__all__: list[str] = ["__version__"]
