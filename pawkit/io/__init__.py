"""Remote and local repository access."""

from .repository import (
    RepoPackage,
    add_repository,
    download_archive,
    fetch_index,
    find_package,
    latest_version,
    locate_package,
    refresh_repository,
)

__all__ = [
    "RepoPackage",
    "add_repository",
    "download_archive",
    "fetch_index",
    "find_package",
    "latest_version",
    "locate_package",
    "refresh_repository",
]
