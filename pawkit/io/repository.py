"""
Repository index access.

A repository is a JSON index reachable over ``http(s)://`` or ``file://``.
Two layouts are understood::

    {"repositoryName": "Main", "paws": {"Hello": {"downloadUrl": "...", "version": "1.0"}}}
    {"name": "Main", "apps": [{"pawName": "Hello", "downloadURL": "...", "version": "1.0"}]}

HTTP goes through :mod:`requests`; no exception handling happens below the
public helpers, which translate transport failures into :class:`PawkitError`.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

import requests
from pydantic import BaseModel, Field

from pawkit.errors import NotFound, PawkitError
from pawkit.store.repos import RepoRecord, RepoStore
from pawkit.versions import compare_versions

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
FILE_SCHEME = "file://"
URL_KEYS = ("downloadUrl", "downloadURL")
_CHUNK = 64 * 1024


class RepoPackage(BaseModel, frozen=True):
    """A package entry found in a repository index."""

    name: str
    repository: str = ""
    download_url: Optional[str] = None
    version: Optional[str] = None
    raw: dict[str, Any] = Field(default_factory=dict)

    def descriptor_overrides(self) -> dict[str, Any] | None:
        """Repository fields layered over the archive's embedded descriptor.

        Returns *None* when the index carries neither a version nor metadata.
        """
        nested = self.raw.get("metadata")
        if self.version is None and not nested:
            return None
        overrides: dict[str, Any] = {"name": self.name}
        if isinstance(nested, Mapping):
            overrides.update(nested)
        overrides.update(
            {k: v for k, v in self.raw.items() if k not in URL_KEYS and k != "metadata"}
        )
        overrides["name"] = self.name
        return overrides


# ---------------------------------------------------------------------------
# Index access
# ---------------------------------------------------------------------------


def _local_path(url: str) -> Path:
    return Path(url[len(FILE_SCHEME):]).expanduser()


def fetch_index(url: str, *, timeout: float = DEFAULT_TIMEOUT) -> dict[str, Any]:
    """Return the parsed repository index at *url*.

    Raises:
        PawkitError: On transport errors, HTTP errors or invalid JSON.
    """
    try:
        if url.startswith(FILE_SCHEME):
            path = _local_path(url)
            if not path.is_file():
                raise PawkitError(f"Repository file not found: {path}")
            data = json.loads(path.read_text(encoding="utf-8"))
        else:
            response = requests.get(url, timeout=timeout)
            response.raise_for_status()
            data = response.json()
    except requests.exceptions.RequestException as exc:
        raise PawkitError(f"Could not fetch repository {url}: {exc}") from exc
    except (OSError, ValueError) as exc:
        raise PawkitError(f"Could not parse repository {url}: {exc}") from exc

    if not isinstance(data, dict):
        raise PawkitError(f"Repository {url} is not a JSON object")
    return data


def find_package(index: Mapping[str, Any], name: str, repository: str = "") -> Optional[RepoPackage]:
    """Look *name* up in either index layout."""
    entry: Any = None
    paws = index.get("paws")
    if isinstance(paws, Mapping) and isinstance(paws.get(name), Mapping):
        entry = paws[name]
    elif isinstance(index.get("apps"), list):
        entry = next(
            (a for a in index["apps"] if isinstance(a, Mapping) and a.get("pawName") == name),
            None,
        )
    if entry is None:
        return None

    url = next((entry[k] for k in URL_KEYS if isinstance(entry.get(k), str) and entry[k]), None)
    version = entry.get("version")
    return RepoPackage(
        name=name,
        repository=repository,
        download_url=url,
        version=str(version) if version is not None else None,
        raw=dict(entry),
    )


def locate_package(
    repos: Iterable[RepoRecord],
    name: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> RepoPackage:
    """Return the first downloadable *name* across *repos*.

    Unreachable repositories are skipped with a warning.

    Raises:
        NotFound: When no repository lists a download URL for *name*.
    """
    for repo in repos:
        try:
            index = fetch_index(repo.url, timeout=timeout)
        except PawkitError as exc:
            log.warning("Skipping repository %s: %s", repo.name, exc)
            continue
        package = find_package(index, name, repo.name)
        if package is not None and package.download_url:
            log.info("Found %s in %s", name, repo.name)
            return package
    raise NotFound(f"Paw {name} not found in any repository")


def latest_version(
    repos: Iterable[RepoRecord],
    name: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """Return the highest version of *name* listed by any repository.

    Raises:
        NotFound: When no repository lists *name* with a version.
    """
    best: Optional[str] = None
    for repo in repos:
        try:
            index = fetch_index(repo.url, timeout=timeout)
        except PawkitError as exc:
            log.warning("Failed to fetch version from repository %s: %s", repo.name, exc)
            continue
        package = find_package(index, name, repo.name)
        if package is None or not package.version:
            continue
        if best is None or compare_versions(package.version, best) > 0:
            best = package.version
    if best is None:
        raise NotFound(f"Could not find latest version for paw {name} in any repository")
    return best


# ---------------------------------------------------------------------------
# Downloads
# ---------------------------------------------------------------------------


def download_archive(url: str, dest: Path, *, timeout: float = DEFAULT_TIMEOUT) -> Path:
    """Fetch the paw at *url* into *dest* and return *dest*.

    Raises:
        NotFound: For a missing ``file://`` source.
        PawkitError: On transport or HTTP errors.
    """
    if url.startswith(FILE_SCHEME):
        source = _local_path(url)
        if not source.is_file():
            raise NotFound(f"Local paw file not found: {source}")
        shutil.copyfile(source, dest)
        return dest

    log.info("Downloading %s", url)
    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            with open(dest, "wb") as fh:
                for chunk in response.iter_content(chunk_size=_CHUNK):
                    if chunk:
                        fh.write(chunk)
    except requests.exceptions.RequestException as exc:
        raise PawkitError(f"Failed to download {url}: {exc}") from exc
    return dest


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def add_repository(store: RepoStore, url: str, *, timeout: float = DEFAULT_TIMEOUT) -> RepoRecord:
    """Fetch *url* to learn the repository's name, then register it."""
    index = fetch_index(url, timeout=timeout)
    name = index.get("repositoryName") or index.get("name") or "Unknown Repository"
    return store.add(str(name), url)


def refresh_repository(store: RepoStore, name: str, *, timeout: float = DEFAULT_TIMEOUT) -> RepoRecord:
    """Check that repository *name* is reachable and stamp ``lastUpdated``.

    Raises:
        NotFound: For an unknown repository.
        PawkitError: When the index cannot be fetched.
    """
    record = store.get(name)
    try:
        fetch_index(record.url, timeout=timeout)
    except PawkitError as exc:
        raise PawkitError(f"Failed to update repository {name}: {exc}") from exc
    return store.touch(name)


__all__ = [
    "DEFAULT_TIMEOUT",
    "RepoPackage",
    "fetch_index",
    "find_package",
    "locate_package",
    "latest_version",
    "download_archive",
    "add_repository",
    "refresh_repository",
]
