"""Repository indexes, repository installs and updates."""

import json
from pathlib import Path

import pytest
import requests

from pawkit.errors import NotFound, PawkitError
from pawkit.io import repository
from pawkit.io.repository import (
    add_repository,
    download_archive,
    fetch_index,
    find_package,
    latest_version,
    refresh_repository,
)
from pawkit.pipelines import install_target, update_package, update_target
from pawkit.store import RepoRecord


class _FakeResponse:
    def __init__(self, payload=None, *, status=200, body=b""):
        self.payload = payload
        self.status_code = status
        self.body = body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload

    def iter_content(self, chunk_size=1):
        yield self.body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def _write_index(path: Path, name: str, paws: dict) -> str:
    path.write_text(json.dumps({"repositoryName": name, "paws": paws}))
    return f"file://{path}"


# ---------------------------------------------------------------------------
# index access
# ---------------------------------------------------------------------------


def test_fetch_index_over_http(monkeypatch):
    calls = {}

    def fake_get(url, timeout):
        calls["url"] = url
        calls["timeout"] = timeout
        return _FakeResponse({"repositoryName": "Remote", "paws": {}})

    monkeypatch.setattr(requests, "get", fake_get)

    index = fetch_index("https://repo.example/index.json", timeout=3)

    assert index["repositoryName"] == "Remote"
    assert calls == {"url": "https://repo.example/index.json", "timeout": 3}


def test_fetch_index_http_error(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, timeout: _FakeResponse(status=404))
    with pytest.raises(PawkitError, match="Could not fetch repository"):
        fetch_index("https://repo.example/missing.json")


def test_fetch_index_rejects_non_object(tmp_path):
    path = tmp_path / "index.json"
    path.write_text("[1, 2]")
    with pytest.raises(PawkitError, match="not a JSON object"):
        fetch_index(f"file://{path}")


def test_find_package_both_layouts():
    modern = {"paws": {"Hello": {"downloadUrl": "u", "version": "1.0"}}}
    legacy = {"apps": [{"pawName": "Hello", "downloadURL": "u2", "version": 2}]}

    assert find_package(modern, "Hello").download_url == "u"
    legacy_pkg = find_package(legacy, "Hello")
    assert legacy_pkg.download_url == "u2"
    assert legacy_pkg.version == "2"
    assert find_package(modern, "Missing") is None


def test_descriptor_overrides():
    pkg = find_package(
        {"paws": {"Hello": {"downloadUrl": "u", "version": "1.5", "metadata": {"author": "Ann"}}}},
        "Hello",
    )
    overrides = pkg.descriptor_overrides()
    assert overrides == {"name": "Hello", "author": "Ann", "version": "1.5"}

    bare = find_package({"paws": {"Hello": {"downloadUrl": "u"}}}, "Hello")
    assert bare.descriptor_overrides() is None


def test_latest_version_across_repositories(tmp_path):
    a = _write_index(tmp_path / "a.json", "A", {"Hello": {"version": "1.2"}})
    b = _write_index(tmp_path / "b.json", "B", {"Hello": {"version": "1.10"}})
    repos = [
        RepoRecord(name="A", url=a),
        RepoRecord(name="Broken", url=f"file://{tmp_path / 'missing.json'}"),
        RepoRecord(name="B", url=b),
    ]

    assert latest_version(repos, "Hello") == "1.10"
    with pytest.raises(NotFound):
        latest_version(repos, "Other")


def test_download_archive_http(monkeypatch, tmp_path):
    monkeypatch.setattr(
        requests,
        "get",
        lambda url, stream, timeout: _FakeResponse(body=b"PK\x03\x04data"),
    )
    dest = download_archive("https://repo.example/a.paw", tmp_path / "a.paw")
    assert dest.read_bytes() == b"PK\x03\x04data"


def test_download_archive_missing_local(tmp_path):
    with pytest.raises(NotFound):
        download_archive(f"file://{tmp_path / 'nope.paw'}", tmp_path / "out.paw")


def test_add_and_refresh_repository(engine, tmp_path):
    url = _write_index(tmp_path / "index.json", "Main", {})

    record = add_repository(engine.repos, url)
    assert record.name == "Main"

    refreshed = refresh_repository(engine.repos, "Main")
    assert refreshed.last_updated is not None

    (tmp_path / "index.json").unlink()
    with pytest.raises(PawkitError, match="Failed to update repository Main"):
        refresh_repository(engine.repos, "Main")


def test_add_repository_unknown_name(engine, tmp_path):
    path = tmp_path / "index.json"
    path.write_text("{}")
    assert add_repository(engine.repos, f"file://{path}").name == "Unknown Repository"


# ---------------------------------------------------------------------------
# install / update through a repository
# ---------------------------------------------------------------------------


@pytest.fixture
def published(engine, make_paw, tmp_path):
    """Publish ``Hello`` 1.0 in a file:// repository and return a republisher."""
    index = tmp_path / "index.json"

    def publish(version: str, text: str) -> None:
        paw = make_paw(
            f"Hello-{version}",
            {"@documents/hello.txt": text},
            metadata={"name": "Hello", "version": version},
        )
        _write_index(
            index,
            "Main",
            {"Hello": {"downloadUrl": f"file://{paw}", "version": version}},
        )

    publish("1.0", "v1")
    add_repository(engine.repos, f"file://{index}")
    return publish


def test_install_by_name(engine, published, home):
    record = install_target("Hello", engine)

    assert record.version == "1.0"
    assert (home / "Documents" / "hello.txt").read_text() == "v1"
    assert engine.manifest.load("Hello").version == "1.0"


def test_install_unknown_name(engine, published):
    with pytest.raises(NotFound, match="Paw Ghost not found in any repository"):
        install_target("Ghost", engine)


def test_update_package_replaces_files(engine, published, home):
    install_target("Hello", engine)
    assert update_package("Hello", engine) is False

    published("1.1", "v2")
    asked = []

    assert update_package("Hello", engine, confirm=lambda *a: asked.append(a) or True) is True

    assert asked == [("Hello", "1.0", "1.1")]
    assert (home / "Documents" / "hello.txt").read_text() == "v2"
    assert engine.manifest.load("Hello").version == "1.1"


def test_update_declined_keeps_install(engine, published, home):
    install_target("Hello", engine)
    published("2.0", "v2")

    assert update_package("Hello", engine, confirm=lambda *a: False) is False
    assert (home / "Documents" / "hello.txt").read_text() == "v1"


def test_update_all_summary(engine, published):
    install_target("Hello", engine)
    published("1.1", "v2")

    summary = update_target("all", engine)

    assert summary.repositories == ["Main"]
    assert summary.updated == ["Hello"]
    assert summary.errors == {}


def test_update_target_repository_and_unknown(engine, published):
    summary = update_target("Main", engine)
    assert summary.repositories == ["Main"]

    with pytest.raises(NotFound, match="neither an installed paw nor a repository"):
        update_target("Nothing", engine)


def test_repository_module_uses_requests(monkeypatch):
    seen = []
    monkeypatch.setattr(
        repository.requests,
        "get",
        lambda url, timeout: seen.append(url) or _FakeResponse({"name": "R"}),
    )
    assert fetch_index("http://x/index.json") == {"name": "R"}
    assert seen == ["http://x/index.json"]
