"""Command-line behaviour through :class:`click.testing.CliRunner`."""

import json

import pytest
from click.testing import CliRunner

from pawkit.cli import main as cli_main


@pytest.fixture
def runner(home):
    return CliRunner()


@pytest.fixture
def hello_paw(make_paw):
    return make_paw(
        "Hello",
        {"@documents/hello.txt": "Hello, world"},
        metadata={"name": "Hello", "version": "1.0.0", "author": "Ann"},
    )


def test_list_when_empty(runner):
    result = runner.invoke(cli_main, ["list"])
    assert result.exit_code == 0, result.output
    assert "No paws are currently installed." in result.output


def test_install_confirm_list_info_delete(runner, hello_paw, home):
    """Verify the install → list → info → delete round trip."""
    result = runner.invoke(cli_main, ["install", str(hello_paw)], input="y\n")
    assert result.exit_code == 0, result.output
    assert "Paw: Hello (version 1.0.0)" in result.output
    assert "✓ Installed Hello" in result.output
    target = home / "Documents" / "hello.txt"
    assert target.read_text() == "Hello, world"

    result = runner.invoke(cli_main, ["ls"])
    assert "Hello (version 1.0.0)" in result.output

    result = runner.invoke(cli_main, ["info", "Hello"])
    assert result.exit_code == 0, result.output
    assert "author: Ann" in result.output
    assert f"[present] {target}" in result.output

    result = runner.invoke(cli_main, ["uninstall", "Hello"])
    assert result.exit_code == 0, result.output
    assert "✓ Removed Hello" in result.output
    assert not target.exists()


def test_install_declined(runner, hello_paw, home):
    result = runner.invoke(cli_main, ["i", str(hello_paw)], input="n\n")
    assert result.exit_code == 1
    assert "Installation cancelled by user" in result.output
    assert not (home / "Documents" / "hello.txt").exists()


def test_install_conflict_then_force(runner, hello_paw, home):
    docs = home / "Documents"
    docs.mkdir()
    (docs / "hello.txt").write_text("old")
    runner.invoke(cli_main, ["config", "set", "confirm_installation", "false"])

    result = runner.invoke(cli_main, ["install", str(hello_paw)])
    assert result.exit_code == 1
    assert "Use -f or --force to overwrite" in result.output
    assert (docs / "hello.txt").read_text() == "old"

    result = runner.invoke(cli_main, ["install", "-f", str(hello_paw)])
    assert result.exit_code == 0, result.output
    assert (docs / "hello.txt").read_text() == "Hello, world"


def test_finstall_overwrites_without_prompt(runner, hello_paw, home):
    docs = home / "Documents"
    docs.mkdir()
    (docs / "hello.txt").write_text("old")

    result = runner.invoke(cli_main, ["f", str(hello_paw)])

    assert result.exit_code == 0, result.output
    assert "✓ Installed Hello 1.0.0" in result.output
    assert (docs / "hello.txt").read_text() == "Hello, world"


def test_install_batch_reports_each_failure(runner, hello_paw, tmp_path):
    bad = tmp_path / "bad.paw"
    bad.write_text("not a zip")

    result = runner.invoke(cli_main, ["install", "-f", str(bad), str(hello_paw)])

    assert result.exit_code == 1
    assert "is not a valid zip file" in result.output
    assert "✓ Installed Hello" in result.output


def test_delete_unknown(runner):
    result = runner.invoke(cli_main, ["delete", "Ghost"])
    assert result.exit_code == 1
    assert "Paw Ghost is not installed" in result.output


def test_info_unknown(runner):
    result = runner.invoke(cli_main, ["inf", "Ghost"])
    assert result.exit_code == 1
    assert "Paw Ghost is not installed" in result.output


def test_config_get_and_set(runner, home):
    result = runner.invoke(cli_main, ["config"])
    assert result.exit_code == 0, result.output
    assert "confirm_installation: True" in result.output

    result = runner.invoke(cli_main, ["config", "set", "verbose_logging", "true"])
    assert "✓ Set verbose_logging to True" in result.output

    result = runner.invoke(cli_main, ["config", "get", "verbose_logging"])
    assert "verbose_logging: True" in result.output

    result = runner.invoke(cli_main, ["config", "set", "theme", "dark"])
    assert "Creating new config key: theme" in result.output
    saved = json.loads((home / ".pawkit" / "config.json").read_text())
    assert saved["theme"] == "dark"

    result = runner.invoke(cli_main, ["config", "get", "missing"])
    assert "Config key not found: missing" in result.output

    result = runner.invoke(cli_main, ["config", "set"])
    assert result.exit_code == 2


def test_repositories_and_update(runner, make_paw, tmp_path, home):
    paw = make_paw("Hello", {"@documents/hello.txt": "v1"}, metadata={"version": "1.0"})
    index = tmp_path / "index.json"
    index.write_text(
        json.dumps(
            {
                "repositoryName": "Main",
                "paws": {"Hello": {"downloadUrl": f"file://{paw}", "version": "1.0"}},
            }
        )
    )

    result = runner.invoke(cli_main, ["addrepo", f"file://{index}"])
    assert result.exit_code == 0, result.output
    assert "✓ Added repository Main" in result.output

    result = runner.invoke(cli_main, ["install", "-f", "Hello"])
    assert result.exit_code == 0, result.output
    assert (home / "Documents" / "hello.txt").read_text() == "v1"

    result = runner.invoke(cli_main, ["update"])
    assert result.exit_code == 0, result.output
    assert "Updated: 0, Already up-to-date: 1, Errors: 0" in result.output

    result = runner.invoke(cli_main, ["up", "Main"])
    assert "✓ Refreshed repository Main" in result.output

    result = runner.invoke(cli_main, ["removerepo", "Main"])
    assert "✓ Removed repository Main" in result.output

    result = runner.invoke(cli_main, ["removerepo", "Main"])
    assert result.exit_code == 1
    assert "Repository Main not found" in result.output


def test_help_lists_primary_commands(runner):
    result = runner.invoke(cli_main, ["--help"])
    assert result.exit_code == 0
    for name in ("install", "finstall", "delete", "info", "list", "update", "config"):
        assert name in result.output
