"""
Tests for the click CLI, run in mock mode.
"""

import json
import logging

import pytest
from click.testing import CliRunner

from pipconverge import __version__
from pipconverge.main import cli

MANIFEST = """\
    packages:
      - name: django
        version: "1.8.3"
        python: python3
      - name: boto
        action: remove
        python: python3
"""


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """The CLI reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def manifest_path(write_manifest):
    return str(write_manifest(MANIFEST))


class TestCliBasics:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "keep Python environments at their declared packages" in result.output
        for command in ("status", "converge", "config"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert f"pipconverge, version {__version__}" in result.output


class TestStatusCommand:
    def test_text(self, runner, manifest_path):
        result = runner.invoke(cli, ["--config", manifest_path, "status", "--mock"])
        assert result.exit_code == 0
        assert "Declared packages" in result.output
        assert "django" in result.output
        assert "not installed" in result.output

    def test_json(self, runner, manifest_path):
        result = runner.invoke(cli, ["--config", manifest_path, "status", "--mock", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data["declarations"]) == 2
        assert data["declarations"][0]["packages"][0] == {
            "name": "django",
            "current": None,
            "candidate": None,
        }

    def test_missing_config(self, runner, tmp_path, monkeypatch):
        isolated = tmp_path / "isolated"
        isolated.mkdir()
        monkeypatch.chdir(isolated)
        result = runner.invoke(cli, ["status", "--mock"])
        assert result.exit_code == 1
        assert "No packages.yml found" in result.output


class TestConvergeCommand:
    def test_text(self, runner, manifest_path):
        result = runner.invoke(cli, ["--config", manifest_path, "converge", "--mock"])
        assert result.exit_code == 0
        assert "✓ install django" in result.output
        assert "Result: 1 declaration(s) changed" in result.output

    def test_dry_run_json(self, runner, manifest_path):
        result = runner.invoke(
            cli, ["--config", manifest_path, "converge", "--mock", "--dry-run", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["dry_run"] is True
        assert data["changed"] == 0
        assert data["reports"][0]["plan"]["packages"][0]["needs_action"] is True
        assert data["reports"][0]["command"] is None

    def test_json(self, runner, manifest_path):
        result = runner.invoke(cli, ["--config", manifest_path, "converge", "--mock", "--json"])
        data = json.loads(result.stdout)
        assert data["changed"] == 1
        assert data["reports"][0]["command"] == "python3 -m pip.__main__ install django==1.8.3"
        assert data["reports"][1]["changed"] is False

    def test_bad_config_exits_nonzero(self, runner, write_manifest):
        path = write_manifest("packages:\n  - name: django\n    environment: nowhere\n")
        result = runner.invoke(cli, ["--config", str(path), "converge", "--mock", "--json"])
        assert result.exit_code == 1
        assert "unknown environment" in json.loads(result.stdout)["error"]


class TestConfigCheckCommand:
    def test_valid(self, runner, manifest_path):
        result = runner.invoke(cli, ["--config", manifest_path, "config", "check"])
        assert result.exit_code == 0
        assert "✅ Configuration is valid" in result.output
        assert "Packages: 2" in result.output

    def test_invalid(self, runner, write_manifest):
        path = write_manifest("packages:\n  - name: django\n    source: /tmp/x.tar.gz\n")
        result = runner.invoke(cli, ["--config", str(path), "config", "check"])
        assert result.exit_code == 1
        assert "❌ Configuration errors:" in result.output

    def test_json(self, runner, manifest_path):
        result = runner.invoke(cli, ["--config", manifest_path, "config", "check", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["valid"] is True
        assert data["package_count"] == 2
