"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

from pipconverge.adapters.mock import MockRunner
from pipconverge.core.models.package import PackageSpec

PIP_LIST_JSON = '[{"name": "Django", "version": "1.8.2"}, {"name": "boto", "version": "2.25.0"}]'

PIP_LIST_LEGACY = textwrap.dedent("""\
    boto (2.25.0)
    Django (1.8.2, /srv/app/src/django)
""")

PIP_OUTDATED = textwrap.dedent("""\
    Package    Version Latest Type
    ---------- ------- ------ -----
    Django     1.8.2   1.9.0  wheel
""")


@pytest.fixture
def pip_runner() -> MockRunner:
    """A mock runner answering `pip list` and `pip list --outdated`."""
    runner = MockRunner()
    runner.set_output("list", PIP_LIST_JSON)
    runner.set_output("list --outdated", PIP_OUTDATED)
    return runner


@pytest.fixture
def django_spec() -> PackageSpec:
    """A single-package declaration pinned to 1.8.3."""
    return PackageSpec(package_name="django", version="1.8.3", python="python3")


@pytest.fixture
def write_manifest(tmp_path: Path):
    """Write a packages.yml into tmp_path and return its path."""

    def _write(content: str) -> Path:
        path = tmp_path / "packages.yml"
        path.write_text(textwrap.dedent(content))
        return path

    return _write
