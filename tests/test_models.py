"""
Tests for package models — option variants, declarations, environments.
"""

import sys

import pytest
from pydantic import ValidationError

from pipconverge.core.models.package import (
    DefaultProvider,
    Joined,
    PackageSpec,
    PythonRuntime,
    PythonVirtualenv,
    Tokens,
    Unset,
    VersionInfo,
    as_options,
)


class TestAsOptions:
    @pytest.mark.parametrize("value", [None, False])
    def test_unset(self, value):
        assert as_options(value) == Unset()

    def test_string(self):
        assert as_options("--pre --no-deps") == Joined("--pre --no-deps")

    def test_list(self):
        assert as_options(["--pre", "--no-deps"]) == Tokens(("--pre", "--no-deps"))

    def test_empty_list(self):
        assert as_options([]) == Tokens()

    def test_variant_unchanged(self):
        joined = Joined("--pre")
        assert as_options(joined) is joined


class TestPackageSpec:
    def test_defaults(self):
        spec = PackageSpec(package_name="django")
        assert spec.action == "install"
        assert spec.python == sys.executable
        assert not spec.allow_downgrade
        assert spec.names() == ["django"]
        assert spec.versions() == [None]
        assert not spec.is_multi

    def test_multi(self):
        spec = PackageSpec(package_name=["a", "b"], version=["1.0", None])
        assert spec.is_multi
        assert spec.describe() == "a, b"
        assert spec.versions() == ["1.0", None]

    def test_options_for(self):
        spec = PackageSpec(package_name="a", options="--isolated", install_options=["--pre"])
        assert spec.options_for("install") == (Joined("--isolated"), Tokens(("--pre",)))
        assert spec.options_for("list") == (Joined("--isolated"), Unset())

    def test_false_options_mean_none(self):
        spec = PackageSpec(package_name="a", options=False)
        assert spec.options is None

    @pytest.mark.parametrize(
        "field,value",
        [
            ("response_file", "answers.txt"),
            ("response_file_variables", {"a": "b"}),
            ("source", "/tmp/django.tar.gz"),
        ],
    )
    def test_unsupported_fields_rejected(self, field, value):
        with pytest.raises(ValidationError, match="not supported for Python packages"):
            PackageSpec(package_name="django", **{field: value})

    def test_empty_response_file_variables_allowed(self):
        spec = PackageSpec(package_name="django", response_file_variables={})
        assert spec.package_name == "django"

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            PackageSpec(package_name="django", timeout=10)

    def test_bad_action_rejected(self):
        with pytest.raises(ValidationError):
            PackageSpec(package_name="django", action="purge")

    def test_effective_user_from_defaults(self):
        venv = PythonVirtualenv(virtualenv="/srv/.venv", user="deploy", group="staff")
        spec = PackageSpec(package_name="django", defaults=venv)
        assert spec.effective_user() == "deploy"
        assert spec.effective_group() == "staff"

    def test_explicit_user_wins(self):
        venv = PythonVirtualenv(virtualenv="/srv/.venv", user="deploy", group="staff")
        spec = PackageSpec(package_name="django", user="root", group=0, defaults=venv)
        assert spec.effective_user() == "root"
        assert spec.effective_group() == 0

    def test_no_defaults(self):
        spec = PackageSpec(package_name="django")
        assert spec.effective_user() is None
        assert spec.effective_group() is None

    def test_defaults_not_dumped(self):
        venv = PythonVirtualenv(virtualenv="/srv/.venv", user="deploy")
        spec = PackageSpec(package_name="django", defaults=venv)
        assert "defaults" not in spec.model_dump()


class TestEnvironments:
    def test_runtime_binary(self):
        assert PythonRuntime(python="/usr/bin/python3").python_binary() == "/usr/bin/python3"
        assert PythonRuntime().python_binary() == sys.executable

    def test_runtime_has_no_defaults(self):
        assert PythonRuntime().default_provider() is None

    def test_virtualenv_binary(self):
        venv = PythonVirtualenv(virtualenv="/srv/app/.venv")
        assert venv.python_binary() == "/srv/app/.venv/bin/python"

    def test_virtualenv_explicit_python(self):
        venv = PythonVirtualenv(virtualenv="/srv/app/.venv", python="/srv/app/.venv/bin/python3.12")
        assert venv.python_binary() == "/srv/app/.venv/bin/python3.12"

    def test_virtualenv_provides_defaults(self):
        venv = PythonVirtualenv(virtualenv="/srv/app/.venv", user="deploy")
        provider = venv.default_provider()
        assert isinstance(provider, DefaultProvider)
        assert provider.default_user() == "deploy"
        assert provider.default_group() is None


def test_version_info_to_dict():
    assert VersionInfo(current="1.0").to_dict() == {"current": "1.0", "candidate": None}
