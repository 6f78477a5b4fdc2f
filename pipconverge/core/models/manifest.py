"""
Manifest model — the contents of packages.yml.

The manifest declares Python environments and the packages each one
should have. It is validated here and turned into PackageSpecs by the
config loader.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pipconverge.core.models.package import PackageSpec, PythonRuntime, PythonVirtualenv


class EnvironmentDecl(BaseModel):
    """A Python environment declared in packages.yml.

    Declaring ``virtualenv`` makes it a virtualenv whose ``user`` and
    ``group`` become the defaults for its packages.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    python: str | None = None
    virtualenv: str | None = None
    user: str | int | None = None
    group: str | int | None = None

    def build(self) -> PythonRuntime:
        if self.virtualenv:
            return PythonVirtualenv(
                name=self.name,
                python=self.python,
                virtualenv=self.virtualenv,
                user=self.user,
                group=self.group,
            )
        return PythonRuntime(name=self.name, python=self.python)


def _version_text(value: Any) -> Any:
    """Turn YAML numbers back into version strings.

    Integers convert safely. Floats do not: YAML reads ``1.10`` as 1.1.
    """
    if isinstance(value, list):
        return [_version_text(v) for v in value]
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        raise ValueError(f"version {value!r} must be quoted, e.g. version: \"{value}\"")
    return value


class PackageDecl(BaseModel):
    """A package entry declared in packages.yml.

    Only ``name`` and ``environment`` are read here; every other key is
    handed to PackageSpec, which validates it. Versions must be strings
    in YAML; bare integers are accepted, bare decimals are not.
    """

    model_config = ConfigDict(extra="allow")

    name: str | list[str]
    environment: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _check_entry(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "package_name" in data:
            raise ValueError("use 'name' to declare packages, not 'package_name'")
        if "version" in data:
            data = {**data, "version": _version_text(data["version"])}
        return data

    def to_spec(self, env: PythonRuntime | None = None) -> PackageSpec:
        fields: dict[str, Any] = dict(self.model_extra or {})
        if env is not None:
            fields.setdefault("python", env.python_binary())
            fields["defaults"] = env.default_provider()
        return PackageSpec.model_validate({**fields, "package_name": self.name})

    def describe(self) -> str:
        return ", ".join(self.name) if isinstance(self.name, list) else self.name


class Manifest(BaseModel):
    """Root of packages.yml."""

    version: int = 1
    environments: list[EnvironmentDecl] = Field(default_factory=list)
    packages: list[PackageDecl] = Field(default_factory=list)

    def get_environment(self, name: str) -> EnvironmentDecl | None:
        """Look up an environment by name."""
        for env in self.environments:
            if env.name == name:
                return env
        return None
