"""
Package models — declared intent and observed versions.

A PackageSpec is one declaration from packages.yml (or built in code):
which package(s), at which version(s), with which pip options, as which
user. Parent Python environments supply the interpreter and, for
virtualenvs, default ownership.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ── Options variant ─────────────────────────────────────────────


@dataclass(frozen=True)
class Unset:
    """No options were declared."""


@dataclass(frozen=True)
class Joined:
    """Options declared as one pre-joined string (passed through verbatim)."""

    text: str


@dataclass(frozen=True)
class Tokens:
    """Options declared as a list of discrete arguments."""

    items: tuple[str, ...] = ()


Options = Unset | Joined | Tokens


def as_options(value: Any) -> Options:
    """Wrap a raw options value in its variant.

    ``None`` and ``False`` mean "no options", a string is kept joined,
    anything else is treated as a sequence of tokens.
    """
    if isinstance(value, (Unset, Joined, Tokens)):
        return value
    if value is None or value is False:
        return Unset()
    if isinstance(value, str):
        return Joined(value)
    return Tokens(tuple(str(v) for v in value))


# ── Parent environments ─────────────────────────────────────────


@runtime_checkable
class DefaultProvider(Protocol):
    """Something that supplies default ownership for installs."""

    def default_user(self) -> str | int | None: ...

    def default_group(self) -> str | int | None: ...


class PythonRuntime(BaseModel):
    """A plain Python interpreter."""

    name: str = "system"
    python: str | None = None

    def python_binary(self) -> str:
        return self.python or sys.executable

    def default_provider(self) -> DefaultProvider | None:
        # Interpreters carry no ownership of their own.
        return None


class PythonVirtualenv(PythonRuntime):
    """A virtualenv, owned by a user/group that installs should run as."""

    virtualenv: str
    user: str | int | None = None
    group: str | int | None = None

    def python_binary(self) -> str:
        return self.python or str(Path(self.virtualenv) / "bin" / "python")

    def default_user(self) -> str | int | None:
        return self.user

    def default_group(self) -> str | int | None:
        return self.group

    def default_provider(self) -> DefaultProvider | None:
        return self


# ── Declared intent ─────────────────────────────────────────────

# Attributes of generic package declarations that pip has no use for.
_UNSUPPORTED_FIELDS = ("response_file", "response_file_variables", "source")


class PackageSpec(BaseModel):
    """Declared intent for one package, or several sharing one declaration.

    ``package_name`` and ``version`` are either both scalars or parallel
    lists. Versions are matched to names by position.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    package_name: str | list[str]
    version: str | list[str | None] | None = None
    action: Literal["install", "upgrade", "remove"] = "install"

    options: str | list[str] | None = None
    list_options: str | list[str] | None = None
    install_options: str | list[str] | None = None

    user: str | int | None = None
    group: str | int | None = None
    allow_downgrade: bool = False

    python: str = Field(default_factory=lambda: sys.executable)
    defaults: DefaultProvider | None = Field(default=None, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _reject_unsupported(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in _UNSUPPORTED_FIELDS:
            value = data.pop(key, None)
            if value:
                raise ValueError(f"'{key}' is not supported for Python packages")
        return data

    @field_validator("options", "list_options", "install_options", mode="before")
    @classmethod
    def _false_means_none(cls, value: Any) -> Any:
        return None if value is False else value

    @property
    def is_multi(self) -> bool:
        """Whether this declaration covers a list of packages."""
        return isinstance(self.package_name, list)

    def names(self) -> list[str]:
        if isinstance(self.package_name, list):
            return list(self.package_name)
        return [self.package_name]

    def versions(self) -> list[str | None]:
        if isinstance(self.version, list):
            return list(self.version)
        return [self.version]

    def options_for(self, kind: Literal["install", "list"]) -> tuple[Options, Options]:
        """Global and kind-specific options, as variants."""
        specific = {"install": self.install_options, "list": self.list_options}[kind]
        return as_options(self.options), as_options(specific)

    def effective_user(self) -> str | int | None:
        if self.user is not None:
            return self.user
        return self.defaults.default_user() if self.defaults else None

    def effective_group(self) -> str | int | None:
        if self.group is not None:
            return self.group
        return self.defaults.default_group() if self.defaults else None

    def describe(self) -> str:
        return ", ".join(self.names())


# ── Observed state ──────────────────────────────────────────────


@dataclass
class VersionInfo:
    """Installed and candidate versions of one package."""

    current: str | None = None
    candidate: str | None = None

    def to_dict(self) -> dict:
        return {"current": self.current, "candidate": self.candidate}
