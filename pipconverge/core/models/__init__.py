"""
Domain models — pydantic and dataclass types for pipconverge.

All models are re-exported here for convenient access:

    from pipconverge.core.models import PackageSpec, VersionInfo, CommandSpec, Receipt
"""

from pipconverge.core.models.command import CommandSpec, Receipt
from pipconverge.core.models.package import (
    DefaultProvider,
    Joined,
    Options,
    PackageSpec,
    PythonRuntime,
    PythonVirtualenv,
    Tokens,
    Unset,
    VersionInfo,
    as_options,
)

__all__ = [
    # command.py
    "CommandSpec",
    # package.py
    "DefaultProvider",
    "Joined",
    "Options",
    "PackageSpec",
    "PythonRuntime",
    "PythonVirtualenv",
    "Receipt",
    "Tokens",
    "Unset",
    "VersionInfo",
    "as_options",
]
