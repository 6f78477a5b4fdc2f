"""
Package state loading — current and candidate versions via pip.

Runs ``pip list`` (JSON where the pip understands $PIP_FORMAT) and
``pip list --outdated``, then joins both by normalized package name.
Two pip invocations per call, nothing cached.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from pipconverge.adapters.base import Runner
from pipconverge.core.models.package import PackageSpec, VersionInfo
from pipconverge.core.services.pip_command import run_pip
from pipconverge.core.services.pip_names import normalize_package_name
from pipconverge.core.services.pip_parse import (
    parse_pip_list,
    parse_pip_outdated_table,
    reconcile_outdated,
)
from pipconverge.core.services.pip_requirements import pip_requirements

logger = logging.getLogger(__name__)


@dataclass
class PackageState:
    """Observed versions, in the order the packages were declared."""

    names: list[str] = field(default_factory=list)
    current: list[str | None] = field(default_factory=list)
    candidate: list[str | None] = field(default_factory=list)
    multi: bool = False

    @property
    def current_version(self) -> str | None | list[str | None]:
        """Scalar for a single-package declaration, list otherwise."""
        if self.multi:
            return list(self.current)
        return self.current[0] if self.current else None

    @property
    def candidate_version(self) -> str | None | list[str | None]:
        if self.multi:
            return list(self.candidate)
        return self.candidate[0] if self.candidate else None

    def to_dict(self) -> dict:
        return {
            "packages": [
                {"name": name, "current": current, "candidate": candidate}
                for name, current, candidate in zip(self.names, self.current, self.candidate)
            ],
        }


def load_versions(
    package: PackageSpec,
    runner: Runner,
    names: Sequence[str] | None = None,
    versions: Sequence[str | None] | None = None,
) -> dict[str, VersionInfo]:
    """Load current and candidate versions for the declared packages.

    Args:
        package: Declaration supplying interpreter, options and user.
        runner: Executes pip.
        names: Package references (default: the declaration's names).
        versions: Desired versions (default: the declaration's versions).

    Returns:
        Normalized package name → VersionInfo. Covers every installed
        package plus every declared one.

    Raises:
        PipCommandError: If either pip call fails.
        PipOutputError: If ``pip list`` returns malformed JSON.
    """
    names = package.names() if names is None else list(names)
    versions = package.versions() if versions is None else list(versions)

    version_data: dict[str, VersionInfo] = {}

    # Get the version for everything currently installed.
    listing = run_pip(package, runner, "list", "list", environment={"PIP_FORMAT": "json"})
    for name, current in parse_pip_list(listing.stdout).items():
        version_data.setdefault(name, VersionInfo()).current = current

    # Check for newer candidates.
    requirements = pip_requirements(names, versions, parse=True)
    outdated = run_pip(package, runner, "list", "list", ["--outdated"])
    candidates = reconcile_outdated(requirements, parse_pip_outdated_table(outdated.stdout))
    for name, candidate in candidates.items():
        version_data.setdefault(name, VersionInfo()).candidate = candidate or None

    return version_data


def check_package_versions(package: PackageSpec, runner: Runner) -> PackageState:
    """Populate current and candidate versions for a declaration.

    Returns:
        PackageState projected onto the declared names, in order.
    """
    version_data = load_versions(package, runner)

    state = PackageState(multi=package.is_multi)
    for name in package.names():
        info = version_data.get(normalize_package_name(name), VersionInfo())
        state.names.append(name)
        state.current.append(info.current)
        state.candidate.append(info.candidate)

    logger.debug(
        "[%s] Current version: %s, candidate version: %s",
        package.describe(),
        state.current_version,
        state.candidate_version,
    )
    return state
