"""
Package actions — install, upgrade and remove through pip.

Each call is one batched pip invocation covering every name given.
A failing pip call raises PipCommandError; nothing is retried.
"""

from __future__ import annotations

from collections.abc import Sequence

from pipconverge.adapters.base import Runner
from pipconverge.core.models.command import Receipt
from pipconverge.core.models.package import PackageSpec
from pipconverge.core.services.pip_command import run_pip
from pipconverge.core.services.pip_requirements import pip_requirements


def _pip_install(
    package: PackageSpec,
    runner: Runner,
    names: Sequence[str],
    versions: Sequence[str | None],
    upgrade: bool = False,
) -> Receipt:
    args = pip_requirements(names, versions)
    if upgrade:
        args = ["--upgrade", *args]
    return run_pip(package, runner, "install", "install", args)


def install_packages(
    package: PackageSpec,
    runner: Runner,
    names: Sequence[str],
    versions: Sequence[str | None],
) -> Receipt:
    """Install package(s) using pip."""
    return _pip_install(package, runner, names, versions, upgrade=False)


def upgrade_packages(
    package: PackageSpec,
    runner: Runner,
    names: Sequence[str],
    versions: Sequence[str | None],
) -> Receipt:
    """Upgrade package(s) using pip."""
    return _pip_install(package, runner, names, versions, upgrade=True)


def remove_packages(
    package: PackageSpec,
    runner: Runner,
    names: Sequence[str],
    versions: Sequence[str | None] = (),
) -> Receipt:
    """Uninstall package(s) using pip.

    ``versions`` is accepted for symmetry and ignored: pip uninstall
    cannot be scoped to a version. pip has no uninstall-specific
    options, so the install options are used.
    """
    return run_pip(package, runner, "uninstall", "install", ["--yes", *names])
