"""
Engine executor — converge one package declaration.

Flow:
    declaration → load versions → plan → one batched pip call → report
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pipconverge.adapters.base import Runner
from pipconverge.core.engine.planner import PackagePlan, plan_package
from pipconverge.core.models.command import Receipt
from pipconverge.core.models.package import PackageSpec
from pipconverge.core.services.package_actions import (
    install_packages,
    remove_packages,
    upgrade_packages,
)
from pipconverge.core.services.package_state import PackageState, check_package_versions

logger = logging.getLogger(__name__)

_ACTIONS = {
    "install": install_packages,
    "upgrade": upgrade_packages,
    "remove": remove_packages,
}


@dataclass
class ConvergeReport:
    """Result of converging one declaration."""

    package: PackageSpec
    state: PackageState
    plan: PackagePlan
    receipt: Receipt | None = None
    dry_run: bool = False

    @property
    def changed(self) -> bool:
        return self.receipt is not None

    def to_dict(self) -> dict:
        return {
            "package": self.package.describe(),
            "action": self.plan.action,
            "changed": self.changed,
            "dry_run": self.dry_run,
            "plan": self.plan.to_dict(),
            "command": self.receipt.command if self.receipt else None,
        }


def converge(package: PackageSpec, runner: Runner, dry_run: bool = False) -> ConvergeReport:
    """Bring a declaration's packages to their declared state.

    Args:
        package: The declaration to converge.
        runner: Executes pip.
        dry_run: Load state and plan, but don't change anything.

    Returns:
        ConvergeReport. ``receipt`` is set when pip changed something.

    Raises:
        PipCommandError: If any pip call fails.
    """
    state = check_package_versions(package, runner)
    plan = plan_package(package, state)
    report = ConvergeReport(package=package, state=state, plan=plan, dry_run=dry_run)

    if plan.up_to_date:
        logger.debug("[%s] Nothing to %s", package.describe(), plan.action)
        return report

    names = plan.target_names()
    if dry_run:
        logger.info("[dry-run] Would %s %s", plan.action, ", ".join(names))
        return report

    logger.info("%s %s", plan.action.capitalize(), ", ".join(names))
    report.receipt = _ACTIONS[plan.action](package, runner, names, plan.target_versions())
    return report
