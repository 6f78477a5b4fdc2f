"""
Convergence planning — decide which declared packages need pip.

Given a declaration and its observed state, work out per package
whether the declared action has anything to do:

    install   not installed, or an exact declared version differs
    upgrade   not installed, an exact declared version differs, or (when
              unpinned) the candidate differs from what's installed
    remove    installed

Moving an installed package to a lower exact version is refused unless
the declaration allows downgrades.
"""

from __future__ import annotations

import logging
import string
from dataclasses import dataclass, field

from packaging.version import InvalidVersion, Version

from pipconverge.core.models.package import PackageSpec
from pipconverge.core.services.package_state import PackageState

logger = logging.getLogger(__name__)


@dataclass
class PackageDecision:
    """What to do about a single declared package."""

    name: str
    desired: str | None = None
    current: str | None = None
    candidate: str | None = None
    needs_action: bool = False
    skipped: bool = False
    reason: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "desired": self.desired,
            "current": self.current,
            "candidate": self.candidate,
            "needs_action": self.needs_action,
            "skipped": self.skipped,
            "reason": self.reason,
        }


@dataclass
class PackagePlan:
    """Decisions for every package of one declaration."""

    action: str
    decisions: list[PackageDecision] = field(default_factory=list)

    @property
    def targets(self) -> list[PackageDecision]:
        return [d for d in self.decisions if d.needs_action]

    @property
    def up_to_date(self) -> bool:
        return not self.targets

    def target_names(self) -> list[str]:
        return [d.name for d in self.targets]

    def target_versions(self) -> list[str | None]:
        return [d.desired for d in self.targets]

    def to_dict(self) -> dict:
        return {
            "action": self.action,
            "up_to_date": self.up_to_date,
            "packages": [d.to_dict() for d in self.decisions],
        }


def _exact_version(version: str | None) -> str | None:
    """The declared version if it pins one exact release."""
    version = (version or "").strip()
    if version and version[0] in string.digits and "://" not in version:
        return version
    return None


def is_downgrade(current: str | None, target: str | None) -> bool:
    """Whether moving from ``current`` to ``target`` lowers the version.

    Versions pip would not understand never count as downgrades.
    """
    if not current or not target:
        return False
    try:
        return Version(target) < Version(current)
    except InvalidVersion:
        return False


def _decide(
    action: str,
    decision: PackageDecision,
    allow_downgrade: bool,
) -> PackageDecision:
    exact = _exact_version(decision.desired)

    if action == "remove":
        if decision.current is not None:
            decision.needs_action = True
            decision.reason = f"installed at {decision.current}"
        else:
            decision.reason = "not installed"
        return decision

    if decision.current is None:
        decision.needs_action = True
        decision.reason = "not installed"
        return decision

    # A pinned release is the target whatever pip reports as newest.
    if exact:
        if exact != decision.current:
            decision.needs_action = True
            decision.reason = f"installed at {decision.current}, want {exact}"
    elif action == "upgrade" and decision.candidate and decision.candidate != decision.current:
        decision.needs_action = True
        decision.reason = f"installed at {decision.current}, candidate {decision.candidate}"

    if decision.needs_action and not allow_downgrade and is_downgrade(decision.current, exact):
        decision.needs_action = False
        decision.skipped = True
        decision.reason = f"refusing to downgrade from {decision.current} to {exact}"

    if not decision.needs_action and not decision.reason:
        decision.reason = "up to date"
    return decision


def plan_package(package: PackageSpec, state: PackageState) -> PackagePlan:
    """Decide which of a declaration's packages need the declared action."""
    versions = package.versions()
    plan = PackagePlan(action=package.action)

    for i, name in enumerate(state.names):
        decision = PackageDecision(
            name=name,
            desired=versions[i] if i < len(versions) else None,
            current=state.current[i],
            candidate=state.candidate[i],
        )
        decision = _decide(package.action, decision, package.allow_downgrade)
        if decision.skipped:
            logger.warning("[%s] %s", name, decision.reason)
        else:
            logger.debug("[%s] %s", name, decision.reason)
        plan.decisions.append(decision)

    return plan
