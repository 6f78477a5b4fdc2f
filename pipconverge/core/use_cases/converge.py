"""
Converge and status use cases — the vertical slice behind the CLI.

Both load the manifest, then walk its declarations in order. ``status``
only reads versions; ``converge`` also plans and runs pip. The first pip
failure stops the run: later declarations may depend on earlier ones.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pipconverge.adapters.base import Runner
from pipconverge.adapters.mock import MockRunner
from pipconverge.adapters.shell.command import ShellCommandRunner
from pipconverge.core.config.loader import ConfigError, build_package_specs, load_manifest
from pipconverge.core.engine.executor import ConvergeReport, converge
from pipconverge.core.models.package import PackageSpec
from pipconverge.core.services.package_state import PackageState, check_package_versions
from pipconverge.core.services.pip_command import PipCommandError
from pipconverge.core.services.pip_parse import PipOutputError

logger = logging.getLogger(__name__)


def _select_runner(runner: Runner | None, mock_mode: bool) -> Runner:
    if runner is not None:
        return runner
    if mock_mode:
        return MockRunner()
    return ShellCommandRunner()


def _load_specs(config_path: Path | None) -> list[PackageSpec]:
    return build_package_specs(load_manifest(config_path))


@dataclass
class ConvergeResult:
    """Result of converging every declaration in the manifest."""

    reports: list[ConvergeReport] = field(default_factory=list)
    dry_run: bool = False
    error: str | None = None

    @property
    def changed(self) -> int:
        return sum(1 for r in self.reports if r.changed)

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
        result["dry_run"] = self.dry_run
        result["changed"] = self.changed
        result["reports"] = [r.to_dict() for r in self.reports]
        return result


@dataclass
class StatusResult:
    """Observed versions for every declaration in the manifest."""

    entries: list[tuple[PackageSpec, PackageState]] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result
        result["declarations"] = [
            {"action": spec.action, "python": spec.python, **state.to_dict()}
            for spec, state in self.entries
        ]
        return result


def run_converge(
    config_path: Path | None = None,
    dry_run: bool = False,
    mock_mode: bool = False,
    runner: Runner | None = None,
) -> ConvergeResult:
    """Converge every declaration in the manifest.

    Args:
        config_path: Optional explicit path to packages.yml.
        dry_run: Plan but don't change anything.
        mock_mode: Use a MockRunner instead of running pip.
        runner: Explicit runner (overrides ``mock_mode``).

    Returns:
        ConvergeResult; ``error`` is set when the run stopped early.
    """
    result = ConvergeResult(dry_run=dry_run)

    try:
        specs = _load_specs(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    active = _select_runner(runner, mock_mode)
    for spec in specs:
        try:
            result.reports.append(converge(spec, active, dry_run=dry_run))
        except (PipCommandError, PipOutputError) as e:
            logger.error("[%s] %s", spec.describe(), e)
            result.error = str(e)
            break

    return result


def get_status(
    config_path: Path | None = None,
    mock_mode: bool = False,
    runner: Runner | None = None,
) -> StatusResult:
    """Load current and candidate versions for every declaration."""
    result = StatusResult()

    try:
        specs = _load_specs(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    active = _select_runner(runner, mock_mode)
    for spec in specs:
        try:
            result.entries.append((spec, check_package_versions(spec, active)))
        except (PipCommandError, PipOutputError) as e:
            logger.error("[%s] %s", spec.describe(), e)
            result.error = str(e)
            break

    return result
