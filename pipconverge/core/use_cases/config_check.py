"""
Config check use case — validate packages.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pipconverge.core.config.loader import (
    ConfigError,
    build_package_specs,
    find_manifest_file,
    load_manifest,
)
from pipconverge.core.models.manifest import Manifest
from pipconverge.core.services.pip_names import normalize_package_name


@dataclass
class ConfigCheckResult:
    """Result of manifest validation."""

    valid: bool = False
    manifest: Manifest | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "package_count": len(self.manifest.packages) if self.manifest else 0,
            "environment_count": len(self.manifest.environments) if self.manifest else 0,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate the manifest and report issues.

    Args:
        config_path: Optional explicit path to packages.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_manifest_file()

    if config_path is None:
        result.errors.append("No packages.yml found.")
        return result

    result.config_path = config_path

    try:
        manifest = load_manifest(config_path)
        result.manifest = manifest
        specs = build_package_specs(manifest)
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    if not manifest.packages:
        result.warnings.append("No packages declared. There is nothing to converge.")

    env_names = [e.name for e in manifest.environments]
    env_dupes = {n for n in env_names if env_names.count(n) > 1}
    if env_dupes:
        result.errors.append(f"Duplicate environment names: {', '.join(sorted(env_dupes))}")

    # The same package declared twice for one environment fights itself.
    seen: dict[tuple[str | None, str], int] = {}
    for decl, spec in zip(manifest.packages, specs):
        for name in spec.names():
            key = (decl.environment, normalize_package_name(name))
            seen[key] = seen.get(key, 0) + 1
    dupes = sorted({name for (_, name), count in seen.items() if count > 1})
    if dupes:
        result.errors.append(f"Packages declared more than once: {', '.join(dupes)}")

    used = {decl.environment for decl in manifest.packages}
    for env in manifest.environments:
        if env.name not in used:
            result.warnings.append(f"Environment '{env.name}' has no packages.")

    for spec in specs:
        if spec.is_multi and isinstance(spec.version, list) and len(spec.version) > len(spec.names()):
            result.warnings.append(
                f"More versions than names for '{spec.describe()}'; extra versions are ignored."
            )

    result.valid = len(result.errors) == 0
    return result
