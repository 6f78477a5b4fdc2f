"""
Configuration loader — reads packages.yml into domain models.

It reads YAML, validates against pydantic schemas, and returns the
PackageSpecs to converge, with interpreters and ownership defaults
wired from their declared environments.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from pipconverge.core.models.manifest import Manifest
from pipconverge.core.models.package import PackageSpec

logger = logging.getLogger(__name__)

# Default config filename
MANIFEST_FILE = "packages.yml"


class ConfigError(Exception):
    """Raised when the manifest is invalid or missing."""


def find_manifest_file(start_dir: Path | None = None) -> Path | None:
    """Search for packages.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to packages.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / MANIFEST_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_manifest(path: Path | None = None) -> Manifest:
    """Load and validate the manifest.

    Args:
        path: Explicit path to packages.yml. If None, searches upward.

    Returns:
        Validated Manifest model.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_manifest_file()

    if path is None:
        raise ConfigError(f"No {MANIFEST_FILE} found. Create one, or specify --config.")

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading manifest from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid manifest: {e}") from e

    logger.info(
        "Loaded %d package declaration(s) across %d environment(s)",
        len(manifest.packages),
        len(manifest.environments),
    )
    return manifest


def build_package_specs(manifest: Manifest) -> list[PackageSpec]:
    """Turn manifest entries into PackageSpecs, in declaration order.

    Raises:
        ConfigError: If an entry names an unknown environment or
            declares something a package cannot have.
    """
    specs = []
    for decl in manifest.packages:
        env = None
        if decl.environment is not None:
            env_decl = manifest.get_environment(decl.environment)
            if env_decl is None:
                raise ConfigError(
                    f"Package '{decl.describe()}' uses unknown environment '{decl.environment}'"
                )
            env = env_decl.build()

        try:
            specs.append(decl.to_spec(env))
        except ValidationError as e:
            raise ConfigError(f"Invalid package '{decl.describe()}': {e}") from e
    return specs
