"""
pip output parsing — ``pip list`` and ``pip list --outdated``.

Two eras of ``pip list`` output are understood:

    pip >= 9, with $PIP_FORMAT=json:
        [{"name": "boto", "version": "2.25.0"}, ...]

    pip <= 8, plain text:
        boto (2.25.0)
        Django (1.8.2, /srv/app/src/django)

``pip list --outdated`` is read in its columns format:

    Package    Version Latest Type
    ---------- ------- ------ -----
    pip        19.2.3  20.0.2 wheel

All package names are normalized before they become map keys.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable

from pipconverge.core.services.pip_names import normalize_package_name

logger = logging.getLogger(__name__)

# Example of a line: boto (2.25.0)
_LEGACY_LIST_LINE = re.compile(r"^(\S+)\s+\(([^\s,]+).*\)$", re.IGNORECASE)

# Column titles plus the dashed separator row.
_OUTDATED_HEADER_LINES = 2


class PipOutputError(Exception):
    """Raised when pip output cannot be understood."""


def parse_pip_list(text: str) -> dict[str, str]:
    """Parse the output of ``pip list``.

    Returns:
        Normalized package name → installed version.

    Raises:
        PipOutputError: If JSON output is malformed.
    """
    if text[:1] == "[":
        return _parse_pip_list_json(text)
    return _parse_pip_list_legacy(text)


def _parse_pip_list_json(text: str) -> dict[str, str]:
    try:
        entries = json.loads(text)
    except json.JSONDecodeError as e:
        raise PipOutputError(f"Invalid JSON from pip list: {e}") from e

    if not isinstance(entries, list):
        raise PipOutputError(f"Expected a JSON array from pip list, got {type(entries).__name__}")

    versions: dict[str, str] = {}
    for entry in entries:
        try:
            versions[normalize_package_name(entry["name"])] = entry["version"]
        except (KeyError, TypeError) as e:
            raise PipOutputError(f"Malformed pip list entry: {entry!r}") from e
    return versions


def _parse_pip_list_legacy(text: str) -> dict[str, str]:
    versions: dict[str, str] = {}
    for line in text.splitlines():
        match = _LEGACY_LIST_LINE.match(line)
        if match:
            versions[normalize_package_name(match.group(1))] = match.group(2)
        else:
            logger.debug("Unparsable line in pip list: %s", line)
    return versions


def parse_pip_outdated_table(text: str) -> dict[str, str]:
    """Parse ``pip list --outdated`` columns output.

    Returns:
        Normalized package name → latest available version.
    """
    latest: dict[str, str] = {}
    for line in text.splitlines()[_OUTDATED_HEADER_LINES:]:
        columns = line.split()
        if len(columns) < 3:
            logger.debug("Unparsable line in pip list --outdated: %s", line)
            continue
        latest[normalize_package_name(columns[0])] = columns[2]
    return latest


def reconcile_outdated(
    requirements: Iterable[str],
    outdated: dict[str, str],
) -> dict[str, str]:
    """Work out the version each requirement should be compared against.

    ``pip list --outdated`` always reports the newest release, ignoring
    any pin, so on its own it cannot say whether ``foo==2.0`` is out of
    date when 3.0 exists. A package the table flags gets the table's
    version; anything else keeps its declared version (or ``""`` when
    nothing was declared).

    Args:
        requirements: Strings of the form ``name`` or ``name==version``.
        outdated: Output of :func:`parse_pip_outdated_table`.

    Returns:
        Package name → effective candidate version.
    """
    result: dict[str, str] = {}
    for requirement in requirements:
        name, _, version = requirement.partition("==")
        result[name] = outdated.get(name) or version or ""
    return result
