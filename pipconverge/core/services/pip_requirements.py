"""
Requirement building — turn (name, version) pairs into pip arguments.

The output tokens are what ``pip install`` accepts on its command line:
``django``, ``django==1.8.3``, ``django>=1.8`` or a URL/VCS reference.
"""

from __future__ import annotations

import string
from collections.abc import Sequence

from pipconverge.core.services.pip_names import normalize_package_name


def pip_requirements(
    names: Sequence[str],
    versions: Sequence[str | None],
    parse: bool = False,
) -> list[str]:
    """Convert names and versions to pip requirement strings.

    Versions pair with names by position; names past the end of
    ``versions`` get no version constraint.

    Args:
        names: Raw package references.
        versions: Declared versions. A version that does not start with a
            digit is assumed to carry its own operator (``>=2.0``).
        parse: Use normalized names instead of the raw references.

    Returns:
        One requirement string per name.
    """
    requirements = []
    for i, name in enumerate(names):
        if parse:
            name = normalize_package_name(name)
        version = versions[i] if i < len(versions) else None
        version = (version or "").strip()

        if "://" in name:
            # URL references pin themselves.
            requirements.append(name)
        elif "://" in version:
            requirements.append(version)
        elif not version:
            requirements.append(name)
        elif version[0] in string.digits:
            requirements.append(f"{name}=={version}")
        else:
            requirements.append(name + version)
    return requirements
