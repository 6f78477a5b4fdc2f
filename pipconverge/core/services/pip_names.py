"""
Package name normalization.

pip reports ``Django_Foo`` where the user wrote ``django-foo[bar]`` or
``git+https://...#egg=django_foo``. Everything that joins declared and
installed packages goes through ``normalize_package_name`` first.
"""

from __future__ import annotations

import re

# VCS/URL references carry the package name in their egg fragment.
PACKAGE_NAME_URL = re.compile(r"://.*#egg=(.*)$")

# Extras: name[extra1,extra2]
PACKAGE_NAME_EXTRA = re.compile(r"^(.*?)\[.*?\]$")


def normalize_package_name(raw_name: str) -> str:
    """Find the underlying, comparable name of a pip input.

    >>> normalize_package_name("git+https://github.com/django/django.git#egg=Django")
    'django'
    >>> normalize_package_name("Django_Foo[bar]")
    'django-foo'
    """
    name = raw_name
    match = PACKAGE_NAME_URL.search(name)
    if match:
        name = match.group(1)
    match = PACKAGE_NAME_EXTRA.search(name)
    if match:
        name = match.group(1)
    return name.lower().replace("_", "-")
