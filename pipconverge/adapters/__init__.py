"""Runners — process execution for pip invocations.

Public re-exports for convenient access.
"""

from pipconverge.adapters.base import Runner
from pipconverge.adapters.mock import MockRunner
from pipconverge.adapters.shell.command import ShellCommandRunner

__all__ = [
    "MockRunner",
    "Runner",
    "ShellCommandRunner",
]
