"""
pip command composition and execution.

Commands are built in one of two modes:

- token mode: a plain argument list, run without an intermediate shell;
- string mode: one shell-escaped string, used as soon as any declared
  options arrived as a pre-joined string. A joined options string is
  passed through verbatim because it cannot be split back into tokens
  safely, and once one side is a string the whole line has to be.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Sequence
from typing import Literal

from pipconverge.adapters.base import Runner
from pipconverge.core.models.command import CommandSpec, Receipt
from pipconverge.core.models.package import Joined, Options, PackageSpec, Tokens

logger = logging.getLogger(__name__)

# `python -m pip` needs pip/__main__.py; naming it works on old pips too.
DEFAULT_PIP_RUNNER: tuple[str, ...] = ("-m", "pip.__main__")


class PipCommandError(Exception):
    """Raised when a pip invocation exits non-zero."""

    def __init__(self, receipt: Receipt):
        self.receipt = receipt
        detail = (receipt.stderr or receipt.error or "").strip()
        self.msg = (
            f"pip command failed!"
            f"\nRan command: `{receipt.command}`"
            f"\nExit code: {receipt.return_code}"
            f"\nError message: {detail}"
        )
        super().__init__(self.msg)


def _joined(options: Options) -> str:
    if isinstance(options, Joined):
        return options.text
    if isinstance(options, Tokens):
        return shlex.join(options.items)
    return ""


def _tokens(options: Options) -> list[str]:
    if isinstance(options, Tokens):
        return list(options.items)
    return []


def compose_pip_command(
    subcommand: str | None,
    extra_args: Sequence[str],
    global_options: Options,
    action_options: Options,
    *,
    python: str,
    runner: Sequence[str] = DEFAULT_PIP_RUNNER,
    user: str | int | None = None,
    group: str | int | None = None,
    environment: dict[str, str] | None = None,
) -> CommandSpec:
    """Build the command line for one pip invocation.

    Args:
        subcommand: The pip subcommand (eg. install), or None.
        extra_args: Arguments placed after all options.
        global_options: Options declared for every pip call.
        action_options: Options declared for this kind of call.
        python: Interpreter that runs pip.
        runner: Arguments that make the interpreter run pip.
        user: Run as this user.
        group: Run as this group.
        environment: Extra environment variables.

    Returns:
        A fresh CommandSpec.
    """
    string_mode = isinstance(global_options, Joined) or isinstance(action_options, Joined)

    if string_mode:
        parts = [shlex.quote(python), *(shlex.quote(arg) for arg in runner)]
        if subcommand:
            parts.append(shlex.quote(subcommand))
        parts.append(_joined(global_options))
        parts.append(_joined(action_options))
        parts.append(shlex.join(extra_args))
        command: list[str] | str = " ".join(part for part in parts if part)
    else:
        # Unset or token lists: an array skips the extra /bin/sh.
        command = [
            python,
            *runner,
            *([subcommand] if subcommand else []),
            *_tokens(global_options),
            *_tokens(action_options),
            *extra_args,
        ]

    return CommandSpec(
        command=command,
        user=user,
        group=group,
        environment=dict(environment or {}),
    )


def run_pip(
    package: PackageSpec,
    runner: Runner,
    subcommand: str | None,
    options_type: Literal["install", "list"],
    pip_args: Sequence[str] = (),
    *,
    pip_runner: Sequence[str] = DEFAULT_PIP_RUNNER,
    environment: dict[str, str] | None = None,
    timeout: int | None = None,
) -> Receipt:
    """Run a pip command for a package declaration.

    Args:
        package: Supplies the interpreter, options and user/group.
        runner: Executes the composed command.
        subcommand: The pip subcommand (eg. install).
        options_type: Either ``"install"`` or ``"list"`` to select
            which declared options to use.
        pip_args: Arguments for the pip command.
        pip_runner: Arguments that make the interpreter run pip.
        environment: Extra environment variables.
        timeout: Optional timeout in seconds.

    Returns:
        The successful Receipt.

    Raises:
        PipCommandError: If pip exits non-zero.
    """
    global_options, type_specific_options = package.options_for(options_type)
    spec = compose_pip_command(
        subcommand,
        pip_args,
        global_options,
        type_specific_options,
        python=package.python,
        runner=pip_runner,
        user=package.effective_user(),
        group=package.effective_group(),
        environment=environment,
    )
    logger.debug("[%s] Running %s", package.describe(), spec.display)

    receipt = runner.execute(spec, timeout=timeout)
    if receipt.failed:
        raise PipCommandError(receipt)
    return receipt
