"""
CommandSpec and Receipt models — the execution contract.

A CommandSpec describes one pip invocation. A Receipt captures its
outcome. Runners take CommandSpecs and return Receipts, never
exceptions; the services layer decides what a failed Receipt means.
"""

from __future__ import annotations

import shlex
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class CommandSpec(BaseModel):
    """A single command to run.

    ``command`` is a list of arguments in token mode (no intermediate
    shell) or one shell-escaped string in string mode.
    """

    command: list[str] | str
    user: str | int | None = None
    group: str | int | None = None
    environment: dict[str, str] = Field(default_factory=dict)

    @property
    def shell(self) -> bool:
        """Whether the command must be run through /bin/sh."""
        return isinstance(self.command, str)

    @property
    def display(self) -> str:
        """Human-readable rendering of the command line."""
        if isinstance(self.command, str):
            return self.command
        return shlex.join(self.command)


class Receipt(BaseModel):
    """Result of running a CommandSpec.

    Receipts capture the full outcome of a command. Runners NEVER
    raise exceptions — failures are captured here.
    """

    runner: str
    command: str
    status: Literal["ok", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    return_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the command succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the command failed."""
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        runner: str,
        command: str,
        stdout: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        kwargs.setdefault("return_code", 0)
        return cls(
            runner=runner,
            command=command,
            status="ok",
            stdout=stdout,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        runner: str,
        command: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            runner=runner,
            command=command,
            status="failed",
            error=error,
            **kwargs,
        )
