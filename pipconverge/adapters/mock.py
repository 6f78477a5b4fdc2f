"""
Mock runner — test double for pip invocations.

Used by the test suite and the CLI's --mock mode to simulate pip
without touching a real environment. Responses are keyed by a fragment
of the rendered command line, e.g. ``"list --outdated"`` or
``"uninstall"``.
"""

from __future__ import annotations

from pipconverge.adapters.base import Runner
from pipconverge.core.models.command import CommandSpec, Receipt


class MockRunner(Runner):
    """Universal mock runner.

    By default, every command succeeds with empty output. When several
    configured fragments appear in a command, the longest one wins, so
    ``"list"`` and ``"list --outdated"`` can be configured side by side.
    """

    def __init__(
        self,
        runner_name: str = "mock",
        available: bool = True,
        default_output: str = "",
    ):
        self._name = runner_name
        self._available = available
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._call_log: list[CommandSpec] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[CommandSpec]:
        """All command specs this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    @property
    def commands(self) -> list[str]:
        """Rendered command lines, in call order."""
        return [spec.display for spec in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def set_output(self, fragment: str, stdout: str) -> None:
        """Succeed with ``stdout`` for commands containing ``fragment``."""
        self._responses[fragment] = Receipt.success(
            runner=self._name,
            command=fragment,
            stdout=stdout,
        )

    def set_failure(
        self,
        fragment: str,
        error: str = "Mock failure",
        return_code: int = 1,
        stdout: str = "",
    ) -> None:
        """Fail commands containing ``fragment``."""
        self._responses[fragment] = Receipt.failure(
            runner=self._name,
            command=fragment,
            error=error,
            stderr=error,
            stdout=stdout,
            return_code=return_code,
        )

    def execute(self, spec: CommandSpec, timeout: int | None = None) -> Receipt:
        self._call_log.append(spec)
        command = spec.display

        matches = [fragment for fragment in self._responses if fragment in command]
        if matches:
            canned = self._responses[max(matches, key=len)]
            return canned.model_copy(update={"command": command})

        # Default: success
        return Receipt.success(
            runner=self._name,
            command=command,
            stdout=self._default_output,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
