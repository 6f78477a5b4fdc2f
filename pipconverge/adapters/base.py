"""
Runner base — the protocol contract between services and processes.

Every way of running a command (local subprocess, mock, ...) implements
this interface. Services never call subprocess directly; they hand a
CommandSpec to a Runner and inspect the Receipt.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pipconverge.core.models.command import CommandSpec, Receipt


class Runner(ABC):
    """Abstract base class for all command runners.

    Runners perform the external side effect and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this runner can execute commands here.

        Should be fast and never raise.
        """

    @abstractmethod
    def execute(self, spec: CommandSpec, timeout: int | None = None) -> Receipt:
        """Run the command and return a receipt.

        MUST never raise exceptions. All failures are captured
        in the Receipt with status='failed'.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
