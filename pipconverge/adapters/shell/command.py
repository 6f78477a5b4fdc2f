"""
Shell command runner — execute a CommandSpec as a local subprocess.

Token-mode specs run without an intermediate shell; string-mode specs
go through /bin/sh because their options arrived pre-joined.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time

from pipconverge.adapters.base import Runner
from pipconverge.core.models.command import CommandSpec, Receipt

logger = logging.getLogger(__name__)


class ShellCommandRunner(Runner):
    """Run commands locally and capture output.

    Environment overrides from the CommandSpec are layered over the current
    process environment. ``user`` and ``group`` are handed to
    subprocess, which switches identity before exec (POSIX only).
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        # Shell is always available on Unix systems
        return shutil.which("sh") is not None

    def execute(self, spec: CommandSpec, timeout: int | None = None) -> Receipt:
        command = spec.display
        env = {**os.environ, **spec.environment} if spec.environment else None

        logger.debug("Executing: %s (user=%s, group=%s)", command, spec.user, spec.group)
        start = time.monotonic()

        try:
            result = subprocess.run(
                spec.command,
                shell=spec.shell,
                env=env,
                user=spec.user,
                group=spec.group,
                capture_output=True,
                text=True,
                timeout=timeout,
            )

            elapsed_ms = int((time.monotonic() - start) * 1000)

            if result.returncode == 0:
                return Receipt.success(
                    runner=self.name,
                    command=command,
                    stdout=result.stdout,
                    stderr=result.stderr,
                    return_code=result.returncode,
                    duration_ms=elapsed_ms,
                )
            else:
                return Receipt.failure(
                    runner=self.name,
                    command=command,
                    error=result.stderr.strip() or f"Command exited with code {result.returncode}",
                    stdout=result.stdout,
                    stderr=result.stderr,
                    return_code=result.returncode,
                    duration_ms=elapsed_ms,
                )

        except subprocess.TimeoutExpired:
            return Receipt.failure(
                runner=self.name,
                command=command,
                error=f"Command timed out after {timeout}s",
                metadata={"timeout": timeout},
            )
        except Exception as e:
            return Receipt.failure(
                runner=self.name,
                command=command,
                error=f"Command execution error: {e}",
            )
