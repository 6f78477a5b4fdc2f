"""
Logging configuration for the pipconverge CLI.

main.py calls ``setup_logging`` once; every module logs through
``logging.getLogger(__name__)``. pip command lines are logged at DEBUG,
package changes at INFO, refused downgrades at WARNING.

Console level: --debug / --verbose / --quiet, then $PIPCONVERGE_LOG_LEVEL,
then WARNING. $PIPCONVERGE_LOG_FILE adds a log file, whose level
defaults to the console level ($PIPCONVERGE_LOG_FILE_LEVEL overrides).
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LOG_LEVEL = "PIPCONVERGE_LOG_LEVEL"
ENV_LOG_FILE = "PIPCONVERGE_LOG_FILE"
ENV_LOG_FILE_LEVEL = "PIPCONVERGE_LOG_FILE_LEVEL"

# Console output is read alongside click's, so only debug runs get decoration.
_CONSOLE_FORMAT = "%(levelname)s: %(message)s"
_DEBUG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(verbose: bool = False, quiet: bool = False, debug: bool = False) -> str:
    """Pick the console level from CLI flags, falling back to the env."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LOG_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with a stderr (and file) handler."""
    console_level = _parse_level(level)
    fmt = _DEBUG_FORMAT if console_level <= logging.DEBUG else _CONSOLE_FORMAT

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt))
    handlers: list[logging.Handler] = [console]

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(_parse_level(log_file_level) if log_file_level else console_level)
        file_handler.setFormatter(logging.Formatter(_DEBUG_FORMAT))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(min(h.level for h in handlers))


def _parse_level(level: str | None) -> int:
    """Level name to number; unknown or empty names mean WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
