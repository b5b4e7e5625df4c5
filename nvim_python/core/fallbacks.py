"""Reporting for optional steps that may fail without stopping setup."""

from __future__ import annotations

import logging
import sys

from nvim_python.utils import colorize

PREFIX = "nvim-python"


def log_best_effort_failure(
    logger: logging.Logger, action: str, exc: Exception
) -> None:
    """Debug-log an optional step that failed; the caller carries on without it."""
    logger.debug("Optional step skipped (could not %s): %s", action, exc)


def _emit(label: str, message: str, color: str) -> None:
    first, *rest = message.splitlines() or [""]
    lines = [f"{PREFIX}: {label}: {first}", *(f"    {line}" for line in rest)]
    print(colorize("\n".join(lines), color, sys.stderr), file=sys.stderr)


def print_error(message: str) -> None:
    """User-facing error on stderr."""
    _emit("error", message, "red")


def print_warning(message: str) -> None:
    """User-facing warning on stderr; continuation lines are indented."""
    _emit("warning", message, "yellow")


__all__ = [
    "log_best_effort_failure",
    "print_error",
    "print_warning",
]
