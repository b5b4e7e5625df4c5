"""Interpreter and tool path resolution.

Precedence for the interpreter, first satisfied wins:
  1. ``options.python_path`` when non-empty
  2. ``{venv_path}/bin/python3`` when executable
  3. ``python3`` located on PATH

Paths are computed on every call and never cached, so a venv created
mid-session is picked up by the next lookup.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from nvim_python.core.config import Options

logger = logging.getLogger(__name__)

PYTHON_EXECUTABLE = "python3"


def is_executable(path: str | Path) -> bool:
    """True iff ``path`` is a regular file with the execute bit set."""
    try:
        p = Path(path)
        return p.is_file() and os.access(p, os.X_OK)
    except (OSError, ValueError):
        return False


def venv_bin(options: Options, name: str) -> Path | None:
    """Path of ``name`` inside the venv's bin directory, or None without a venv."""
    if not options.venv_path:
        return None
    return Path(options.venv_path) / "bin" / name


def venv_python(options: Options) -> str | None:
    """The venv interpreter when it exists and is executable."""
    candidate = venv_bin(options, PYTHON_EXECUTABLE)
    if candidate is not None and is_executable(candidate):
        return str(candidate)
    return None


def which(name: str) -> str:
    """Locate ``name`` on PATH; ``""`` when it cannot be found."""
    try:
        return shutil.which(name) or ""
    except OSError as exc:
        logger.debug("PATH lookup for %s failed: %s", name, exc)
        return ""


def resolve_python_path(options: Options) -> str:
    """Pick the interpreter to hand to the language server.

    Never raises; returns ``""`` when no interpreter can be found and lets
    the caller decide what to do about it.
    """
    if options.python_path:
        return options.python_path
    found = venv_python(options)
    if found:
        return found
    found = which(PYTHON_EXECUTABLE)
    if not found:
        logger.debug("No %s found in venv %r or on PATH", PYTHON_EXECUTABLE, options.venv_path)
    return found


def resolve_tool_path(tool_name: str, options: Options) -> str:
    """Prefer ``{venv_path}/bin/{tool_name}``; fall back to the bare name."""
    candidate = venv_bin(options, tool_name)
    if candidate is not None and is_executable(candidate):
        return str(candidate)
    return tool_name


__all__ = [
    "is_executable",
    "resolve_python_path",
    "resolve_tool_path",
    "venv_bin",
    "venv_python",
    "which",
]
