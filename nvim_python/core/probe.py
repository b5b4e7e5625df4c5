"""Dependency probing and install hints."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from nvim_python import treesitter
from nvim_python.core.config import Options
from nvim_python.core.paths import resolve_tool_path, venv_python, which

logger = logging.getLogger(__name__)

# dependency name -> executable looked up for it
DEPENDENCY_COMMANDS: dict[str, str] = {
    "python": "python3",
    "pip": "pip3",
    "language-server": "pyright-langserver",
    "linter": "ruff",
}

CORE_DEPENDENCIES: tuple[str, ...] = ("python", "language-server", "linter")

# Checked in order; first hit wins.
PACKAGE_MANAGERS: tuple[tuple[str, str], ...] = (
    ("brew", "brew"),
    ("apt", "apt-get"),
    ("dnf", "dnf"),
)

_PYTHON_INSTALL = {
    "brew": "brew install python",
    "dnf": "sudo dnf install python3",
    "apt": "sudo apt install python3",
}


@dataclass
class DependencyStatus:
    """Presence of each external tool, computed fresh per setup call."""

    present: dict[str, bool] = field(default_factory=dict)
    using_venv: bool = False
    grammar: bool = False

    def __getitem__(self, name: str) -> bool:
        return self.present.get(name, False)

    def missing_core(self) -> list[str]:
        return [name for name in CORE_DEPENDENCIES if not self[name]]

    @property
    def core_ok(self) -> bool:
        return not self.missing_core()

    def as_dict(self) -> dict[str, bool]:
        return {**self.present, "using_venv": self.using_venv, "grammar": self.grammar}


def command_exists(command: str) -> bool:
    """True iff ``command`` resolves to something executable."""
    return bool(which(command))


def probe(options: Options) -> DependencyStatus:
    """Check every known dependency. Never raises; absence is ``False``."""
    status = DependencyStatus()
    for name, command in DEPENDENCY_COMMANDS.items():
        try:
            status.present[name] = command_exists(resolve_tool_path(command, options))
        except (OSError, ValueError) as exc:
            logger.debug("Probe for %s (%s) failed: %s", name, command, exc)
            status.present[name] = False
    status.using_venv = venv_python(options) is not None
    status.grammar = treesitter.grammar_available()

    missing = status.missing_core()
    if missing:
        logger.warning("Missing core dependencies: %s", ", ".join(missing))
    return status


def detect_package_manager() -> str | None:
    """Return the system package manager (brew, apt or dnf), or None."""
    for name, command in PACKAGE_MANAGERS:
        if command_exists(command):
            return name
    return None


def remediation_message(status: DependencyStatus, package_manager: str | None) -> str:
    """Install instructions for the missing core dependencies."""
    python_cmd = _PYTHON_INSTALL.get(package_manager or "apt", _PYTHON_INSTALL["apt"])
    steps = {
        "python": f"Python 3: {python_cmd}",
        "language-server": "Pyright: npm install -g pyright",
        "linter": "Ruff: pip install ruff",
    }
    missing = status.missing_core() or list(CORE_DEPENDENCIES)
    lines = ["Missing dependencies. Please install:"]
    lines.extend(f"{i}. {steps[name]}" for i, name in enumerate(missing, start=1))
    return "\n".join(lines)


__all__ = [
    "CORE_DEPENDENCIES",
    "DEPENDENCY_COMMANDS",
    "DependencyStatus",
    "command_exists",
    "detect_package_manager",
    "probe",
    "remediation_message",
]
