"""Shared fixtures: fake venvs, a controllable PATH, a recording host."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

import nvim_python.treesitter as ts_mod
from nvim_python.core.config import resolve_options
from nvim_python.core.paths import is_executable
from nvim_python.host import RecordingHost

ALL_TOOLS = {
    "python3": "/usr/bin/python3",
    "pip3": "/usr/bin/pip3",
    "pyright-langserver": "/usr/local/bin/pyright-langserver",
    "ruff": "/usr/local/bin/ruff",
}


def make_executable(path: Path, mode: int = 0o755) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(mode)
    return path


@pytest.fixture
def make_exe():
    return make_executable


@pytest.fixture
def fake_venv(tmp_path) -> Path:
    """A venv directory with executable bin/python3 and bin/ruff."""
    venv = tmp_path / "venv"
    make_executable(venv / "bin" / "python3")
    make_executable(venv / "bin" / "ruff")
    return venv


@pytest.fixture
def path_tools(monkeypatch) -> dict[str, str]:
    """Mutable name -> path map standing in for what PATH can resolve.

    Absolute paths resolve when they point at an executable file, bare names
    only when present in the map.
    """
    found: dict[str, str] = {}

    def fake_which(name, *args, **kwargs):
        if Path(name).is_absolute():
            return str(name) if is_executable(name) else None
        return found.get(name)

    monkeypatch.setattr(shutil, "which", fake_which)
    return found


@pytest.fixture
def all_tools(path_tools) -> dict[str, str]:
    path_tools.update(ALL_TOOLS)
    return path_tools


@pytest.fixture(autouse=True)
def _no_grammar_probe(monkeypatch):
    """Keep the tree-sitter grammar check out of probe/activation tests."""
    monkeypatch.setattr(ts_mod, "grammar_available", lambda grammar="python": False)


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def options_for(tmp_path):
    """Build resolved Options from overrides; venv defaults to a missing dir."""

    def _build(**overrides):
        overrides.setdefault("venv_path", str(tmp_path / "no-venv"))
        return resolve_options(overrides)

    return _build
