"""Tests for nvim_python.core.probe — dependency status and install hints."""

from __future__ import annotations

import pytest

import nvim_python.treesitter as ts_mod
from nvim_python.core.probe import (
    CORE_DEPENDENCIES,
    DEPENDENCY_COMMANDS,
    DependencyStatus,
    detect_package_manager,
    probe,
    remediation_message,
)
from nvim_python.treesitter import grammar_available

# ===========================================================================
# probe
# ===========================================================================


class TestProbe:
    def test_all_present(self, all_tools, options_for):
        status = probe(options_for())
        assert all(status[name] for name in DEPENDENCY_COMMANDS)
        assert status.core_ok
        assert status.using_venv is False

    def test_nothing_present(self, path_tools, options_for):
        status = probe(options_for())
        assert status.as_dict() == {
            "python": False,
            "pip": False,
            "language-server": False,
            "linter": False,
            "using_venv": False,
            "grammar": False,
        }
        assert status.missing_core() == list(CORE_DEPENDENCIES)

    @pytest.mark.parametrize(
        "venv_path", ["/definitely/not/a/venv", "", "relative/venv", "bad\0venv"]
    )
    def test_never_raises_for_odd_venv_paths(self, path_tools, options_for, venv_path):
        status = probe(options_for(venv_path=venv_path))
        assert status.using_venv is False

    def test_using_venv(self, fake_venv, path_tools, options_for):
        status = probe(options_for(venv_path=str(fake_venv)))
        assert status.using_venv is True

    def test_venv_tools_count_as_present(self, fake_venv, path_tools, options_for):
        status = probe(options_for(venv_path=str(fake_venv)))
        assert status["python"] is True
        assert status["linter"] is True
        assert status["language-server"] is False
        assert status.missing_core() == ["language-server"]

    def test_missing_core_logs_warning(self, path_tools, options_for, caplog):
        path_tools["python3"] = "/usr/bin/python3"
        with caplog.at_level("WARNING", logger="nvim_python.core.probe"):
            probe(options_for())
        assert "language-server, linter" in caplog.text

    def test_pip_is_not_core(self, all_tools, options_for):
        del all_tools["pip3"]
        status = probe(options_for())
        assert status["pip"] is False
        assert status.core_ok

    def test_fresh_status_each_call(self, path_tools, options_for):
        opts = options_for()
        first = probe(opts)
        path_tools["ruff"] = "/usr/bin/ruff"
        second = probe(opts)
        assert first["linter"] is False
        assert second["linter"] is True

    def test_grammar_flag_from_treesitter_check(self, path_tools, options_for, monkeypatch):
        monkeypatch.setattr(ts_mod, "grammar_available", lambda grammar="python": True)
        assert probe(options_for()).grammar is True

    def test_real_grammar_check_never_raises(self, path_tools, options_for, monkeypatch):
        monkeypatch.setattr(ts_mod, "grammar_available", grammar_available)
        status = probe(options_for(venv_path="bad\0venv"))
        assert status.grammar is grammar_available()
        assert status.using_venv is False


class TestDependencyStatus:
    def test_unknown_name_is_absent(self):
        assert DependencyStatus()["anything"] is False

    def test_missing_core_order(self):
        status = DependencyStatus(present={"python": True})
        assert status.missing_core() == ["language-server", "linter"]


# ===========================================================================
# detect_package_manager / remediation_message
# ===========================================================================


class TestPackageManager:
    def test_none_found(self, path_tools):
        assert detect_package_manager() is None

    @pytest.mark.parametrize(
        "available, expected",
        [
            ({"brew"}, "brew"),
            ({"apt-get"}, "apt"),
            ({"dnf"}, "dnf"),
            ({"apt-get", "dnf"}, "apt"),
            ({"brew", "apt-get"}, "brew"),
        ],
    )
    def test_first_match_wins(self, path_tools, available, expected):
        path_tools.update({name: f"/usr/bin/{name}" for name in available})
        assert detect_package_manager() == expected


class TestRemediationMessage:
    def test_lists_missing_core_only(self):
        status = DependencyStatus(present={"python": True, "language-server": False, "linter": False})
        msg = remediation_message(status, "apt")
        assert msg.splitlines() == [
            "Missing dependencies. Please install:",
            "1. Pyright: npm install -g pyright",
            "2. Ruff: pip install ruff",
        ]

    @pytest.mark.parametrize(
        "manager, expected",
        [
            ("brew", "brew install python"),
            ("apt", "sudo apt install python3"),
            ("dnf", "sudo dnf install python3"),
            (None, "sudo apt install python3"),
        ],
    )
    def test_python_hint_per_manager(self, manager, expected):
        msg = remediation_message(DependencyStatus(), manager)
        assert f"1. Python 3: {expected}" in msg
