"""Tests for nvim_python.core.config — option merge and persisted overrides."""

import json
import logging
import os

import pytest

from nvim_python.core.config import (
    OPTION_SCHEMA,
    Options,
    deep_update,
    default_options,
    load_config,
    merge_options,
    resolve_options,
    save_config,
    set_config_value,
    unset_config_value,
)
from nvim_python.enums import FEATURE_ORDER, Feature

# ===========================================================================
# default_options
# ===========================================================================


class TestDefaultOptions:
    def test_returns_all_keys(self):
        opts = default_options()
        for key in OPTION_SCHEMA:
            assert key in opts

    def test_default_values(self):
        opts = default_options()
        assert opts["venv_path"] == os.path.expanduser("~/.venv")
        assert opts["python_path"] is None
        assert opts["features"] == {
            "lsp": True,
            "formatter": True,
            "treesitter": True,
            "completion": True,
        }
        assert opts["format_on_save"] is True

    def test_fresh_copy_each_call(self):
        first = default_options()
        first["features"]["lsp"] = False
        assert default_options()["features"]["lsp"] is True


# ===========================================================================
# merge_options
# ===========================================================================


OVERRIDE_CASES = [
    {},
    {"format_on_save": False},
    {"venv_path": "/srv/app/.venv"},
    {"python_path": "/opt/python/bin/python3"},
    {"features": {"completion": False}},
    {"features": {"lsp": False, "treesitter": False}, "format_on_save": False},
]


class TestMergeOptions:
    @pytest.mark.parametrize("overrides", OVERRIDE_CASES)
    def test_result_has_every_default_key(self, overrides):
        defaults = default_options()
        merged = merge_options(defaults, overrides)
        assert set(merged) == set(defaults)
        assert set(merged["features"]) == set(defaults["features"])

    @pytest.mark.parametrize("overrides", OVERRIDE_CASES)
    def test_override_values_win(self, overrides):
        merged = merge_options(default_options(), overrides)
        for key, value in overrides.items():
            if isinstance(value, dict):
                for sub, sub_value in value.items():
                    assert merged[key][sub] == sub_value
            else:
                assert merged[key] == value

    @pytest.mark.parametrize("overrides", OVERRIDE_CASES)
    def test_idempotent(self, overrides):
        merged = merge_options(default_options(), overrides)
        assert merge_options(merged, {}) == merged
        assert merge_options(merged, None) == merged

    def test_nested_tables_merge_not_replace(self):
        merged = merge_options(default_options(), {"features": {"completion": False}})
        assert merged["features"] == {
            "lsp": True,
            "formatter": True,
            "treesitter": True,
            "completion": False,
        }

    def test_inputs_not_mutated(self):
        defaults = default_options()
        overrides = {"features": {"lsp": False}}
        merge_options(defaults, overrides)
        assert defaults["features"]["lsp"] is True
        assert overrides == {"features": {"lsp": False}}

    def test_unknown_key_ignored_with_warning(self, caplog):
        rejected = []
        with caplog.at_level(logging.WARNING, logger="nvim_python.core.config"):
            merged = merge_options(default_options(), {"fromat_on_save": False}, rejected)
        assert "fromat_on_save" not in merged
        assert merged["format_on_save"] is True
        assert rejected == ["fromat_on_save"]
        assert "fromat_on_save" in caplog.text

    def test_unknown_nested_key_uses_dotted_path(self):
        rejected = []
        merged = merge_options(default_options(), {"features": {"debugger": True}}, rejected)
        assert "debugger" not in merged["features"]
        assert rejected == ["features.debugger"]

    @pytest.mark.parametrize(
        "overrides, dotted",
        [
            ({"features": True}, "features"),
            ({"format_on_save": "yes"}, "format_on_save"),
            ({"format_on_save": 1}, "format_on_save"),
            ({"venv_path": {"path": "/x"}}, "venv_path"),
            ({"venv_path": 3}, "venv_path"),
            ({"features": {"lsp": "off"}}, "features.lsp"),
        ],
    )
    def test_shape_mismatch_ignored(self, overrides, dotted):
        rejected = []
        merged = merge_options(default_options(), overrides, rejected)
        assert merged == default_options()
        assert rejected == [dotted]

    def test_none_override_keeps_default(self):
        merged = merge_options(default_options(), {"format_on_save": None})
        assert merged["format_on_save"] is True

    def test_python_path_accepts_string_over_none_default(self):
        merged = merge_options(default_options(), {"python_path": "/usr/bin/python3.12"})
        assert merged["python_path"] == "/usr/bin/python3.12"

    def test_non_mapping_overrides_rejected(self):
        rejected = []
        merged = merge_options(default_options(), ["lsp"], rejected)
        assert merged == default_options()
        assert rejected == ["<options>"]

    def test_feature_enum_keys_accepted(self):
        merged = merge_options(default_options(), {"features": {Feature.LSP: False}})
        assert merged["features"]["lsp"] is False


class TestDeepUpdate:
    def test_override_wins_and_nested_kept(self):
        base = {"a": {"b": 1, "c": 2}, "d": 3}
        out = deep_update(base, {"a": {"b": 10}, "e": 5})
        assert out == {"a": {"b": 10, "c": 2}, "d": 3, "e": 5}
        assert base == {"a": {"b": 1, "c": 2}, "d": 3}

    def test_callables_kept_by_identity(self):
        def hook():
            return None

        out = deep_update({}, {"on_attach": hook})
        assert out["on_attach"] is hook


# ===========================================================================
# resolve_options / Options
# ===========================================================================


class TestResolveOptions:
    def test_defaults(self):
        opts = resolve_options()
        assert opts.venv_path == os.path.expanduser("~/.venv")
        assert opts.python_path is None
        assert all(opts.enabled(f) for f in FEATURE_ORDER)
        assert opts.format_on_save is True

    def test_features_keyed_by_enum(self):
        opts = resolve_options({"features": {"completion": False}})
        assert opts.features[Feature.COMPLETION] is False
        assert opts.enabled(Feature.LSP) is True

    def test_user_paths_expanded(self):
        opts = resolve_options({"venv_path": "~/proj/.venv", "python_path": "~/bin/py"})
        assert opts.venv_path == os.path.expanduser("~/proj/.venv")
        assert opts.python_path == os.path.expanduser("~/bin/py")

    def test_empty_python_path_means_unset(self):
        assert resolve_options({"python_path": ""}).python_path is None

    def test_rejected_collected(self):
        rejected = []
        resolve_options({"nope": 1}, rejected)
        assert rejected == ["nope"]

    def test_to_dict_round_trips(self):
        opts = resolve_options({"features": {"treesitter": False}, "format_on_save": False})
        assert Options.from_dict(opts.to_dict()) == opts

    def test_options_are_immutable(self):
        opts = resolve_options()
        with pytest.raises(AttributeError):
            opts.format_on_save = False


# ===========================================================================
# load_config / save_config
# ===========================================================================


class TestLoadSaveConfig:
    def test_no_file_returns_empty(self, tmp_path):
        assert load_config(tmp_path / "config.json") == {}

    def test_round_trip(self, tmp_path):
        p = tmp_path / "nested" / "config.json"
        save_config({"format_on_save": False, "features": {"lsp": False}}, p)
        assert load_config(p) == {"format_on_save": False, "features": {"lsp": False}}

    def test_corrupted_file_returns_empty(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text("not valid json{{{")
        assert load_config(p) == {}

    def test_non_object_returns_empty(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text(json.dumps(["lsp"]))
        assert load_config(p) == {}


# ===========================================================================
# set_config_value / unset_config_value
# ===========================================================================


class TestSetConfigValue:
    def test_set_feature_toggle(self):
        config = {}
        set_config_value(config, "features.completion", "off")
        assert config == {"features": {"completion": False}}

    def test_set_bool(self):
        config = {}
        set_config_value(config, "format_on_save", "no")
        assert config["format_on_save"] is False
        set_config_value(config, "format_on_save", "TRUE")
        assert config["format_on_save"] is True

    def test_set_path(self):
        config = {}
        set_config_value(config, "venv_path", " /srv/.venv ")
        assert config["venv_path"] == "/srv/.venv"

    def test_clear_python_path(self):
        config = {"python_path": "/usr/bin/python3"}
        set_config_value(config, "python_path", "none")
        assert config["python_path"] is None

    def test_invalid_bool(self):
        with pytest.raises(ValueError):
            set_config_value({}, "format_on_save", "maybe")

    def test_empty_venv_path_rejected(self):
        with pytest.raises(ValueError):
            set_config_value({}, "venv_path", "  ")

    @pytest.mark.parametrize("key", ["nope", "features", "features.debugger", "venv_path.x"])
    def test_unknown_key(self, key):
        with pytest.raises(KeyError):
            set_config_value({}, key, "true")

    def test_stored_overrides_merge_cleanly(self):
        config = {}
        set_config_value(config, "features.lsp", "false")
        set_config_value(config, "python_path", "/opt/py")
        rejected = []
        opts = resolve_options(config, rejected)
        assert rejected == []
        assert opts.enabled(Feature.LSP) is False
        assert opts.python_path == "/opt/py"


class TestUnsetConfigValue:
    def test_unset_top_level(self):
        config = {"format_on_save": False}
        unset_config_value(config, "format_on_save")
        assert config == {}

    def test_unset_feature_drops_empty_section(self):
        config = {"features": {"lsp": False}}
        unset_config_value(config, "features.lsp")
        assert config == {}

    def test_unset_feature_keeps_siblings(self):
        config = {"features": {"lsp": False, "completion": False}}
        unset_config_value(config, "features.lsp")
        assert config == {"features": {"completion": False}}

    def test_unset_missing_is_noop(self):
        config = {}
        unset_config_value(config, "python_path")
        assert config == {}

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            unset_config_value({}, "nope")
