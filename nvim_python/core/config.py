"""User options: schema, deep merge over defaults, persisted overrides.

The persisted file (``~/.config/nvim-python/config.json`` unless
``NVIM_PYTHON_CONFIG`` points elsewhere) holds only the user's overrides;
defaults always come from ``OPTION_SCHEMA`` so new keys pick up their
defaults without a migration.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from nvim_python.core.fallbacks import log_best_effort_failure
from nvim_python.enums import FEATURE_ORDER, Feature
from nvim_python.utils import write_text_atomic

logger = logging.getLogger(__name__)

CONFIG_FILE = Path(
    os.environ.get("NVIM_PYTHON_CONFIG", "~/.config/nvim-python/config.json")
).expanduser()
DEFAULT_VENV_PATH = "~/.venv"

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


@dataclass(frozen=True)
class ConfigKey:
    type: type
    default: object
    description: str


OPTION_SCHEMA: dict[str, ConfigKey] = {
    "venv_path": ConfigKey(
        str, DEFAULT_VENV_PATH, "Base path for preferring venv-local tool binaries"
    ),
    "python_path": ConfigKey(
        str, None, "Hard override for the interpreter path (unset = resolve)"
    ),
    "features": ConfigKey(
        dict,
        {str(feature): True for feature in FEATURE_ORDER},
        "Feature toggles {lsp, formatter, treesitter, completion}",
    ),
    "format_on_save": ConfigKey(
        bool, True, "Register a pre-save formatting hook"
    ),
}


def default_options() -> dict[str, Any]:
    """Return an options dict with all keys set to their defaults."""
    options = {k: copy.deepcopy(v.default) for k, v in OPTION_SCHEMA.items()}
    options["venv_path"] = os.path.expanduser(options["venv_path"])
    return options


# ── Deep merge ─────────────────────────────────────────────


def _shape_name(value: object) -> str:
    if isinstance(value, dict):
        return "table"
    if value is None:
        return "str"
    return type(value).__name__


def _same_shape(current: object, value: object) -> bool:
    """True when ``value`` may replace ``current`` without changing its shape."""
    if isinstance(current, dict) or isinstance(value, dict):
        return isinstance(current, dict) and isinstance(value, Mapping)
    if current is None:
        return isinstance(value, str)
    if isinstance(current, bool) or isinstance(value, bool):
        return isinstance(current, bool) and isinstance(value, bool)
    return isinstance(value, type(current))


def _merge_into(
    merged: dict,
    overrides: Mapping,
    prefix: str,
    rejected: list[str] | None,
) -> None:
    for key, value in overrides.items():
        dotted = f"{prefix}{key}"
        if key not in merged:
            logger.warning("Ignoring unknown option %r", dotted)
            if rejected is not None:
                rejected.append(dotted)
            continue
        if value is None:
            # nil-style override: leave the default in place
            continue
        current = merged[key]
        if not _same_shape(current, value):
            logger.warning(
                "Ignoring option %r: expected %s, got %s",
                dotted,
                _shape_name(current),
                type(value).__name__,
            )
            if rejected is not None:
                rejected.append(dotted)
            continue
        if isinstance(current, dict):
            _merge_into(current, value, f"{dotted}.", rejected)
        else:
            merged[key] = copy.deepcopy(value)


def merge_options(
    defaults: Mapping[str, Any],
    overrides: Mapping[str, Any] | None = None,
    rejected: list[str] | None = None,
) -> dict[str, Any]:
    """Deep-merge ``overrides`` over ``defaults`` and return a new dict.

    Nested tables merge key by key, scalars replace scalars. Keys missing
    from ``defaults`` and values of a different shape are ignored with a
    warning; their dotted paths are appended to ``rejected`` when given.
    Neither input is mutated.
    """
    merged = copy.deepcopy(dict(defaults))
    if overrides is None:
        return merged
    if not isinstance(overrides, Mapping):
        logger.warning(
            "Ignoring options: expected a table, got %s", type(overrides).__name__
        )
        if rejected is not None:
            rejected.append("<options>")
        return merged
    _merge_into(merged, overrides, "", rejected)
    return merged


def deep_update(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Force-merge ``override`` into a copy of ``base``; ``override`` wins everywhere."""
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = deep_update(current, value)
        else:
            merged[key] = value if callable(value) else copy.deepcopy(value)
    return merged


# ── Resolved options ───────────────────────────────────────


@dataclass(frozen=True)
class Options:
    """Fully resolved options, passed explicitly to every component."""

    venv_path: str
    python_path: str | None = None
    features: Mapping[Feature, bool] = field(
        default_factory=lambda: {feature: True for feature in FEATURE_ORDER}
    )
    format_on_save: bool = True

    def enabled(self, feature: Feature) -> bool:
        return bool(self.features.get(feature, False))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Options:
        venv_path = data.get("venv_path") or ""
        python_path = data.get("python_path") or None
        raw_features = data.get("features") or {}
        return cls(
            venv_path=os.path.expanduser(venv_path) if venv_path else "",
            python_path=os.path.expanduser(python_path) if python_path else None,
            features={
                feature: bool(raw_features.get(str(feature), False))
                for feature in FEATURE_ORDER
            },
            format_on_save=bool(data.get("format_on_save", True)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "venv_path": self.venv_path,
            "python_path": self.python_path,
            "features": {str(f): self.enabled(f) for f in FEATURE_ORDER},
            "format_on_save": self.format_on_save,
        }


def resolve_options(
    overrides: Mapping[str, Any] | None = None,
    rejected: list[str] | None = None,
) -> Options:
    """Merge overrides over the schema defaults into an ``Options`` value."""
    return Options.from_dict(merge_options(default_options(), overrides, rejected))


# ── Persisted overrides ────────────────────────────────────


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load stored overrides; missing or unreadable files yield ``{}``."""
    p = path or CONFIG_FILE
    if not p.exists():
        return {}
    try:
        config = json.loads(p.read_text())
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
        log_best_effort_failure(logger, f"read config {p}", exc)
        return {}
    if not isinstance(config, dict):
        logger.debug("Config %s is not a JSON object; ignoring it", p)
        return {}
    return config


def save_config(config: dict, path: Path | None = None) -> None:
    """Save overrides to disk atomically."""
    p = path or CONFIG_FILE
    write_text_atomic(p, json.dumps(config, indent=2) + "\n")


def _split_key(key: str) -> tuple[str, str | None]:
    top, _, sub = key.partition(".")
    if top not in OPTION_SCHEMA:
        raise KeyError(f"Unknown option: {key}")
    schema = OPTION_SCHEMA[top]
    if schema.type is dict:
        if not sub or sub not in schema.default:
            known = ", ".join(f"{top}.{name}" for name in schema.default)
            raise KeyError(f"Unknown option: {key} (expected one of {known})")
        return top, sub
    if sub:
        raise KeyError(f"Unknown option: {key}")
    return top, None


def _parse_bool(key: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    raise ValueError(f"Expected true/false for {key}, got: {raw}")


def set_config_value(config: dict, key: str, raw: str) -> None:
    """Parse and store a raw CLI string under a dotted option key.

    Handles special cases:
    - "features.<name>" and "format_on_save" take true/false style values
    - "python_path" takes "none" (or an empty string) to clear the override
    """
    top, sub = _split_key(key)
    if sub is not None:
        section = config.get(top)
        if not isinstance(section, dict):
            section = {}
            config[top] = section
        section[sub] = _parse_bool(key, raw)
        return

    schema = OPTION_SCHEMA[top]
    if schema.type is bool:
        config[top] = _parse_bool(key, raw)
    elif top == "python_path" and raw.strip().lower() in ("", "none"):
        config[top] = None
    else:
        if not raw.strip():
            raise ValueError(f"Expected a non-empty path for {key}")
        config[top] = raw.strip()


def unset_config_value(config: dict, key: str) -> None:
    """Drop a stored override so the default applies again."""
    top, sub = _split_key(key)
    if sub is None:
        config.pop(top, None)
        return
    section = config.get(top)
    if isinstance(section, dict):
        section.pop(sub, None)
        if not section:
            config.pop(top, None)


__all__ = [
    "CONFIG_FILE",
    "OPTION_SCHEMA",
    "ConfigKey",
    "Options",
    "deep_update",
    "default_options",
    "load_config",
    "merge_options",
    "resolve_options",
    "save_config",
    "set_config_value",
    "unset_config_value",
]
