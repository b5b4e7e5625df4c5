"""CLI entry point: argparse, subcommand routing, shared helpers."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from nvim_python.core.config import (
    CONFIG_FILE,
    deep_update,
    load_config,
    resolve_options,
    save_config,
    set_config_value,
    unset_config_value,
)
from nvim_python.core.fallbacks import print_error, print_warning
from nvim_python.core.paths import resolve_python_path
from nvim_python.core.probe import (
    CORE_DEPENDENCIES,
    DEPENDENCY_COMMANDS,
    detect_package_manager,
    probe,
    remediation_message,
)
from nvim_python.enums import FEATURE_ORDER
from nvim_python.utils import check_mark, colorize, print_table

USAGE_EXAMPLES = """
examples:
  nvim-python doctor
  nvim-python setup --disable completion
  nvim-python setup --json > payloads.json
  nvim-python config set venv_path ~/projects/app/.venv
  nvim-python config set features.treesitter false
  nvim-python config unset python_path
"""


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nvim-python",
        description="nvim-python — Python development preset for the editor",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=str, default=None,
                        help=f"Override file (default: {CONFIG_FILE})")
    sub = parser.add_subparsers(dest="command", required=True)

    p_doctor = sub.add_parser("doctor", help="Check external tools and interpreter resolution")
    p_doctor.add_argument("--json", action="store_true")

    p_setup = sub.add_parser("setup", help="Dry-run setup and show the payloads it dispatches")
    p_setup.add_argument("--json", action="store_true")
    p_setup.add_argument("--disable", nargs="+", default=[], metavar="FEATURE",
                         choices=[str(f) for f in FEATURE_ORDER],
                         help="Features to switch off for this run")

    p_config = sub.add_parser("config", help="Show or edit stored option overrides")
    config_sub = p_config.add_subparsers(dest="config_action", required=True)
    config_sub.add_parser("show", help="Print stored overrides and effective options")
    p_set = config_sub.add_parser("set", help="Store an override (e.g. features.lsp false)")
    p_set.add_argument("key")
    p_set.add_argument("value")
    p_unset = config_sub.add_parser("unset", help="Remove an override")
    p_unset.add_argument("key")
    return parser


def _config_path(args: argparse.Namespace) -> Path:
    raw = getattr(args, "config", None)
    return Path(raw).expanduser() if raw else CONFIG_FILE


def _describe_callable(value: Any) -> str:
    target = getattr(value, "func", value)
    return f"<callable {getattr(target, '__name__', type(target).__name__)}>"


def jsonable(value: Any) -> Any:
    """Render a payload for JSON output; callables become ``<callable name>``."""
    if isinstance(value, dict):
        return {str(k): jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(v) for v in value]
    if callable(value):
        return _describe_callable(value)
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return repr(value)


# ── doctor ─────────────────────────────────────────────────


def cmd_doctor(args: argparse.Namespace) -> int:
    options = resolve_options(load_config(_config_path(args)))
    status = probe(options)
    python_path = resolve_python_path(options)
    package_manager = detect_package_manager()

    if args.json:
        print(json.dumps({
            "dependencies": status.as_dict(),
            "python_path": python_path,
            "package_manager": package_manager,
            "missing_core": status.missing_core(),
        }, indent=2))
        return 0 if status.core_ok else 1

    rows = []
    for name, command in DEPENDENCY_COMMANDS.items():
        core = "core" if name in CORE_DEPENDENCIES else ""
        rows.append([name, command, check_mark(status[name]), core])
    print_table(["Dependency", "Executable", "Found", ""], rows)
    print()
    print(f"  Interpreter:      {python_path or colorize('not found', 'red')}")
    print(f"  Using venv:       {check_mark(status.using_venv)} ({options.venv_path})")
    print(f"  Python grammar:   {check_mark(status.grammar)}")
    print(f"  Package manager:  {package_manager or 'unknown'}")

    if not status.core_ok:
        print()
        print_warning(remediation_message(status, package_manager))
        return 1
    print(colorize("\n  All core dependencies found.", "green"))
    return 0


# ── setup (dry run) ────────────────────────────────────────


def cmd_setup(args: argparse.Namespace) -> int:
    from nvim_python.activator import setup
    from nvim_python.host import RecordingHost

    overrides = load_config(_config_path(args))
    if args.disable:
        overrides = deep_update(overrides, {"features": {name: False for name in args.disable}})

    host = RecordingHost()
    result = setup(overrides, host=host)
    payloads = jsonable(host.dispatched())

    if args.json:
        print(json.dumps({"result": result.as_dict(), "payloads": payloads}, indent=2))
        return 0 if result.ok else 1

    color = "green" if result.ok else "yellow"
    print(colorize(f"  Status: {result.status}", color))
    print(f"  Activated: {', '.join(map(str, result.activated)) or 'none'}")
    if result.skipped:
        print(f"  Skipped:   {', '.join(map(str, result.skipped))}")
    for feature, error in result.failed.items():
        print_error(f"{feature}: {error}")
    for target, calls in payloads.items():
        print(colorize(f"\n{target}", "bold"))
        for payload in calls:
            print(json.dumps(payload, indent=2))
    return 0 if result.ok else 1


# ── config ─────────────────────────────────────────────────


def cmd_config(args: argparse.Namespace) -> int:
    path = _config_path(args)
    config = load_config(path)

    if args.config_action == "show":
        print(json.dumps({
            "file": str(path),
            "overrides": config,
            "effective": resolve_options(config).to_dict(),
        }, indent=2))
        return 0

    try:
        if args.config_action == "set":
            set_config_value(config, args.key, args.value)
        else:
            unset_config_value(config, args.key)
    except (KeyError, ValueError) as ex:
        print_error(str(ex.args[0]) if ex.args else str(ex))
        return 2
    save_config(config, path)
    print(colorize(f"  Saved {path}", "green"))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    commands = {
        "doctor": cmd_doctor,
        "setup": cmd_setup,
        "config": cmd_config,
    }
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
