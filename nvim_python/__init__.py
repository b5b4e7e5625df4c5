"""Python development preset: language server, ruff, tree-sitter, completion.

Typical use from a host::

    from nvim_python import setup

    result = setup({"venv_path": "~/work/.venv", "features": {"completion": False}})
"""

from nvim_python.activator import SetupResult, activate, setup
from nvim_python.core.config import Options, merge_options, resolve_options
from nvim_python.enums import Feature, SetupStatus

__version__ = "0.1.0"

__all__ = [
    "Feature",
    "Options",
    "SetupResult",
    "SetupStatus",
    "activate",
    "merge_options",
    "resolve_options",
    "setup",
]
