"""Syntax-tree highlighting, indentation, selection and text objects."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING

from nvim_python.enums import Feature
from nvim_python.features.base import ActivationContext, FeatureSpec, Payload
from nvim_python.treesitter import PYTHON_GRAMMAR

if TYPE_CHECKING:
    from nvim_python.host import Host

NAMESPACE = "nvim-treesitter"
CONFIGS_MODULE = "nvim-treesitter.configs"

DEFAULT_TS_CONFIG: Payload = {
    "ensure_installed": [PYTHON_GRAMMAR],
    "highlight": {
        "enable": True,
        "additional_vim_regex_highlighting": False,
        "custom_captures": {
            "function.builtin": "Special",
            "class.definition": "Type",
            "decorator": "PreProc",
            "string.special": "SpecialChar",
            "variable.parameter.self": "Identifier",
        },
    },
    "indent": {"enable": True},
    "incremental_selection": {
        "enable": True,
        "keymaps": {
            "init_selection": "gnn",
            "node_incremental": "grn",
            "scope_incremental": "grc",
            "node_decremental": "grm",
        },
    },
    "textobjects": {
        "select": {
            "enable": True,
            "lookahead": True,
            "include_surrounding_whitespace": False,
            "keymaps": {
                "af": "@function.outer",
                "if": "@function.inner",
                "ac": "@class.outer",
                "ic": "@class.inner",
                "ad": "@decorator.outer",
                "id": "@decorator.inner",
            },
        },
        "move": {
            "enable": True,
            "set_jumps": True,
            "goto_next_start": {
                "]f": "@function.outer",
                "]c": "@class.outer",
                "]d": "@decorator.outer",
            },
            "goto_next_end": {
                "]F": "@function.outer",
                "]C": "@class.outer",
                "]D": "@decorator.outer",
            },
            "goto_previous_start": {
                "[f": "@function.outer",
                "[c": "@class.outer",
                "[d": "@decorator.outer",
            },
            "goto_previous_end": {
                "[F": "@function.outer",
                "[C": "@class.outer",
                "[D": "@decorator.outer",
            },
        },
        "swap": {
            "enable": True,
            "swap_next": {"<leader>a": "@parameter.inner"},
            "swap_previous": {"<leader>A": "@parameter.inner"},
        },
    },
}

# Expression folding from the syntax tree, all folds open to start.
FOLD_OPTIONS: tuple[tuple[str, object], ...] = (
    ("foldmethod", "expr"),
    ("foldexpr", "nvim_treesitter#foldexpr()"),
    ("foldenable", False),
)


def build_payload(ctx: ActivationContext) -> Payload:
    return copy.deepcopy(DEFAULT_TS_CONFIG)


def dispatch(host: Host, payload: Payload) -> None:
    host.require(CONFIGS_MODULE).setup(payload)
    for name, value in FOLD_OPTIONS:
        host.set_local_option(name, value)


SPEC = FeatureSpec(
    feature=Feature.TREESITTER,
    namespace=NAMESPACE,
    build=build_payload,
    dispatch=dispatch,
    description="Tree-sitter highlighting and text objects",
)
