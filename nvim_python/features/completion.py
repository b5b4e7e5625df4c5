"""Completion engine configuration: sources, snippets, item formatting.

Source priority is LSP > snippets > paths > buffer words. The LSP source
drops plain ``Text`` items, which pyright emits for every word in a
docstring and which only crowd out real symbols.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from nvim_python.core.fallbacks import log_best_effort_failure
from nvim_python.enums import Feature
from nvim_python.features.base import ActivationContext, FeatureSpec, Payload

if TYPE_CHECKING:
    from nvim_python.host import Host

logger = logging.getLogger(__name__)

NAMESPACE = "cmp"
SNIPPET_PROVIDER = "luasnip"
FILETYPE = "python"
VSCODE_LOADER = "luasnip.loaders.from_vscode"
VSCODE_SNIPPET_PATHS: tuple[str, ...] = ("./snippets/python",)

SOURCE_PRIORITIES: tuple[tuple[str, int], ...] = (
    ("nvim_lsp", 1000),
    ("luasnip", 750),
    ("path", 500),
    ("buffer", 250),
)

SOURCE_LABELS = {
    "nvim_lsp": "[LSP]",
    "luasnip": "[Snippet]",
    "buffer": "[Buffer]",
    "path": "[Path]",
}

KIND_DECORATIONS = {
    "Class": "🔷 ",
    "Method": "📎 ",
}

KEY_MAPPINGS = {
    "<C-p>": "select_prev_item",
    "<C-n>": "select_next_item",
    "<C-d>": "scroll_docs_up",
    "<C-f>": "scroll_docs_down",
    "<C-Space>": "complete",
    "<C-e>": "close",
    "<CR>": "confirm_replace",
    "<Tab>": "select_next_or_expand_snippet",
    "<S-Tab>": "select_prev_or_jump_back",
}

COMPARATORS: tuple[str, ...] = (
    "exact",
    "score",
    "recently_used",
    "locality",
    "kind",
    "length",
)


@dataclass(frozen=True)
class Snippet:
    trigger: str
    body: tuple[str, ...]
    description: str = ""

    def as_dict(self) -> dict[str, Any]:
        return {
            "prefix": self.trigger,
            "body": list(self.body),
            "description": self.description,
        }


PYTHON_SNIPPETS: tuple[Snippet, ...] = (
    Snippet("main", ('if __name__ == "__main__":', "    $0"), "Main block"),
    Snippet(
        "class",
        ("class ${1:ClassName}:", '    """${2:Class description}"""', "    $0"),
        "Class definition with docstring",
    ),
    Snippet(
        "def",
        (
            "def ${1:function_name}($2):",
            '    """${3:Function description}"""',
            "    $0",
        ),
        "Function definition with docstring",
    ),
    Snippet("imp", ("import $0",), "Import statement"),
)


def drop_text_entries(entry: dict[str, Any], ctx: Any = None) -> bool:
    """Entry filter for the LSP source: keep everything but plain text."""
    return entry.get("kind") != "Text"


def format_completion_item(entry: dict[str, Any], item: dict[str, Any]) -> dict[str, Any]:
    """Tag the item with its source and decorate LSP functions/classes/methods."""
    source = entry.get("source", "")
    item["menu"] = SOURCE_LABELS.get(source)
    if source == "nvim_lsp":
        kind = item.get("kind")
        if kind == "Function":
            item["abbr"] = f"{item.get('abbr', '')}()"
        elif kind in KIND_DECORATIONS:
            item["kind"] = f"{KIND_DECORATIONS[kind]}{kind}"
    return item


def _sources(with_filter: bool) -> list[dict[str, Any]]:
    sources = []
    for name, priority in SOURCE_PRIORITIES:
        source: dict[str, Any] = {"name": name, "priority": priority}
        if with_filter and name == "nvim_lsp":
            source["entry_filter"] = drop_text_entries
        sources.append(source)
    return sources


def build_payload(ctx: ActivationContext) -> Payload:
    return {
        "snippet": {"provider": SNIPPET_PROVIDER},
        "window": {
            "completion": {
                "winhighlight": "Normal:Pmenu,FloatBorder:Pmenu,Search:None",
                "col_offset": -3,
                "side_padding": 0,
            },
        },
        "mapping": dict(KEY_MAPPINGS),
        "sources": _sources(with_filter=True),
        "sorting": {"comparators": list(COMPARATORS)},
        "formatting": {"format": format_completion_item},
        "experimental": {"native_menu": False, "ghost_text": True},
    }


def load_vscode_snippets(host: Host) -> None:
    """Lazy-load VSCode-format snippet files for Python, if the loader is loadable."""
    try:
        loader = host.require(VSCODE_LOADER)
        loader.lazy_load({"paths": list(VSCODE_SNIPPET_PATHS), "include": [FILETYPE]})
    except Exception as exc:  # loader ships with the optional snippet engine
        log_best_effort_failure(logger, "lazy-load VSCode snippets", exc)


def add_snippets(host: Host) -> None:
    """Register the Python snippets with the snippet engine, if it is loadable."""
    try:
        engine = host.require(SNIPPET_PROVIDER)
        engine.add_snippets(FILETYPE, [s.as_dict() for s in PYTHON_SNIPPETS])
    except Exception as exc:  # snippet engine is an optional companion plugin
        log_best_effort_failure(logger, "register Python snippets", exc)


def dispatch(host: Host, payload: Payload) -> None:
    load_vscode_snippets(host)
    add_snippets(host)
    cmp = host.require(NAMESPACE)
    cmp.setup(payload)
    cmp.setup.filetype(FILETYPE, {"sources": _sources(with_filter=False)})


SPEC = FeatureSpec(
    feature=Feature.COMPLETION,
    namespace=NAMESPACE,
    build=build_payload,
    dispatch=dispatch,
    description="Completion sources and Python snippets",
    plugin_name="nvim-cmp",
)
