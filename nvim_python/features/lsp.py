"""Pyright language-server configuration.

Basic type checking catches the common errors without flooding the
diagnostics list; library code is used for types and the whole workspace
is analysed so cross-file errors show up before the file is opened.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Any

from nvim_python.core.config import deep_update
from nvim_python.core.fallbacks import log_best_effort_failure
from nvim_python.core.paths import resolve_python_path, resolve_tool_path
from nvim_python.enums import Feature
from nvim_python.features.base import ActivationContext, FeatureSpec, Payload

if TYPE_CHECKING:
    from nvim_python.host import Host

logger = logging.getLogger(__name__)

NAMESPACE = "lspconfig"
SERVER_COMMAND = "pyright-langserver"

DEFAULT_PYRIGHT_CONFIG: Payload = {
    "settings": {
        "python": {
            "analysis": {
                "typeCheckingMode": "basic",
                "autoSearchPaths": True,
                "useLibraryCodeForTypes": True,
                "diagnosticMode": "workspace",
                "diagnosticSeverityOverrides": {
                    "reportGeneralTypeIssues": "warning",
                    "reportOptionalMemberAccess": "information",
                    "reportOptionalSubscript": "warning",
                    "reportPrivateImportUsage": "information",
                },
            },
        },
    },
}

# (mode, lhs, action, description)
LSP_KEYMAPS: tuple[tuple[str, str, str, str], ...] = (
    ("n", "gd", "lsp.buf.definition", "Go to definition"),
    ("n", "gr", "lsp.buf.references", "List references"),
    ("n", "gD", "lsp.buf.declaration", "Go to declaration"),
    ("n", "gi", "lsp.buf.implementation", "Go to implementation"),
    ("n", "K", "lsp.buf.hover", "Hover documentation"),
    ("n", "<C-k>", "lsp.buf.signature_help", "Signature help"),
    ("n", "<leader>rn", "lsp.buf.rename", "Rename symbol"),
    ("n", "<leader>ca", "lsp.buf.code_action", "Code action"),
    ("n", "[d", "diagnostic.goto_prev", "Previous diagnostic"),
    ("n", "]d", "diagnostic.goto_next", "Next diagnostic"),
    ("n", "<leader>dl", "diagnostic.setloclist", "Diagnostics to location list"),
    ("n", "<leader>df", "diagnostic.open_float", "Diagnostic float"),
)


def _set_capability(client: Any, name: str, value: Any) -> None:
    caps = getattr(client, "server_capabilities", None)
    if isinstance(caps, dict):
        caps[name] = value
    elif caps is not None:
        setattr(caps, name, value)


def _get_capability(client: Any, name: str) -> Any:
    caps = getattr(client, "server_capabilities", None)
    if isinstance(caps, dict):
        return caps.get(name)
    return getattr(caps, name, None)


def _enable_workspace_configuration(client: Any) -> None:
    workspace = getattr(client, "workspace", None)
    if isinstance(workspace, dict):
        workspace["configuration"] = True
    elif workspace is not None:
        workspace.configuration = True
    else:
        client.workspace = {"configuration": True}


def on_attach(host: Host, format_on_save: bool, client: Any, bufnr: int) -> None:
    """Buffer-local setup run when the server attaches.

    Installs the LSP keymaps, hands formatting to the server only when
    ``format_on_save`` is on, and answers ``workspace/configuration``
    requests when the server advertises workspace support.
    """
    for mode, lhs, action, desc in LSP_KEYMAPS:
        host.set_keymap(mode, lhs, action, buffer=bufnr, desc=desc)
    _set_capability(client, "documentFormattingProvider", format_on_save)
    if _get_capability(client, "workspace"):
        _enable_workspace_configuration(client)


def completion_capabilities(host: Host) -> Any:
    """Client capabilities advertised by the completion engine, if loadable."""
    try:
        return host.require("cmp_nvim_lsp").default_capabilities()
    except Exception as exc:  # optional companion plugin
        log_best_effort_failure(logger, "load cmp_nvim_lsp capabilities", exc)
        return None


def build_payload(ctx: ActivationContext) -> Payload:
    options = ctx.options
    python_path = resolve_python_path(options)
    if not python_path:
        logger.warning("No Python interpreter found; pyright will use its own default")

    payload = deep_update(DEFAULT_PYRIGHT_CONFIG, {
        "cmd": [resolve_tool_path(SERVER_COMMAND, options), "--stdio"],
        "settings": {"python": {"pythonPath": python_path}},
        "on_attach": partial(on_attach, ctx.host, options.format_on_save),
    })
    if options.enabled(Feature.COMPLETION):
        capabilities = completion_capabilities(ctx.host)
        if capabilities is not None:
            payload["capabilities"] = capabilities
    return payload


def dispatch(host: Host, payload: Payload) -> None:
    host.require(NAMESPACE).pyright.setup(payload)


SPEC = FeatureSpec(
    feature=Feature.LSP,
    namespace=NAMESPACE,
    build=build_payload,
    dispatch=dispatch,
    description="Pyright language server",
)
