"""Ruff as formatter and linter, wired through null-ls."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any

from nvim_python.core.paths import resolve_tool_path
from nvim_python.enums import Feature
from nvim_python.features.base import ActivationContext, FeatureSpec, Payload

if TYPE_CHECKING:
    from nvim_python.host import Host

NAMESPACE = "null-ls"
RUFF_COMMAND = "ruff"
FORMAT_TIMEOUT_MS = 2000

# E/W pycodestyle, F pyflakes, I isort, N pep8-naming, B bugbear,
# A builtins, C4 comprehensions, UP pyupgrade, RUF ruff-specific
RUFF_RULES = "E,F,W,I,N,B,A,C4,UP,RUF"

RUFF_EXTRA_ARGS: tuple[str, ...] = (
    f"--select={RUFF_RULES}",
    "--line-length=80",
    "--target-version=py37",
    "--fix",
    "--unsafe-fixes",
    "--extend-ignore=E203",  # whitespace before ':' (Black compatibility)
)

DIAGNOSTICS_FORMAT = "#{m} [#{c}]"


def format_buffer(host: Host, bufnr: int) -> None:
    host.format_buffer(bufnr, timeout_ms=FORMAT_TIMEOUT_MS)


def on_attach(host: Host, format_on_save: bool, client: Any, bufnr: int) -> None:
    """Register the pre-save hook (if enabled) and the :Format command."""
    callback = partial(format_buffer, host, bufnr)
    if format_on_save:
        host.create_autocmd("BufWritePre", buffer=bufnr, callback=callback)
    host.create_user_command(
        bufnr, "Format", callback, desc="Format current buffer with Ruff"
    )


def build_payload(ctx: ActivationContext) -> Payload:
    command = resolve_tool_path(RUFF_COMMAND, ctx.options)
    return {
        "sources": [
            {
                "builtin": "formatting.ruff",
                "command": command,
                "extra_args": list(RUFF_EXTRA_ARGS),
            },
            {
                "builtin": "diagnostics.ruff",
                "command": command,
                "extra_args": list(RUFF_EXTRA_ARGS),
                "diagnostics_format": DIAGNOSTICS_FORMAT,
            },
        ],
        "on_attach": partial(on_attach, ctx.host, ctx.options.format_on_save),
    }


def dispatch(host: Host, payload: Payload) -> None:
    host.require(NAMESPACE).setup(payload)


SPEC = FeatureSpec(
    feature=Feature.FORMATTER,
    namespace=NAMESPACE,
    build=build_payload,
    dispatch=dispatch,
    description="Ruff formatting and diagnostics",
)
