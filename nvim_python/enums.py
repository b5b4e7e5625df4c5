"""Canonical enums for features and setup outcomes.

StrEnum values compare equal to their string values (Feature.LSP == "lsp"),
so option tables keyed by plain strings keep working.
"""

from __future__ import annotations

import enum


class Feature(enum.StrEnum):
    LSP = "lsp"
    FORMATTER = "formatter"
    TREESITTER = "treesitter"
    COMPLETION = "completion"


# Activation order. lsp precedes completion so the LSP-backed completion
# source sees the server configured first.
FEATURE_ORDER: tuple[Feature, ...] = (
    Feature.LSP,
    Feature.FORMATTER,
    Feature.TREESITTER,
    Feature.COMPLETION,
)


class SetupStatus(enum.StrEnum):
    SUCCESS = "success"
    MISSING_HOST_PLUGIN = "missing_host_plugin"
    MISSING_DEPENDENCY = "missing_dependency"
