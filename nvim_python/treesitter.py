"""Tree-sitter grammar check — optional, gracefully degrades when not installed.

Install with: pip install tree-sitter-language-pack

The editor's syntax engine parses buffers itself; this module only answers
whether the grammar it is told to install can be loaded locally, which
``doctor`` reports next to the executable checks.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

_AVAILABLE = False
try:
    import tree_sitter_language_pack  # noqa: F401

    _AVAILABLE = True
except ImportError:
    logger.debug("tree-sitter-language-pack not installed; grammar check disabled")


# Common exception tuple for tree-sitter parser/language initialisation failures.
PARSE_INIT_ERRORS: tuple[type[Exception], ...] = (
    ImportError, OSError, ValueError, RuntimeError, LookupError
)

PYTHON_GRAMMAR = "python"


def is_available() -> bool:
    """Return True if tree-sitter-language-pack is installed."""
    return _AVAILABLE


def grammar_available(grammar: str = PYTHON_GRAMMAR) -> bool:
    """True when a parser for ``grammar`` can be built."""
    if not _AVAILABLE:
        return False
    try:
        from tree_sitter_language_pack import get_parser

        get_parser(grammar)
    except PARSE_INIT_ERRORS as exc:
        logger.debug("tree-sitter grammar %r unavailable: %s", grammar, exc)
        return False
    return True


__all__ = [
    "PARSE_INIT_ERRORS",
    "PYTHON_GRAMMAR",
    "grammar_available",
    "is_available",
]
