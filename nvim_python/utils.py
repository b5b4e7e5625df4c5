"""Terminal output for the CLI and the import host, plus the config file writer."""

from __future__ import annotations

import os
import stat
import sys
import tempfile
from pathlib import Path
from typing import TextIO

# ── Config file writes ─────────────────────────────────────


def write_text_atomic(filepath: str | Path, content: str) -> None:
    """Replace ``filepath`` with ``content`` in one rename.

    The file keeps its permission bits when it already exists, so a config
    made private by the user stays private after ``config set``.
    """
    target = Path(filepath)
    target.parent.mkdir(parents=True, exist_ok=True)
    mode = stat.S_IMODE(target.stat().st_mode) if target.exists() else None

    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=target.parent,
        prefix=f".{target.name}.",
        suffix=".tmp",
        delete=False,
    ) as handle:
        handle.write(content)
        tmp = Path(handle.name)
    try:
        if mode is not None:
            tmp.chmod(mode)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


# ── Terminal output ────────────────────────────────────────

_ANSI = {
    "bold": "1",
    "dim": "2",
    "red": "31",
    "green": "32",
    "yellow": "33",
}

NO_COLOR = os.environ.get("NO_COLOR") is not None


def colorize(text: str, color: str, stream: TextIO | None = None) -> str:
    """Wrap ``text`` in an ANSI color when ``stream`` (stdout by default) is a tty."""
    stream = stream if stream is not None else sys.stdout
    code = _ANSI.get(color)
    if NO_COLOR or code is None or not stream.isatty():
        return str(text)
    return f"\033[{code}m{text}\033[0m"


def print_info(message: str) -> None:
    """Dim status line on stderr."""
    print(colorize(message, "dim", sys.stderr), file=sys.stderr)


def format_table(headers: list[str], rows: list[list[str]]) -> list[str]:
    """Left-aligned columns sized to the widest cell, header underlined with dashes."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))
    lines = ["  ".join(h.ljust(w) for h, w in zip(headers, widths)).rstrip()]
    lines.append("  ".join("-" * w for w in widths))
    lines.extend(
        "  ".join(str(cell).ljust(w) for cell, w in zip(row, widths)).rstrip()
        for row in rows
    )
    return lines


def print_table(headers: list[str], rows: list[list[str]]) -> None:
    header, rule, *body = format_table(headers, rows)
    print(colorize(header, "bold"))
    print(colorize(rule, "dim"))
    for line in body:
        print(line)


def check_mark(ok: bool) -> str:
    return colorize("yes", "green") if ok else colorize("no", "red")
