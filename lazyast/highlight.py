"""Syntax coloring for dump lines and control-byte sanitization.

Dump text is valid Python call syntax, so Pygments' Python lexer colors it
well. Coloring is per line so it can be swapped for the plain text whenever a
selection highlight has to be applied instead.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import PythonLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_LEXER = PythonLexer(stripnl=False, ensurenl=True)
_FORMATTERS: dict[str, Terminal256Formatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def normalize_style(style: str) -> str:
    """Return ``style`` if Pygments knows it, else the default style."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def highlight_lines(lines: Sequence[str], style: str = DEFAULT_STYLE, no_color: bool = False) -> list[str]:
    """Return colored copies of ``lines``, one output row per input row.

    Falls back to the plain lines when coloring is off or the formatter's
    output does not line up with the input.
    """
    plain = list(lines)
    if no_color or not plain:
        return plain

    colored = highlight("\n".join(plain) + "\n", _LEXER, _formatter_for_style(normalize_style(style)))
    rows = colored.split("\n")
    if rows and rows[-1] == "":
        rows.pop()
    if len(rows) != len(plain):
        return plain
    return rows
