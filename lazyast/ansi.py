"""ANSI control sequences and display-width helpers.

Holds every escape sequence the viewer emits plus the width-aware helpers used
to clip styled rows and to translate mouse columns into text positions.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?<]*[ -/]*[@-~]")
TAB_STOP = 8

RESET = "\x1b[0m"
BOLD = "\x1b[1m"
DIM = "\x1b[2m"
INVERSE = "\x1b[7m"
GREEN = "\x1b[32m"
CYAN = "\x1b[36m"

CLEAR_SCREEN = "\x1b[2J"
CURSOR_HOME = "\x1b[H"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
ENTER_ALTERNATE_SCREEN = "\x1b[?1049h"
EXIT_ALTERNATE_SCREEN = "\x1b[?1049l"
# 1002: button-event tracking (press, release, drag while held); 1006: SGR coordinates.
ENABLE_MOUSE_TRACKING = "\x1b[?1002h\x1b[?1006h"
DISABLE_MOUSE_TRACKING = "\x1b[?1002l\x1b[?1006l"


def strip_ansi(text: str) -> str:
    """Return ``text`` without CSI/SGR escape sequences."""
    return ANSI_ESCAPE_RE.sub("", text)


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are kept verbatim and do not count toward width. Tabs are
    expanded into spaces so clipping lines up with rendered terminal cells.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        if col >= max_cols:
            i += 1
            continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            col = max_cols
            i += 1
            continue
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)


def display_col_to_index(text: str, display_col: int) -> int:
    """Map a 0-based display column to a character index in plain ``text``.

    A column that lands inside a wide character or tab resolves to that
    character. Columns past the end of the line resolve to ``len(text)``.
    """
    if display_col <= 0:
        return 0
    col = 0
    for idx, ch in enumerate(text):
        w = char_display_width(ch, col)
        if w and display_col < col + w:
            return idx
        col += w
    return len(text)
