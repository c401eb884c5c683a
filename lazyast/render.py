"""Screen composition for the viewer.

Builds one full frame (header, spacer, visible content slice, footer) as a
single string so the loop can emit it with one write.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .ansi import CLEAR_SCREEN, CURSOR_HOME, CYAN, DIM, RESET, clip_ansi_line, strip_ansi

SPACER_ROWS = 1
FOOTER_ROWS = 1


def content_height(terminal_rows: int, header_rows: int) -> int:
    """Rows left for content after the header, spacer, and footer."""
    return max(1, terminal_rows - header_rows - SPACER_ROWS - FOOTER_ROWS)


def scroll_position_label(offset: int, total_lines: int, height: int) -> str:
    """Return ``All``/``Top``/``Bot`` or a percentage, pager style."""
    max_scroll = max(0, total_lines - height)
    if total_lines <= height:
        return "All"
    if offset <= 0:
        return "Top"
    if offset >= max_scroll:
        return "Bot"
    return f"{int(offset / max_scroll * 100)}%"


def footer_line(offset: int, total_lines: int, height: int) -> str:
    label = scroll_position_label(offset, total_lines, height)
    position = offset + 1 if total_lines else 0
    return (
        f"{DIM}Line {position}/{total_lines} ({label}) "
        f"{CYAN}[↑↓jk]{RESET}{DIM} scroll "
        f"{CYAN}[ud]{RESET}{DIM} page "
        f"{CYAN}[gG]{RESET}{DIM} jump "
        f"{CYAN}[drag]{RESET}{DIM} copy "
        f"{CYAN}[q]{RESET}{DIM} quit{RESET}"
    )


def _finish_row(row: str, columns: int) -> str:
    clipped = clip_ansi_line(row, columns)
    if "\x1b" in clipped:
        clipped += RESET
    return clipped


@dataclass(frozen=True)
class FrameContext:
    """Inputs for one interactive frame.

    ``visible`` is the clamped ``[first, last)`` slice from the viewport.
    ``plain_lines`` and ``styled_lines`` are parallel; rows inside
    ``selected_rows`` (inclusive line range) are drawn from the plain text with
    ``highlight`` applied so selection columns line up with the raw content.
    """

    header: Sequence[str]
    plain_lines: Sequence[str]
    styled_lines: Sequence[str]
    visible: tuple[int, int]
    height: int
    columns: int
    selected_rows: tuple[int, int] | None = None
    highlight: Callable[[str, int], str] | None = None


def render_frame(ctx: FrameContext) -> str:
    out: list[str] = [CLEAR_SCREEN + CURSOR_HOME]
    rows: list[str] = [_finish_row(line, ctx.columns) for line in ctx.header]
    rows.extend([""] * SPACER_ROWS)

    total = len(ctx.plain_lines)
    first, last = ctx.visible
    for idx in range(first, last):
        selected = (
            ctx.selected_rows is not None
            and ctx.highlight is not None
            and ctx.selected_rows[0] <= idx <= ctx.selected_rows[1]
        )
        if selected:
            row = ctx.highlight(ctx.plain_lines[idx], idx)
        elif idx < len(ctx.styled_lines):
            row = ctx.styled_lines[idx]
        else:
            row = ctx.plain_lines[idx]
        rows.append(_finish_row(row, ctx.columns))
    rows.extend([""] * (ctx.height - (last - first)))

    out.append("\n".join(rows))
    out.append("\n")
    out.append(_finish_row(footer_line(first, total, ctx.height), ctx.columns))
    return "".join(out)


def render_static(header: Sequence[str], lines: Sequence[str], color: bool) -> str:
    """Full, unclipped dump for non-interactive output."""
    rows = [*header, "", *lines]
    if not color:
        rows = [strip_ansi(row) for row in rows]
    return "\n".join(rows) + "\n"
