"""Mouse-driven text selection over the current content lines.

``TextSelection`` is a small state machine fed with content-relative
``(line, col)`` positions. It detects double clicks, snaps them to word
boundaries, extends word-anchored selections while dragging in either
direction, and renders/extracts the normalized range.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from .ansi import INVERSE, RESET

logger = logging.getLogger(__name__)

DOUBLE_CLICK_SECONDS = 0.4
DOUBLE_CLICK_MAX_COLUMN_DELTA = 1


def is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def find_word_boundaries(lines: Sequence[str], line: int, col: int) -> tuple[int, int] | None:
    """Return ``(start, end)`` of the word containing ``col``, end exclusive.

    ``None`` when the position is out of range or not on a word character.
    """
    if line < 0 or line >= len(lines):
        return None
    text = lines[line]
    if col < 0 or col >= len(text) or not is_word_char(text[col]):
        return None

    start = col
    while start > 0 and is_word_char(text[start - 1]):
        start -= 1
    end = col
    while end < len(text) and is_word_char(text[end]):
        end += 1
    return start, end


@dataclass(frozen=True)
class Anchor:
    """Word span fixed by a double click; the pivot for word-wise dragging."""

    line: int
    start_col: int
    end_col: int


@dataclass
class Selection:
    """Selection endpoints in drag order; see ``normalized`` for reading order."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    is_active: bool = True
    anchor: Anchor | None = field(default=None)

    def normalized(self) -> tuple[int, int, int, int]:
        return normalize(self)


def normalize(selection: Selection) -> tuple[int, int, int, int]:
    """Return ``(start_line, start_col, end_line, end_col)`` with start <= end."""
    start = (selection.start_line, selection.start_col)
    end = (selection.end_line, selection.end_col)
    if start <= end:
        return start + end
    return end + start


class TextSelection:
    """Selection state plus the click history used for double-click detection."""

    def __init__(
        self,
        copy_text: Callable[[str], object] | None = None,
        monotonic: Callable[[], float] = time.monotonic,
        double_click_seconds: float = DOUBLE_CLICK_SECONDS,
    ) -> None:
        self.selection: Selection | None = None
        self._copy_text = copy_text
        self._monotonic = monotonic
        self._double_click_seconds = double_click_seconds
        self._last_click_time: float | None = None
        self._last_click_pos: tuple[int, int] | None = None

    def clear(self) -> bool:
        """Drop the selection, returning whether one existed."""
        had_selection = self.selection is not None
        self.selection = None
        return had_selection

    def _is_double_click(self, now: float, line: int, col: int) -> bool:
        if self._last_click_time is None or self._last_click_pos is None:
            return False
        last_line, last_col = self._last_click_pos
        return (
            now - self._last_click_time < self._double_click_seconds
            and last_line == line
            and abs(last_col - col) <= DOUBLE_CLICK_MAX_COLUMN_DELTA
        )

    def on_mouse_down(self, line: int, col: int, lines: Sequence[str]) -> bool:
        """Start a point selection, or a word selection on double click.

        Returns whether visible selection state changed.
        """
        if line < 0 or line >= len(lines):
            return self.clear()

        now = self._monotonic()
        double_click = self._is_double_click(now, line, col)
        self._last_click_time = now
        self._last_click_pos = (line, col)

        if double_click:
            word = find_word_boundaries(lines, line, col)
            if word is not None:
                start, end = word
                self.selection = Selection(
                    start_line=line,
                    start_col=start,
                    end_line=line,
                    end_col=end,
                    anchor=Anchor(line=line, start_col=start, end_col=end),
                )
                return True

        self.selection = Selection(start_line=line, start_col=col, end_line=line, end_col=col)
        return True

    def on_mouse_drag(self, line: int, col: int, lines: Sequence[str]) -> bool:
        sel = self.selection
        if sel is None or not sel.is_active:
            return False
        self._move_focus(sel, line, col, lines)
        return True

    def on_mouse_up(self, line: int, col: int, lines: Sequence[str]) -> bool:
        """Finish the gesture and copy any selected text."""
        sel = self.selection
        if sel is None or not sel.is_active:
            return False
        self._move_focus(sel, line, col, lines)
        sel.is_active = False

        text = self.selected_text(lines)
        if text and self._copy_text is not None:
            try:
                self._copy_text(text)
            except Exception:
                logger.debug("clipboard sink failed", exc_info=True)
        return True

    def _move_focus(self, sel: Selection, line: int, col: int, lines: Sequence[str]) -> None:
        target_line = max(0, min(len(lines) - 1, line))
        line_length = len(lines[target_line]) if lines else 0
        target_col = max(0, min(line_length, col))

        if sel.anchor is not None:
            _extend_from_anchor(sel, sel.anchor, target_line, target_col, lines)
        else:
            sel.end_line = target_line
            sel.end_col = target_col

    def highlight(self, text: str, line_index: int) -> str:
        """Return ``text`` with the selected columns wrapped in inverse video."""
        if self.selection is None:
            return text
        start_line, start_col, end_line, end_col = self.selection.normalized()
        if line_index < start_line or line_index > end_line:
            return text

        left = start_col if line_index == start_line else 0
        right = end_col if line_index == end_line else len(text)
        left = max(0, min(len(text), left))
        right = max(left, min(len(text), right))
        if left == right:
            return text
        return f"{text[:left]}{INVERSE}{text[left:right]}{RESET}{text[right:]}"

    def selected_text(self, lines: Sequence[str]) -> str:
        """Return the normalized selection's text, newline-joined across lines."""
        if self.selection is None:
            return ""
        start_line, start_col, end_line, end_col = self.selection.normalized()

        parts: list[str] = []
        for idx in range(start_line, end_line + 1):
            if idx < 0 or idx >= len(lines):
                continue
            text = lines[idx]
            if start_line == end_line:
                left = max(0, min(len(text), start_col))
                right = max(0, min(len(text), end_col))
                if left < right:
                    parts.append(text[left:right])
            elif idx == start_line:
                parts.append(text[max(0, min(len(text), start_col)):])
            elif idx == end_line:
                parts.append(text[: max(0, min(len(text), end_col))])
            else:
                parts.append(text)
        return "\n".join(parts)


def _extend_from_anchor(
    sel: Selection,
    anchor: Anchor,
    target_line: int,
    target_col: int,
    lines: Sequence[str],
) -> None:
    """Grow the selection word-wise from ``anchor`` toward the target.

    The anchor word always stays selected. Targets inside it collapse the
    selection back to the anchor; targets on a non-word character extend to
    the raw column.
    """
    if target_line == anchor.line and anchor.start_col <= target_col < anchor.end_col:
        sel.start_line, sel.start_col = anchor.line, anchor.start_col
        sel.end_line, sel.end_col = anchor.line, anchor.end_col
        return

    before = (target_line, target_col) < (anchor.line, anchor.start_col)
    word = find_word_boundaries(lines, target_line, target_col)
    if before:
        sel.start_line = target_line
        sel.start_col = word[0] if word is not None else target_col
        sel.end_line, sel.end_col = anchor.line, anchor.end_col
    else:
        sel.start_line, sel.start_col = anchor.line, anchor.start_col
        sel.end_line = target_line
        sel.end_col = word[1] if word is not None else target_col
