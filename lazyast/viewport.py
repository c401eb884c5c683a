"""Vertical scroll state for the content pane."""

from __future__ import annotations

from .input import ARROW_DOWN, ARROW_UP, END, HOME, PAGE_DOWN, PAGE_UP, CharKey, InputEvent, NavKey, WheelScroll

WHEEL_SCROLL_LINES = 3
PAGE_OVERLAP_LINES = 2

_LINE_KEYS = {ARROW_UP: -1, ARROW_DOWN: 1, "k": -1, "j": 1}
_PAGE_KEYS = {PAGE_UP: -1, PAGE_DOWN: 1, "u": -1, "d": 1}
_TOP_KEYS = {HOME, "g"}
_BOTTOM_KEYS = {END, "G"}


def max_offset(viewport_height: int, total_lines: int) -> int:
    return max(0, total_lines - max(0, viewport_height))


def page_size(viewport_height: int) -> int:
    return max(1, viewport_height - PAGE_OVERLAP_LINES)


class Viewport:
    """Owns the first visible content line and keeps it in range.

    Every mutator returns whether the clamped offset actually moved, which the
    loop uses to decide whether a re-render is needed.
    """

    def __init__(self, offset: int = 0) -> None:
        self.offset = max(0, offset)

    def visible_range(self, viewport_height: int, total_lines: int) -> tuple[int, int]:
        first = max(0, min(self.offset, total_lines))
        last = max(first, min(total_lines, first + max(0, viewport_height)))
        return first, last

    def scroll_to(self, offset: int, viewport_height: int, total_lines: int) -> bool:
        clamped = max(0, min(offset, max_offset(viewport_height, total_lines)))
        if clamped == self.offset:
            return False
        self.offset = clamped
        return True

    def scroll_by(self, delta: int, viewport_height: int, total_lines: int) -> bool:
        return self.scroll_to(self.offset + delta, viewport_height, total_lines)

    def reclamp(self, viewport_height: int, total_lines: int) -> bool:
        """Pull the offset back into range after the content was replaced."""
        return self.scroll_to(self.offset, viewport_height, total_lines)

    def handle_event(self, event: InputEvent, viewport_height: int, total_lines: int) -> bool:
        """Apply a key or wheel event; unrelated events report no change."""
        if isinstance(event, WheelScroll):
            return self.scroll_by(event.direction * WHEEL_SCROLL_LINES, viewport_height, total_lines)
        if isinstance(event, NavKey):
            key = event.name
        elif isinstance(event, CharKey):
            key = event.char
        else:
            return False

        if key in _LINE_KEYS:
            return self.scroll_by(_LINE_KEYS[key], viewport_height, total_lines)
        if key in _PAGE_KEYS:
            return self.scroll_by(_PAGE_KEYS[key] * page_size(viewport_height), viewport_height, total_lines)
        if key in _TOP_KEYS:
            return self.scroll_to(0, viewport_height, total_lines)
        if key in _BOTTOM_KEYS:
            return self.scroll_to(max_offset(viewport_height, total_lines), viewport_height, total_lines)
        return False
