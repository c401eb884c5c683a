"""Viewer composition: content snapshot, scroll, selection, and drawing.

``ViewerApp`` owns all mutable view state and is only touched from the render
loop. ``run_viewer`` wires it to a terminal and either runs the interactive
loop or, when stdin is not a tty, prints one static dump.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from .ansi import display_col_to_index
from .clipboard import copy_text_to_clipboard
from .content import AstDumper
from .highlight import DEFAULT_STYLE, highlight_lines
from .input import MOUSE_DOWN, MOUSE_DRAG, CharKey, InputDecoder, InputEvent, MouseButton
from .loop import run_main_loop
from .render import SPACER_ROWS, FrameContext, content_height, render_frame, render_static
from .selection import TextSelection
from .terminal import BaseTerminal, open_terminal
from .viewport import Viewport
from .watch import FileWatcher

logger = logging.getLogger(__name__)

QUIT_KEY = "q"
CANCEL_SELECTION_KEY = "\x1b"
DUMP_MODE_KEYS = {"1": False, "2": True}


class ContentProvider(Protocol):
    def current_lines(self) -> list[str]: ...

    def header_lines(self, interactive: bool = True) -> list[str]: ...

    def set_show_attributes(self, show_attributes: bool) -> bool: ...


class ChangeNotifier(Protocol):
    def has_changed(self) -> bool: ...


class ViewerApp:
    def __init__(
        self,
        terminal: BaseTerminal,
        provider: ContentProvider,
        notifier: ChangeNotifier,
        *,
        style: str = DEFAULT_STYLE,
        no_color: bool = False,
        copy_text: Callable[[str], object] = copy_text_to_clipboard,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.terminal = terminal
        self.provider = provider
        self.notifier = notifier
        self.style = style
        self.no_color = no_color
        self.viewport = Viewport()
        self.selection = TextSelection(copy_text=copy_text, monotonic=monotonic)
        self.lines: list[str] = []
        self.styled_lines: list[str] = []
        self.header: list[str] = []
        self.quit_requested = False
        self._last_size: tuple[int, int] | None = None

    def header_rows(self) -> int:
        return len(self.header) + SPACER_ROWS

    def content_height(self) -> int:
        _columns, rows = self.terminal.size()
        return content_height(rows, len(self.header))

    def reload_content(self) -> None:
        """Replace the snapshot with the provider's current lines."""
        self.lines = list(self.provider.current_lines())
        self.styled_lines = highlight_lines(self.lines, self.style, self.no_color)
        self.header = list(self.provider.header_lines(interactive=self.terminal.interactive))
        self.selection.clear()
        self.viewport.reclamp(self.content_height(), len(self.lines))
        logger.debug("content reloaded: %d lines, offset %d", len(self.lines), self.viewport.offset)

    def poll_changes(self) -> bool:
        if not self.notifier.has_changed():
            return False
        self.reload_content()
        return True

    def poll_resize(self) -> bool:
        size = self.terminal.size()
        if size == self._last_size:
            return False
        self._last_size = size
        self.viewport.reclamp(self.content_height(), len(self.lines))
        return True

    def set_dump_mode(self, show_attributes: bool) -> bool:
        if not self.provider.set_show_attributes(show_attributes):
            return False
        self.viewport.offset = 0
        self.reload_content()
        return True

    def handle_event(self, event: InputEvent) -> bool:
        """Apply one input event, returning whether the screen needs redrawing."""
        if isinstance(event, MouseButton):
            return self._handle_mouse(event)
        if isinstance(event, CharKey):
            if event.char == QUIT_KEY:
                self.quit_requested = True
                return False
            if event.char in DUMP_MODE_KEYS:
                return self.set_dump_mode(DUMP_MODE_KEYS[event.char])
            if event.char == CANCEL_SELECTION_KEY:
                return self.selection.clear()
        return self.viewport.handle_event(event, self.content_height(), len(self.lines))

    def content_position(self, x: int, y: int) -> tuple[int, int]:
        """Map 1-based terminal ``(x, y)`` to a content ``(line, col)``.

        The line may fall outside the content; the column is resolved against
        the nearest existing line so wide characters map to the right index.
        """
        line = self.viewport.offset + (y - 1 - self.header_rows())
        if not self.lines:
            return line, max(0, x - 1)
        text = self.lines[max(0, min(len(self.lines) - 1, line))]
        return line, display_col_to_index(text, x - 1)

    def _handle_mouse(self, event: MouseButton) -> bool:
        line, col = self.content_position(event.x, event.y)
        if event.action == MOUSE_DOWN:
            row = event.y - 1 - self.header_rows()
            if row < 0 or row >= self.content_height():
                line = -1
            return self.selection.on_mouse_down(line, col, self.lines)
        if event.action == MOUSE_DRAG:
            return self.selection.on_mouse_drag(line, col, self.lines)
        return self.selection.on_mouse_up(line, col, self.lines)

    def render(self) -> None:
        columns, rows = self.terminal.size()
        height = content_height(rows, len(self.header))
        self.viewport.reclamp(height, len(self.lines))
        visible = self.viewport.visible_range(height, len(self.lines))

        selected_rows = None
        if self.selection.selection is not None:
            start_line, _start_col, end_line, _end_col = self.selection.selection.normalized()
            selected_rows = (start_line, end_line)

        frame = render_frame(
            FrameContext(
                header=self.header,
                plain_lines=self.lines,
                styled_lines=self.styled_lines,
                visible=visible,
                height=height,
                columns=columns,
                selected_rows=selected_rows,
                highlight=self.selection.highlight,
            )
        )
        self.terminal.write(frame)

    def render_static(self) -> None:
        color = not self.no_color and os.isatty(self.terminal.stdout_fd)
        lines = self.styled_lines if color else self.lines
        self.terminal.write(render_static(self.header, lines, color))


def run_viewer(
    path: Path,
    *,
    show_attributes: bool = False,
    indent: int = 2,
    feature_version: tuple[int, int] | None = None,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
    stdin_fd: int = 0,
    stdout_fd: int = 1,
) -> None:
    """Show the AST of ``path``, interactively when stdin is a terminal."""
    terminal = open_terminal(stdin_fd, stdout_fd)
    provider = AstDumper(
        path,
        show_attributes=show_attributes,
        indent=indent,
        feature_version=feature_version,
    )
    app = ViewerApp(terminal, provider, FileWatcher(path), style=style, no_color=no_color)
    app.reload_content()

    if not terminal.interactive:
        app.render_static()
        return
    run_main_loop(app, InputDecoder(terminal.read_byte), terminal)
