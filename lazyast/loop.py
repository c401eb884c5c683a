"""Main interactive tick loop.

Each tick drains pending input, applies it in arrival order, polls for file
and terminal-size changes, redraws when anything visible changed, and then
sleeps. All work is synchronous; the sleep is the only suspension point.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .app import ViewerApp
    from .input import InputDecoder
    from .terminal import BaseTerminal

TICK_SECONDS = 0.016


def process_pending_input(app: ViewerApp, decoder: InputDecoder) -> bool:
    """Apply every buffered event; stops early once quit is requested."""
    changed = False
    while not app.quit_requested:
        event = decoder.decode()
        if event is None:
            break
        if app.handle_event(event):
            changed = True
    return changed


def run_tick(app: ViewerApp, decoder: InputDecoder) -> bool:
    """Run one tick; returns ``False`` once the loop should stop."""
    needs_render = process_pending_input(app, decoder)
    if app.quit_requested:
        return False
    if app.poll_changes():
        needs_render = True
    if app.poll_resize():
        needs_render = True
    if needs_render:
        app.render()
    return True


def run_main_loop(
    app: ViewerApp,
    decoder: InputDecoder,
    terminal: BaseTerminal,
    *,
    tick_seconds: float = TICK_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    with terminal.raw_mode():
        app.poll_resize()
        app.render()
        while run_tick(app, decoder):
            sleep(tick_seconds)
