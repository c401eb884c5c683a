"""Terminal control for the viewer session.

Owns cbreak-mode lifecycle, alternate-screen switching, mouse tracking, and
non-blocking byte reads. ``open_terminal`` picks the interactive controller or
a pass-through stand-in once at startup depending on whether stdin is a tty.
"""

from __future__ import annotations

import contextlib
import errno
import fcntl
import logging
import os
import select
import shutil
import signal
import termios
import tty

from .ansi import (
    DISABLE_MOUSE_TRACKING,
    ENABLE_MOUSE_TRACKING,
    ENTER_ALTERNATE_SCREEN,
    EXIT_ALTERNATE_SCREEN,
    HIDE_CURSOR,
    SHOW_CURSOR,
)

logger = logging.getLogger(__name__)

DEFAULT_SIZE = (80, 24)
_EXIT_SIGNALS = tuple(
    sig for sig in (getattr(signal, "SIGTERM", None), getattr(signal, "SIGHUP", None)) if sig is not None
)


def read_ready_byte(fd: int, timeout_ms: int = 0) -> bytes | None:
    """Return one byte from ``fd`` if it arrives within ``timeout_ms``, else ``None``."""
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    try:
        ch = os.read(fd, 1)
    except BlockingIOError:
        return None
    if not ch:
        return None
    return ch


def write_all(fd: int, data: bytes) -> None:
    """Write ``data`` fully, waiting for writability if the descriptor is non-blocking."""
    view = memoryview(data)
    while view:
        try:
            written = os.write(fd, view)
        except BlockingIOError:
            select.select([], [fd], [])
            continue
        view = view[written:]


class BaseTerminal:
    """Behavior shared by interactive and pass-through terminals."""

    interactive = False

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd

    def size(self) -> tuple[int, int]:
        """Return ``(columns, rows)``, falling back to 80x24."""
        term = shutil.get_terminal_size(DEFAULT_SIZE)
        if term.columns <= 0 or term.lines <= 0:
            return DEFAULT_SIZE
        return term.columns, term.lines

    def write(self, text: str) -> None:
        write_all(self.stdout_fd, text.encode("utf-8", errors="replace"))

    def enter(self) -> None:
        pass

    def leave(self) -> None:
        pass

    def read_byte(self, timeout_ms: int = 0) -> bytes | None:
        return None

    @contextlib.contextmanager
    def raw_mode(self):
        """Bracket a block with ``enter``/``leave``; ``leave`` runs on every exit path."""
        try:
            self.enter()
            yield self
        finally:
            self.leave()


class PassthroughTerminal(BaseTerminal):
    """Stand-in used when stdin is not a tty: mode changes and reads are no-ops."""


class TerminalController(BaseTerminal):
    """Interactive terminal: alternate screen, cbreak input, SGR mouse tracking."""

    interactive = True

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        super().__init__(stdin_fd, stdout_fd)
        self._saved_tty_state: list | None = None
        self._saved_fd_flags: int | None = None
        self._entered = False
        self._previous_handlers: dict[int, object] = {}

    @property
    def entered(self) -> bool:
        return self._entered

    def enter(self) -> None:
        """Switch to the alternate screen, enable mouse tracking, and go non-canonical."""
        if self._entered:
            return
        self.write(ENTER_ALTERNATE_SCREEN + HIDE_CURSOR + ENABLE_MOUSE_TRACKING)
        self._entered = True
        self._saved_tty_state = termios.tcgetattr(self.stdin_fd)
        # cbreak keeps ISIG so Ctrl+C still interrupts the loop.
        tty.setcbreak(self.stdin_fd, termios.TCSANOW)
        self._saved_fd_flags = fcntl.fcntl(self.stdin_fd, fcntl.F_GETFL)
        fcntl.fcntl(self.stdin_fd, fcntl.F_SETFL, self._saved_fd_flags | os.O_NONBLOCK)

    def leave(self) -> None:
        """Undo ``enter``. Safe to call repeatedly; each step is best-effort."""
        if not self._entered:
            return
        self._entered = False

        if self._saved_fd_flags is not None:
            try:
                fcntl.fcntl(self.stdin_fd, fcntl.F_SETFL, self._saved_fd_flags)
            except OSError as exc:
                logger.debug("restoring stdin flags failed: %s", exc)
            self._saved_fd_flags = None

        if self._saved_tty_state is not None:
            try:
                termios.tcsetattr(self.stdin_fd, termios.TCSANOW, self._saved_tty_state)
            except (OSError, termios.error) as exc:
                logger.debug("restoring tty attributes failed: %s", exc)
            self._saved_tty_state = None

        try:
            self.write(DISABLE_MOUSE_TRACKING + SHOW_CURSOR + EXIT_ALTERNATE_SCREEN)
        except OSError as exc:
            if exc.errno != errno.EIO:
                logger.debug("leaving alternate screen failed: %s", exc)

    def read_byte(self, timeout_ms: int = 0) -> bytes | None:
        if not self._entered:
            return None
        return read_ready_byte(self.stdin_fd, timeout_ms)

    def _raise_exit(self, signum, _frame) -> None:
        # Ignored once restoration has started so it cannot be cut short.
        if self._entered:
            raise SystemExit(128 + signum)

    def _install_exit_handlers(self) -> None:
        for sig in _EXIT_SIGNALS:
            try:
                self._previous_handlers[sig] = signal.signal(sig, self._raise_exit)
            except ValueError:
                # Not the main thread; rely on the finally block alone.
                continue

    def _restore_exit_handlers(self) -> None:
        for sig, handler in self._previous_handlers.items():
            try:
                signal.signal(sig, handler)
            except (ValueError, TypeError):
                continue
        self._previous_handlers.clear()

    @contextlib.contextmanager
    def raw_mode(self):
        """Scoped interactive mode; termination signals unwind through ``leave``."""
        self._install_exit_handlers()
        try:
            self.enter()
            yield self
        finally:
            try:
                self.leave()
            finally:
                self._restore_exit_handlers()


def open_terminal(stdin_fd: int = 0, stdout_fd: int = 1) -> BaseTerminal:
    """Return the interactive controller when stdin is a tty, else a pass-through."""
    if os.isatty(stdin_fd):
        return TerminalController(stdin_fd, stdout_fd)
    return PassthroughTerminal(stdin_fd, stdout_fd)
