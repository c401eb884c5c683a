"""Low-level terminal input decoding.

Turns raw stdin bytes into typed input events: characters, arrow/page keys,
wheel scrolls, and SGR mouse button reports. Malformed sequences are dropped
without surfacing errors so terminal noise never stalls the render loop.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

ESC = b"\x1b"
ESC_SEQUENCE_TIMEOUT_MS = 25
MOUSE_REPORT_MAX_BYTES = 32

ARROW_UP = "UP"
ARROW_DOWN = "DOWN"
PAGE_UP = "PAGE_UP"
PAGE_DOWN = "PAGE_DOWN"
HOME = "HOME"
END = "END"

MOUSE_DOWN = "down"
MOUSE_DRAG = "drag"
MOUSE_UP = "up"

# (parameters, final byte) -> key; any other CSI sequence is consumed and dropped.
_CSI_KEYS = {
    (b"", b"A"): ARROW_UP,
    (b"", b"B"): ARROW_DOWN,
    (b"", b"H"): HOME,
    (b"", b"F"): END,
    (b"5", b"~"): PAGE_UP,
    (b"6", b"~"): PAGE_DOWN,
}
_CSI_PARAMETER_BYTES = range(0x20, 0x40)
_CSI_FINAL_BYTES = range(0x40, 0x7F)
CSI_MAX_BYTES = 16

_MOUSE_WHEEL_BIT = 0b0100_0000
_MOUSE_DRAG_BIT = 0b0010_0000
_MOUSE_BUTTON_MASK = 0b11


@dataclass(frozen=True)
class CharKey:
    """A literal character, including ``"\\x1b"`` for a bare Escape."""

    char: str


@dataclass(frozen=True)
class NavKey:
    """Arrow, page, and home/end keys."""

    name: str


@dataclass(frozen=True)
class WheelScroll:
    """Scroll-wheel tick; ``direction`` is -1 for up and +1 for down."""

    direction: int


@dataclass(frozen=True)
class MouseButton:
    """Primary-button press/drag/release at 1-based terminal ``(x, y)``."""

    action: str
    x: int
    y: int


InputEvent = Union[CharKey, NavKey, WheelScroll, MouseButton]
ByteReader = Callable[[int], Union[bytes, None]]


def parse_sgr_mouse(payload: bytes, terminator: bytes) -> InputEvent | None:
    """Decode the ``Cb;Cx;Cy`` body of an SGR mouse report.

    Returns ``None`` for unparsable payloads and for buttons other than the
    primary one.
    """
    try:
        btn_s, col_s, row_s = payload.decode("ascii").split(";")
        btn = int(btn_s)
        col = int(col_s)
        row = int(row_s)
    except ValueError:
        return None

    if btn & _MOUSE_WHEEL_BIT:
        return WheelScroll(direction=1 if btn & 1 else -1)
    if btn & _MOUSE_BUTTON_MASK != 0:
        return None
    if terminator == b"m":
        return MouseButton(MOUSE_UP, col, row)
    if btn & _MOUSE_DRAG_BIT:
        return MouseButton(MOUSE_DRAG, col, row)
    return MouseButton(MOUSE_DOWN, col, row)


def _utf8_sequence_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


class InputDecoder:
    """Pull-based decoder over a ``read_byte(timeout_ms)`` source.

    ``decode`` returns one event per call and ``None`` once no complete event
    is buffered. Bytes read as lookahead but not consumed by a sequence are
    pushed back and decoded on the next call.
    """

    def __init__(self, read_byte: ByteReader, escape_timeout_ms: int = ESC_SEQUENCE_TIMEOUT_MS) -> None:
        self._read_byte = read_byte
        self._escape_timeout_ms = escape_timeout_ms
        self._pending: list[bytes] = []

    def _next(self, timeout_ms: int = 0) -> bytes | None:
        if self._pending:
            return self._pending.pop(0)
        return self._read_byte(timeout_ms)

    def _lookahead(self) -> bytes | None:
        return self._next(self._escape_timeout_ms)

    def decode(self) -> InputEvent | None:
        while True:
            ch = self._next()
            if ch is None:
                return None
            event = self._decode_from(ch)
            if event is not None:
                return event

    def _decode_from(self, ch: bytes) -> InputEvent | None:
        if ch == ESC:
            return self._decode_escape()
        return self._decode_char(ch)

    def _decode_char(self, ch: bytes) -> InputEvent:
        raw = bytearray(ch)
        for _ in range(_utf8_sequence_length(ch[0]) - 1):
            nxt = self._lookahead()
            if nxt is None:
                break
            if nxt[0] & 0xC0 != 0x80:
                self._pending.insert(0, nxt)
                break
            raw += nxt
        return CharKey(bytes(raw).decode("utf-8", errors="replace"))

    def _decode_escape(self) -> InputEvent | None:
        escape = CharKey(ESC.decode("ascii"))
        seq = self._lookahead()
        if seq is None:
            return escape
        if seq != b"[":
            self._pending.insert(0, seq)
            return escape

        first = self._lookahead()
        if first is None:
            return escape
        if first == b"<":
            return self._decode_mouse_report()
        key = self._read_csi(first)
        return NavKey(key) if key is not None else escape

    def _read_csi(self, part: bytes | None) -> str | None:
        """Consume one CSI body and return its key name, if it is a known key.

        Parameter and intermediate bytes are collected up to the final byte. A
        byte that cannot belong to a CSI sequence ends it and is pushed back.
        """
        params = bytearray()
        while part is not None:
            code = part[0]
            if code in _CSI_FINAL_BYTES:
                return _CSI_KEYS.get((bytes(params), part))
            if code not in _CSI_PARAMETER_BYTES:
                self._pending.insert(0, part)
                return None
            params += part
            if len(params) > CSI_MAX_BYTES:
                return None
            part = self._lookahead()
        return None

    def _decode_mouse_report(self) -> InputEvent | None:
        payload = bytearray()
        while True:
            part = self._lookahead()
            if part is None:
                return None
            if part in {b"M", b"m"}:
                return parse_sgr_mouse(bytes(payload), part)
            payload += part
            if len(payload) > MOUSE_REPORT_MAX_BYTES:
                return None
