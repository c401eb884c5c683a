"""AST dump content provider.

Reads the watched Python file, parses it, and exposes the ``ast.dump`` text as
display lines plus a short status header. Dumps are cached per file stat
signature and dump mode, so the viewer can ask for lines on every render.
"""

from __future__ import annotations

import ast
import traceback
from pathlib import Path

from .ansi import BOLD, CYAN, DIM, GREEN, RESET
from .highlight import sanitize_terminal_text
from .watch import path_stat_signature

MODE_STRUCTURE = "structure"
MODE_POSITIONS = "positions"


def read_text(path: Path) -> str:
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def dump_source(
    source: str,
    filename: str = "<unknown>",
    *,
    show_attributes: bool = False,
    indent: int = 2,
    feature_version: tuple[int, int] | None = None,
) -> list[str]:
    """Parse ``source`` and return its AST dump split into lines.

    Syntax errors (and null bytes, which older parsers reject with
    ``ValueError``) are rendered as lines in the usual traceback shape instead of
    being raised.
    """
    try:
        tree = ast.parse(source, filename=filename, feature_version=feature_version)
    except (SyntaxError, ValueError) as exc:
        text = "".join(traceback.format_exception_only(type(exc), exc))
        return sanitize_terminal_text(text).rstrip("\n").split("\n")
    dumped = ast.dump(tree, indent=indent, include_attributes=show_attributes)
    return sanitize_terminal_text(dumped).split("\n")


class AstDumper:
    """Content provider for one watched file."""

    def __init__(
        self,
        path: Path,
        *,
        show_attributes: bool = False,
        indent: int = 2,
        feature_version: tuple[int, int] | None = None,
    ) -> None:
        self.path = path
        self.show_attributes = show_attributes
        self.indent = indent
        self.feature_version = feature_version
        self._cache_key: tuple | None = None
        self._cache_lines: list[str] = []

    @property
    def mode(self) -> str:
        return MODE_POSITIONS if self.show_attributes else MODE_STRUCTURE

    def set_show_attributes(self, show_attributes: bool) -> bool:
        """Switch dump mode, returning whether it changed."""
        if show_attributes == self.show_attributes:
            return False
        self.show_attributes = show_attributes
        return True

    def current_lines(self) -> list[str]:
        key = (path_stat_signature(self.path), self.show_attributes, self.indent, self.feature_version)
        if key == self._cache_key:
            return self._cache_lines

        try:
            source = read_text(self.path)
        except OSError as exc:
            lines = [sanitize_terminal_text(f"Error: {exc.strerror or exc}: {self.path}")]
        else:
            lines = dump_source(
                source,
                str(self.path),
                show_attributes=self.show_attributes,
                indent=self.indent,
                feature_version=self.feature_version,
            )
        self._cache_key = key
        self._cache_lines = lines
        return lines

    def _mode_label(self, mode: str, key: str) -> str:
        if mode == self.mode:
            return f"{GREEN}{BOLD}[{key}]{RESET} {mode}"
        return f"{DIM}[{key}]{RESET} {mode}"

    def header_lines(self, interactive: bool = True) -> list[str]:
        watching = f"{CYAN}Watching:{RESET} {sanitize_terminal_text(str(self.path))}"
        if not interactive:
            return [watching, f"{CYAN}Dump mode:{RESET} {self.mode}"]
        modes = f"{self._mode_label(MODE_STRUCTURE, '1')}  {self._mode_label(MODE_POSITIONS, '2')}"
        return [watching, f"{CYAN}Dump mode:{RESET} {modes}  {DIM}[q] quit{RESET}"]
