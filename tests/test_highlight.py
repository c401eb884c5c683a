"""Tests for dump coloring and control-byte sanitization."""

from __future__ import annotations

import unittest

from lazyast.ansi import strip_ansi
from lazyast.highlight import DEFAULT_STYLE, highlight_lines, normalize_style, sanitize_terminal_text

DUMP = [
    "Module(",
    "  body=[",
    "    Expr(",
    "      value=Constant(value='hi'))],",
    "  type_ignores=[])",
]


class HighlightTests(unittest.TestCase):
    def test_colored_lines_align_with_plain_lines(self) -> None:
        colored = highlight_lines(DUMP, DEFAULT_STYLE)
        self.assertEqual(len(colored), len(DUMP))
        self.assertEqual([strip_ansi(line) for line in colored], DUMP)
        self.assertTrue(any("\x1b[" in line for line in colored))

    def test_no_color_returns_plain_copy(self) -> None:
        plain = highlight_lines(DUMP, no_color=True)
        self.assertEqual(plain, DUMP)
        self.assertIsNot(plain, DUMP)

    def test_empty_input(self) -> None:
        self.assertEqual(highlight_lines([]), [])

    def test_unknown_style_falls_back_to_default(self) -> None:
        self.assertEqual(normalize_style("definitely-not-a-style"), DEFAULT_STYLE)
        self.assertEqual(normalize_style("default"), "default")

    def test_sanitize_escapes_control_bytes_but_keeps_whitespace(self) -> None:
        self.assertEqual(sanitize_terminal_text("a\x1b[2Jb\tc\n"), "a\\x1b[2Jb\tc\n")
        self.assertEqual(sanitize_terminal_text("plain"), "plain")


if __name__ == "__main__":
    unittest.main()
