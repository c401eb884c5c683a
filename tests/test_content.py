"""Tests for the AST dump content provider."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from lazyast.ansi import strip_ansi
from lazyast.content import MODE_POSITIONS, MODE_STRUCTURE, AstDumper, dump_source, read_text


class DumpSourceTests(unittest.TestCase):
    def test_structure_dump_is_indented_lines(self) -> None:
        lines = dump_source("x = 1\n")
        self.assertEqual(lines[0], "Module(")
        self.assertIn("  body=[", lines)
        self.assertTrue(any("Name(id='x'" in line for line in lines))
        self.assertFalse(any("lineno=" in line for line in lines))

    def test_attributes_mode_includes_positions(self) -> None:
        lines = dump_source("x = 1\n", show_attributes=True)
        self.assertTrue(any("lineno=1" in line for line in lines))

    def test_indent_controls_nesting_width(self) -> None:
        lines = dump_source("x = 1\n", indent=4)
        self.assertIn("    body=[", lines)

    def test_syntax_error_is_rendered_as_lines(self) -> None:
        lines = dump_source("def broken(:\n", filename="broken.py")
        self.assertTrue(lines[-1].startswith("SyntaxError"))
        self.assertTrue(any('"broken.py", line 1' in line for line in lines))

    def test_feature_version_rejects_newer_syntax(self) -> None:
        source = "match x:\n    case 1:\n        pass\n"
        self.assertEqual(dump_source(source)[0], "Module(")
        self.assertTrue(dump_source(source, feature_version=(3, 8))[-1].startswith("SyntaxError"))

    def test_control_bytes_never_reach_output(self) -> None:
        lines = dump_source("x = '\x07' +\n")
        self.assertFalse(any("\x07" in line for line in lines))


class AstDumperTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.path = Path(tmp.name) / "input.py"
        self.path.write_text("x = 1\n", encoding="utf-8")

    def test_current_lines_are_cached_until_file_changes(self) -> None:
        dumper = AstDumper(self.path)
        first = dumper.current_lines()
        self.assertIs(dumper.current_lines(), first)

        self.path.write_text("value = 22\n", encoding="utf-8")
        second = dumper.current_lines()
        self.assertIsNot(second, first)
        self.assertTrue(any("Name(id='value'" in line for line in second))

    def test_mode_switch_changes_dump(self) -> None:
        dumper = AstDumper(self.path)
        self.assertEqual(dumper.mode, MODE_STRUCTURE)
        self.assertFalse(dumper.set_show_attributes(False))
        self.assertTrue(dumper.set_show_attributes(True))
        self.assertEqual(dumper.mode, MODE_POSITIONS)
        self.assertTrue(any("lineno=1" in line for line in dumper.current_lines()))

    def test_missing_file_yields_error_line(self) -> None:
        self.path.unlink()
        lines = AstDumper(self.path).current_lines()
        self.assertEqual(len(lines), 1)
        self.assertTrue(lines[0].startswith("Error:"))

    def test_interactive_header_shows_mode_keys(self) -> None:
        header = [strip_ansi(line) for line in AstDumper(self.path).header_lines(interactive=True)]
        self.assertEqual(header[0], f"Watching: {self.path}")
        self.assertIn("[1] structure", header[1])
        self.assertIn("[2] positions", header[1])
        self.assertIn("[q] quit", header[1])

    def test_static_header_names_active_mode(self) -> None:
        dumper = AstDumper(self.path, show_attributes=True)
        header = [strip_ansi(line) for line in dumper.header_lines(interactive=False)]
        self.assertEqual(header, [f"Watching: {self.path}", "Dump mode: positions"])

    def test_read_text_falls_back_to_latin1(self) -> None:
        self.path.write_bytes(b"s = '\xe9'\n")
        self.assertEqual(read_text(self.path), "s = 'é'\n")


if __name__ == "__main__":
    unittest.main()
