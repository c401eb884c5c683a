"""CLI argument and default-path behavior tests.

Verifies how ``lazyast.cli.main`` picks the watched file, creates it when
missing, and forwards options to the viewer.
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyast import cli
from lazyast.config import ViewerSettings
from lazyast.watch import SAMPLE_SOURCE


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch("lazyast.cli.load_settings", return_value=ViewerSettings())
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_main_defaults_to_input_py_in_cwd_and_creates_it(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            previous_cwd = Path.cwd()
            stderr = io.StringIO()
            try:
                os.chdir(root)
                with mock.patch("lazyast.cli.run_viewer") as run_viewer, mock.patch("sys.stderr", stderr):
                    cli.main([])
            finally:
                os.chdir(previous_cwd)

            target = root / "input.py"
            self.assertEqual(target.read_text(encoding="utf-8"), SAMPLE_SOURCE)
            self.assertEqual(stderr.getvalue(), f"Created: {target}\n")
            run_viewer.assert_called_once()
            path = run_viewer.call_args.args[0]
            self.assertEqual(path.resolve(), target)
            self.assertEqual(
                run_viewer.call_args.kwargs,
                {
                    "show_attributes": False,
                    "indent": 2,
                    "feature_version": None,
                    "style": "monokai",
                    "no_color": False,
                },
            )

    def test_existing_file_is_not_rewritten(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "mine.py"
            target.write_text("y = 2\n", encoding="utf-8")
            stderr = io.StringIO()

            with mock.patch("lazyast.cli.run_viewer") as run_viewer, mock.patch("sys.stderr", stderr):
                cli.main([str(target)], default_path=Path(tmp) / "unused.py")

            self.assertEqual(target.read_text(encoding="utf-8"), "y = 2\n")
            self.assertEqual(stderr.getvalue(), "")
            self.assertFalse((Path(tmp) / "unused.py").exists())
            self.assertEqual(run_viewer.call_args.args[0], target)

    def test_options_are_forwarded(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "a.py"
            target.write_text("", encoding="utf-8")
            argv = [str(target), "--attributes", "--indent", "4", "--feature-version", "3.8", "--style", "default", "--no-color"]

            with mock.patch("lazyast.cli.run_viewer") as run_viewer:
                cli.main(argv)

            kwargs = run_viewer.call_args.kwargs
            self.assertTrue(kwargs["show_attributes"])
            self.assertEqual(kwargs["indent"], 4)
            self.assertEqual(kwargs["feature_version"], (3, 8))
            self.assertEqual(kwargs["style"], "default")
            self.assertTrue(kwargs["no_color"])

    def test_config_settings_become_defaults(self) -> None:
        settings = ViewerSettings(style="default", no_color=True, show_attributes=True, indent=0)
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "a.py"
            target.write_text("", encoding="utf-8")

            with mock.patch("lazyast.cli.load_settings", return_value=settings), mock.patch(
                "lazyast.cli.run_viewer"
            ) as run_viewer:
                cli.main([str(target), "--no-attributes"])

            kwargs = run_viewer.call_args.kwargs
            self.assertFalse(kwargs["show_attributes"])
            self.assertEqual(kwargs["indent"], 0)
            self.assertEqual(kwargs["style"], "default")
            self.assertTrue(kwargs["no_color"])

    def test_directory_path_exits(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("lazyast.cli.run_viewer") as run_viewer:
                with self.assertRaises(SystemExit) as ctx:
                    cli.main([tmp])
            run_viewer.assert_not_called()
            self.assertIn("Not a file", str(ctx.exception.code))

    def test_invalid_feature_version_is_rejected(self) -> None:
        with mock.patch("lazyast.cli.run_viewer") as run_viewer, mock.patch("sys.stderr", io.StringIO()):
            for bad in ("2.7", "3", "3.x", "banana"):
                with self.assertRaises(SystemExit):
                    cli.main(["x.py", "--feature-version", bad])
        run_viewer.assert_not_called()

    def test_negative_indent_is_rejected(self) -> None:
        with mock.patch("lazyast.cli.run_viewer") as run_viewer, mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.main(["x.py", "--indent", "-1"])
        run_viewer.assert_not_called()

    def test_keyboard_interrupt_exits_quietly(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "a.py"
            target.write_text("", encoding="utf-8")
            with mock.patch("lazyast.cli.run_viewer", side_effect=KeyboardInterrupt):
                cli.main([str(target)])

    def test_log_file_attaches_debug_handler(self) -> None:
        package_logger = logging.getLogger("lazyast")
        previous_level = package_logger.level
        previous_handlers = list(package_logger.handlers)
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "debug.log"
            try:
                cli.configure_logging(log_path)
                added = [h for h in package_logger.handlers if h not in previous_handlers]
                self.assertEqual(len(added), 1)
                self.assertEqual(package_logger.level, logging.DEBUG)
                package_logger.debug("hello from test")
                added[0].flush()
                self.assertIn("hello from test", log_path.read_text(encoding="utf-8"))
            finally:
                for handler in package_logger.handlers:
                    if handler not in previous_handlers:
                        package_logger.removeHandler(handler)
                        handler.close()
                package_logger.setLevel(previous_level)


if __name__ == "__main__":
    unittest.main()
