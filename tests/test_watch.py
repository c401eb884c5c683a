"""Tests for stat-signature change polling and sample file creation."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from lazyast.watch import SAMPLE_SOURCE, FileWatcher, create_if_missing, path_stat_signature


class FileWatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.path = Path(tmp.name) / "watched.py"
        self.path.write_text("x = 1\n", encoding="utf-8")

    def test_no_change_until_file_is_modified(self) -> None:
        watcher = FileWatcher(self.path)
        self.assertFalse(watcher.has_changed())

        self.path.write_text("x = 12345\n", encoding="utf-8")
        self.assertTrue(watcher.has_changed())
        self.assertFalse(watcher.has_changed())

    def test_mtime_only_change_is_detected(self) -> None:
        watcher = FileWatcher(self.path)
        st = self.path.stat()
        os.utime(self.path, ns=(st.st_atime_ns, st.st_mtime_ns + 1_000_000_000))
        self.assertTrue(watcher.has_changed())

    def test_deletion_and_recreation_are_changes(self) -> None:
        watcher = FileWatcher(self.path)
        self.path.unlink()
        self.assertTrue(watcher.has_changed())
        self.assertEqual(path_stat_signature(self.path), ("missing", 0, 0, 0))

        self.path.write_text("y = 2\n", encoding="utf-8")
        self.assertTrue(watcher.has_changed())


class CreateIfMissingTests(unittest.TestCase):
    def test_creates_sample_once(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "input.py"
            self.assertTrue(create_if_missing(path))
            self.assertEqual(path.read_text(encoding="utf-8"), SAMPLE_SOURCE)

            path.write_text("keep = True\n", encoding="utf-8")
            self.assertFalse(create_if_missing(path))
            self.assertEqual(path.read_text(encoding="utf-8"), "keep = True\n")


if __name__ == "__main__":
    unittest.main()
