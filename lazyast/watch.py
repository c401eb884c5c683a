"""Poll-based change detection for the watched source file."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SAMPLE_SOURCE = '''\
class Hello:
    message: str

    def greet(self) -> str:
        return f"hello, {self.message}"
'''


def path_stat_signature(path: Path) -> tuple[str, int, int, int]:
    """Return a stable stat tuple describing ``path`` existence and metadata."""
    try:
        st = path.stat()
    except FileNotFoundError:
        return ("missing", 0, 0, 0)
    except OSError:
        return ("error", 0, 0, 0)
    return ("ok", st.st_mtime_ns, st.st_size, st.st_mode)


class FileWatcher:
    """Report whether the file changed since the previous poll."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._signature = path_stat_signature(path)

    def has_changed(self) -> bool:
        signature = path_stat_signature(self.path)
        if signature == self._signature:
            return False
        logger.debug("change detected for %s: %s -> %s", self.path, self._signature, signature)
        self._signature = signature
        return True


def create_if_missing(path: Path) -> bool:
    """Write a small sample module at ``path`` when nothing exists there yet."""
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(SAMPLE_SOURCE, encoding="utf-8")
    logger.info("created sample source at %s", path)
    return True
