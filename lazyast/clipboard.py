"""Best-effort clipboard sink backed by platform copy tools."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys

logger = logging.getLogger(__name__)

CLIPBOARD_TIMEOUT_SECONDS = 2.0


def clipboard_commands(platform: str = sys.platform, os_name: str = os.name) -> list[list[str]]:
    """Return candidate copy commands for the platform, in preference order."""
    if platform == "darwin":
        return [["pbcopy"]]
    if os_name == "nt":
        return [["clip"]]
    return [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]


def copy_text_to_clipboard(text: str) -> bool:
    """Pipe ``text`` to the first available copy tool; failures are only logged."""
    if not text:
        return False

    for command in clipboard_commands():
        if shutil.which(command[0]) is None:
            continue
        try:
            proc = subprocess.run(
                command,
                input=text.encode("utf-8"),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
                timeout=CLIPBOARD_TIMEOUT_SECONDS,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("clipboard command %s failed: %s", command[0], exc)
            continue
        if proc.returncode == 0:
            logger.debug("copied %d characters with %s", len(text), command[0])
            return True
        logger.debug("clipboard command %s exited with %d", command[0], proc.returncode)
    return False
