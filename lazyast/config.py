"""Read-only JSON settings.

Provides defaults for the CLI (style, color, dump mode, indent). Missing or
malformed files and values fall back to defaults; nothing is ever written.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .highlight import DEFAULT_STYLE

logger = logging.getLogger(__name__)

APP_NAME = "lazyast"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_INDENT = 2


@dataclass(frozen=True)
class ViewerSettings:
    style: str = DEFAULT_STYLE
    no_color: bool = False
    show_attributes: bool = False
    indent: int = DEFAULT_INDENT


def load_config() -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _coerce_bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _coerce_indent(value: object) -> int:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return DEFAULT_INDENT
    return value


def load_settings() -> ViewerSettings:
    """Return validated settings, substituting defaults for invalid values."""
    data = load_config()
    style = data.get("style")
    return ViewerSettings(
        style=style if isinstance(style, str) and style else DEFAULT_STYLE,
        no_color=_coerce_bool(data.get("no_color"), False),
        show_attributes=_coerce_bool(data.get("show_attributes"), False),
        indent=_coerce_indent(data.get("indent")),
    )
