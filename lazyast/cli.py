"""Command-line front door for lazyast.

Parses CLI options on top of the config-file defaults, makes sure the watched
file exists, and hands off to the viewer runtime.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .app import run_viewer
from .config import load_settings
from .watch import create_if_missing

DEFAULT_FILENAME = "input.py"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _nonnegative_int(value: str) -> int:
    """argparse type for non-negative integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _feature_version(value: str) -> tuple[int, int]:
    """argparse type for ``3.N`` grammar versions."""
    major, sep, minor = value.partition(".")
    if not sep or not major.isdigit() or not minor.isdigit() or int(major) != 3:
        raise argparse.ArgumentTypeError(f"expected a version like 3.8, got {value!r}")
    return int(major), int(minor)


def configure_logging(log_file: Path | None) -> None:
    """Send package logs to ``log_file``; without one they are discarded."""
    if log_file is None:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("lazyast")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def build_parser() -> argparse.ArgumentParser:
    settings = load_settings()
    parser = argparse.ArgumentParser(
        prog="lazyast",
        description="Watch a Python file and browse its AST dump in the terminal.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help=f"Python file to watch. Defaults to ./{DEFAULT_FILENAME}, created when missing.",
    )
    parser.add_argument(
        "--attributes",
        action=argparse.BooleanOptionalAction,
        default=settings.show_attributes,
        help="Start in positions mode (include lineno/col_offset attributes).",
    )
    parser.add_argument(
        "--indent",
        type=_nonnegative_int,
        default=settings.indent,
        help="Indent width for the dump (default: %(default)s).",
    )
    parser.add_argument(
        "--feature-version",
        type=_feature_version,
        default=None,
        metavar="3.N",
        help="Parse with the grammar of an older Python 3 minor version.",
    )
    parser.add_argument("--style", default=settings.style, help="Pygments style name for dump coloring.")
    parser.add_argument(
        "--no-color",
        action="store_true",
        default=settings.no_color,
        help="Disable syntax coloring of the dump.",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Write debug logs to this file.")
    return parser


def main(argv: list[str] | None = None, default_path: Path | None = None) -> None:
    """Parse arguments and launch the viewer.

    ``default_path`` is primarily for tests; when omitted ``./input.py`` is used.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file)

    if args.path is not None:
        path = Path(args.path)
    else:
        path = default_path if default_path is not None else Path.cwd() / DEFAULT_FILENAME
    if path.is_dir():
        raise SystemExit(f"Not a file: {path}")
    try:
        created = create_if_missing(path)
    except OSError as exc:
        raise SystemExit(f"Cannot create {path}: {exc.strerror or exc}") from exc
    if created:
        sys.stderr.write(f"Created: {path}\n")

    try:
        run_viewer(
            path,
            show_attributes=args.attributes,
            indent=args.indent,
            feature_version=args.feature_version,
            style=args.style,
            no_color=args.no_color,
        )
    except KeyboardInterrupt:
        pass
