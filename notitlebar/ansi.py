"""ANSI colors for the screen log handler and the `validate` report.

Colors are skipped when NO_COLOR is set or the stream is not a terminal,
FORCE_COLOR overrides the terminal check.
"""

import logging
import os
import sys
from typing import TextIO

__all__ = [
    "BOLD",
    "DIM",
    "GREEN",
    "LEVEL_STYLES",
    "RED",
    "RESET",
    "YELLOW",
    "colorize",
    "should_colorize",
    "style_prefix",
]

_ESC = "\x1b["

RESET = f"{_ESC}0m"

BOLD = "1"
DIM = "2"

RED = "31"
GREEN = "32"
YELLOW = "33"

# levels missing here are printed plain
LEVEL_STYLES: dict[int, tuple[str, ...]] = {
    logging.WARNING: (YELLOW, DIM),
    logging.ERROR: (RED, DIM),
    logging.CRITICAL: (RED, BOLD),
}


def should_colorize(stream: TextIO | None = None) -> bool:
    """Tell if ANSI colors should be written to `stream` (default: stderr)."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    if stream is None:
        stream = sys.stderr
    return hasattr(stream, "isatty") and stream.isatty()


def style_prefix(*codes: str) -> str:
    """Return the escape sequence enabling `codes`, empty if there are none."""
    if not codes:
        return ""
    return f"{_ESC}{';'.join(codes)}m"


def colorize(text: str, *codes: str, stream: TextIO | None = None) -> str:
    """Wrap text in ANSI color codes, if `stream` accepts colors.

    Args:
        text: The text to colorize
        *codes: ANSI codes to apply (e.g., RED, BOLD)
        stream: Where the text will be written, colors are always applied if None
    """
    if not codes or (stream is not None and not should_colorize(stream)):
        return text
    return f"{style_prefix(*codes)}{text}{RESET}"
