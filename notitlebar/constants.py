"""Shared constants for notitlebar."""

import os
from pathlib import Path

__all__ = [
    "CLIENT_LIST_HINT",
    "CONFIG_FILE",
    "CONFIG_SECTION",
    "DEFAULT_MOTIF_HINTS",
    "DRAIN_TIMEOUT",
    "GTK_HIDE_TITLEBAR_HINT",
    "IDENTITY_ATTEMPTS",
    "MARKER_HINT",
    "MOTIF_HINT",
    "PROPERTY_FORMAT",
    "QUERY_TIMEOUT",
    "REALIZE_MAX_RETRIES",
    "WM_NAME_HINT",
]

# Config file paths - use XDG_CONFIG_HOME with fallback to ~/.config
_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
CONFIG_FILE = _xdg_config_home / "notitlebar" / "config.toml"
CONFIG_SECTION = "notitlebar"

# Window properties
MARKER_HINT = "_NO_TITLE_BAR_ORIGINAL_STATE"
MOTIF_HINT = "_MOTIF_WM_HINTS"
GTK_HIDE_TITLEBAR_HINT = "_GTK_HIDE_TITLEBAR_WHEN_MAXIMIZED"
CLIENT_LIST_HINT = "_NET_CLIENT_LIST"
WM_NAME_HINT = "_NET_WM_NAME"
PROPERTY_FORMAT = "32c"

# flags, functions, decorations, input mode, status
DEFAULT_MOTIF_HINTS = (0x2, 0x0, 0x1, 0x0, 0x0)

# Retry budgets, counted in idle turns
REALIZE_MAX_RETRIES = 4
IDENTITY_ATTEMPTS = 3

# Seconds
QUERY_TIMEOUT = 2.0
DRAIN_TIMEOUT = 5.0
