"""Data model: enums, the Motif hint vector, per-window records and errors."""

from dataclasses import dataclass
from enum import Enum, IntEnum, StrEnum
from typing import NamedTuple

from .constants import DEFAULT_MOTIF_HINTS

__all__ = [
    "ConfigError",
    "ExitCode",
    "IdentityUnresolvable",
    "IgnoreListType",
    "IgnoredByPolicy",
    "MotifHints",
    "NoTitleBarError",
    "NotYetRealized",
    "PropertyQueryFailed",
    "TrackingState",
    "WindowRecord",
    "WindowState",
    "WindowType",
]


class WindowState(StrEnum):
    """Decoration policy a window had before it was touched."""

    DEFAULT = "default"
    HIDE_TITLEBAR = "hide_titlebar"
    UNDECORATED = "undecorated"
    UNKNOWN = "unknown"


class IgnoreListType(StrEnum):
    """How the ignore list is interpreted."""

    DISABLED = "disabled"
    WHITELIST = "whitelist"
    BLACKLIST = "blacklist"


class TrackingState(Enum):
    """Per-window router state."""

    UNSEEN = "unseen"
    PENDING_REALIZATION = "pending_realization"
    PENDING_IDENTITY = "pending_identity"
    TRACKED = "tracked"
    ABANDONED = "abandoned"


class WindowType(Enum):
    """Window types as reported by the window manager."""

    NORMAL = "normal"
    DESKTOP = "desktop"
    DOCK = "dock"
    DIALOG = "dialog"
    MODAL_DIALOG = "modal_dialog"
    UTILITY = "utility"
    SPLASHSCREEN = "splashscreen"
    OTHER = "other"


class MotifHints(NamedTuple):
    """The five CARDINALs of `_MOTIF_WM_HINTS`."""

    flags: int
    functions: int
    decorations: int
    input_mode: int
    status: int

    @classmethod
    def default(cls) -> "MotifHints":
        """Return the vector assumed when a window carries no hint."""
        return cls(*DEFAULT_MOTIF_HINTS)

    @classmethod
    def from_values(cls, values: list[int]) -> "MotifHints | None":
        """Build a vector from a parsed property, None if the length is wrong."""
        if len(values) != len(cls._fields):
            return None
        return cls(*values)

    def with_decorations(self, decorations: int) -> "MotifHints":
        """Return a copy with the decorations field replaced.

        The decorations flag (0x2) is forced in `flags` so the window manager
        honors the field.
        """
        return self._replace(flags=self.flags | 0x2, decorations=decorations)

    def format(self) -> str:
        """Format the vector the way `xprop -set` expects it."""
        return ", ".join(f"0x{value:x}" for value in self)


@dataclass
class WindowRecord:
    """Derived data cached for one window handle."""

    identity: str | None = None
    original_state: WindowState | None = None
    motif_hints: MotifHints | None = None
    tracking: TrackingState = TrackingState.UNSEEN
    attempts: int = 0


class NoTitleBarError(Exception):
    """Base class for recoverable errors."""


class PropertyQueryFailed(NoTitleBarError):
    """An external query failed or returned unusable output."""


class IdentityUnresolvable(NoTitleBarError):
    """No strategy could find the external identifier of a window."""


class NotYetRealized(NoTitleBarError):
    """The compositor does not know about the window yet."""


class IgnoredByPolicy(NoTitleBarError):
    """The ignore list forbids hiding this window."""


class ConfigError(BaseException):
    """Used for configuration errors which already triggered logging."""


class ExitCode(IntEnum):
    """Standard exit codes for the notitlebar command."""

    SUCCESS = 0
    USAGE_ERROR = 1
    ENV_ERROR = 2
    CONFIG_ERROR = 3
