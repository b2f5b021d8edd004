"""Backend adapter interface.

A backend exposes the desktop as window handles and workspaces, and emits
signals the router listens to:

- DesktopBackend: `monitors-changed`, `focus-window`, `size-change`,
  `window-entered-monitor` (monitor_index, handle), `n-workspaces`,
  `window-removed` (handle)
- Workspace: `window-added` (workspace, handle)
"""

from abc import ABC, abstractmethod

from ..models import WindowType
from ..signals import SignalEmitter

__all__ = ["DesktopBackend", "WindowHandle", "Workspace"]


class WindowHandle(ABC):
    """Opaque reference to a live window.

    Handles are hashable by identity and must be reused by the backend for
    the same window, since derived data is cached per handle.
    """

    @abstractmethod
    def window_type(self) -> WindowType:
        """Return the window type."""

    @abstractmethod
    def title(self) -> str:
        """Return the window title."""

    @abstractmethod
    def description(self) -> str:
        """Return a human readable description, usually `0x<xid> <title>`.

        May raise UnicodeError for titles which are not valid UTF-8.
        """

    @abstractmethod
    def wm_class(self) -> str:
        """Return the window class, used by the ignore list."""

    @abstractmethod
    def maximized(self) -> bool:
        """Tell if the window is maximized."""

    @abstractmethod
    def on_primary_monitor(self) -> bool:
        """Tell if the window is on the primary monitor."""

    @abstractmethod
    def client_decorated(self) -> bool:
        """Tell if the window draws its own decorations."""

    @abstractmethod
    def compositor_actor_ready(self) -> bool:
        """Tell if the compositor side of the window exists yet."""

    @abstractmethod
    def actor_xwindow(self) -> int | None:
        """Return the X id of the compositor actor (usually the frame)."""


class Workspace(SignalEmitter):
    """A workspace, emitting `window-added`."""

    def __init__(self, index: int) -> None:
        super().__init__()
        self.index = index

    def __repr__(self) -> str:
        return f"<Workspace {self.index}>"


class DesktopBackend(SignalEmitter, ABC):
    """Abstract base class for desktop backends."""

    @classmethod
    async def is_available(cls) -> bool:
        """Tell if this backend can run in the current session."""
        return False

    @abstractmethod
    def workspaces(self) -> list[Workspace]:
        """Return the current workspaces."""

    @abstractmethod
    def windows(self) -> list[WindowHandle]:
        """Return every known window."""

    @abstractmethod
    def focus_window(self) -> WindowHandle | None:
        """Return the focused window, if any."""

    @abstractmethod
    def primary_monitor_index(self) -> int:
        """Return the index of the primary monitor."""

    async def start(self) -> None:
        """Start producing events."""

    async def stop(self) -> None:
        """Stop producing events and release resources."""
