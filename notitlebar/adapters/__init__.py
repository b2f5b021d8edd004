"""Desktop backends: window, workspace and monitor event sources."""

from .backend import DesktopBackend, WindowHandle, Workspace

__all__ = ["DesktopBackend", "WindowHandle", "Workspace"]
