"""Ignore list policy (white list / black list)."""

from typing import TYPE_CHECKING

from .models import IgnoredByPolicy, IgnoreListType
from .settings import Settings

if TYPE_CHECKING:
    from .adapters.backend import WindowHandle

__all__ = ["IgnorePolicy"]


class IgnorePolicy:
    """Decide whether the ignore list protects a window."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def is_ignored(self, handle: "WindowHandle") -> bool:
        list_type = self.settings.ignore_list_type
        if list_type is IgnoreListType.DISABLED:
            return False
        matched = self.settings.matches_ignore_list(handle.wm_class(), handle.title())
        if list_type is IgnoreListType.BLACKLIST:
            return matched
        return not matched

    def check(self, handle: "WindowHandle", want_hidden: bool) -> None:
        """Raise IgnoredByPolicy if the window may not be hidden.

        Showing the title bar back is always allowed.
        """
        if want_hidden and self.is_ignored(handle):
            msg = f"Window '{handle.title()}' ignored due to {self.settings.ignore_list_type}"
            raise IgnoredByPolicy(msg)
