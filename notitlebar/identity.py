"""Window identifier resolver: find the X id of a window handle.

Strategies, first success wins:
1. the id printed in the window description (`0x3a00007 Firefox`)
2. the child of the compositor actor's window, found with `xwininfo -children`
3. a title match among every client window listed by the window manager
"""

from collections.abc import Callable
from logging import Logger
from typing import TYPE_CHECKING

from .constants import MARKER_HINT, WM_NAME_HINT
from .models import IdentityUnresolvable, PropertyQueryFailed
from .parsers import parse_description_xid, parse_quoted_string, parse_tree_child
from .properties import PropertyAccessor
from .store import WindowTable

if TYPE_CHECKING:
    from .adapters.backend import WindowHandle

__all__ = ["WindowIdentifierResolver"]


class WindowIdentifierResolver:
    """Resolve and memoize window identities.

    A resolved identity is cached in the window's record and returned as is
    for the rest of the window's life. Failures are not cached, so callers
    may retry.
    """

    def __init__(self, table: WindowTable, accessor: PropertyAccessor, log: Logger) -> None:
        self.table = table
        self.accessor = accessor
        self.log = log
        self._strategies: "list[Callable[[WindowHandle], str | None]]" = [
            self._from_description,
            self._from_window_tree,
            self._from_client_list,
        ]

    def resolve(self, handle: "WindowHandle") -> str | None:
        """Return the X id of `handle`, or None if no strategy works."""
        record = self.table.get(handle)
        if record.identity:
            return record.identity

        for strategy in self._strategies:
            identity = strategy(handle)
            if identity:
                self.log.debug("Window info: title='%s', type='%s', xid=%s", handle.title(), handle.window_type(), identity)
                record.identity = identity
                return identity

        self.log.debug("Unable to determine xid for window title='%s', type='%s'", handle.title(), handle.window_type())
        return None

    def require(self, handle: "WindowHandle") -> str:
        """Like `resolve` but raises IdentityUnresolvable on failure."""
        identity = self.resolve(handle)
        if identity is None:
            raise IdentityUnresolvable(handle.title())
        return identity

    def _from_description(self, handle: "WindowHandle") -> str | None:
        # non UTF-8 titles may break the description even when title() works
        try:
            return parse_description_xid(handle.description())
        except UnicodeError:
            return None

    def _from_window_tree(self, handle: "WindowHandle") -> str | None:
        if not handle.compositor_actor_ready():
            return None
        xwindow = handle.actor_xwindow()
        if not xwindow:
            return None
        try:
            output = self.accessor.window_tree(f"0x{xwindow:x}")
        except PropertyQueryFailed as e:
            self.log.debug("xwininfo failed for 0x%x: %s", xwindow, e)
            return None
        return parse_tree_child(output, handle.title())

    def _from_client_list(self, handle: "WindowHandle") -> str | None:
        try:
            clients = self.accessor.list_clients()
        except PropertyQueryFailed as e:
            self.log.debug("Cannot list client windows: %s", e)
            return None

        title = handle.title()
        for client in clients:
            try:
                props = self.accessor.query(client, WM_NAME_HINT, MARKER_HINT)
            except PropertyQueryFailed:
                continue
            # already processed windows would give false matches on shared titles
            if MARKER_HINT in props:
                continue
            if parse_quoted_string(props.get(WM_NAME_HINT)) == title:
                return client
        return None
