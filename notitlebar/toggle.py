"""Toggle protocol: hide or show the title bar of one window."""

from logging import Logger
from typing import TYPE_CHECKING

from .identity import WindowIdentifierResolver
from .models import IgnoredByPolicy, WindowState
from .policy import IgnorePolicy
from .properties import PropertyAccessor
from .store import DecorationStateStore

if TYPE_CHECKING:
    from .adapters.backend import WindowHandle

__all__ = ["DECORATIONS_HIDDEN", "DECORATIONS_SHOWN", "ToggleProtocol"]

DECORATIONS_HIDDEN = 0x2  # border only
DECORATIONS_SHOWN = 0x1  # everything


class ToggleProtocol:
    """Write the Motif decoration hint matching the wanted title bar visibility.

    Every call issues a write, even if the same value was written before: the
    window manager ignores identical values.
    """

    def __init__(
        self,
        store: DecorationStateStore,
        resolver: WindowIdentifierResolver,
        accessor: PropertyAccessor,
        policy: IgnorePolicy,
        log: Logger,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.accessor = accessor
        self.policy = policy
        self.log = log

    def set_hidden(self, handle: "WindowHandle", want_hidden: bool) -> None:
        """Hide (`want_hidden`) or show the title bar of `handle`."""
        try:
            self.policy.check(handle, want_hidden)
        except IgnoredByPolicy as e:
            self.log.debug("%s", e)
            return

        # must happen before any write: our own hint would hide the original state
        if self.store.get_original_state(handle) is WindowState.UNKNOWN:
            self.log.debug("Original state of '%s' unknown, left alone", handle.title())
            return

        identity = self.resolver.resolve(handle)
        if identity is None:
            self.log.debug("Window '%s' has no known xid, left alone", handle.title())
            return

        if not self.store.is_handleable(handle):
            self.log.debug("Window stays unhandled: '%s'", handle.title())
            return

        target = self.store.get_motif_hints(handle).with_decorations(DECORATIONS_HIDDEN if want_hidden else DECORATIONS_SHOWN)
        self.log.debug("Toggling decorations for window '%s' (%s), hide=%s", handle.title(), identity, want_hidden)
        self.accessor.set_motif_hints(identity, target)
