"""Per-window side table and the decoration state store."""

from collections.abc import Iterator
from logging import Logger
from typing import TYPE_CHECKING

from .constants import GTK_HIDE_TITLEBAR_HINT, MARKER_HINT, MOTIF_HINT
from .models import MotifHints, PropertyQueryFailed, TrackingState, WindowRecord, WindowState
from .parsers import parse_cardinals
from .properties import PropertyAccessor

if TYPE_CHECKING:
    from .adapters.backend import WindowHandle
    from .identity import WindowIdentifierResolver

__all__ = ["DecorationStateStore", "WindowTable"]

# decorations field values meaning another mechanism already decides
FOREIGN_DECORATIONS = (0x0, 0x2)


class WindowTable:
    """Maps window handles to their cached `WindowRecord`."""

    def __init__(self) -> None:
        self._records: "dict[WindowHandle, WindowRecord]" = {}

    def get(self, handle: "WindowHandle") -> WindowRecord:
        """Return the record of `handle`, creating it on first access."""
        record = self._records.get(handle)
        if record is None:
            record = self._records[handle] = WindowRecord()
        return record

    def peek(self, handle: "WindowHandle") -> WindowRecord | None:
        return self._records.get(handle)

    def forget(self, handle: "WindowHandle") -> None:
        self._records.pop(handle, None)

    def clear(self) -> None:
        self._records.clear()

    def items(self) -> Iterator[tuple["WindowHandle", WindowRecord]]:
        return iter(list(self._records.items()))

    def tracked(self) -> list["WindowHandle"]:
        return [handle for handle, record in self._records.items() if record.tracking is TrackingState.TRACKED]

    def __len__(self) -> int:
        return len(self._records)


class DecorationStateStore:
    """Derives and caches the original decoration state and Motif hints of windows.

    Both values are computed at most once per window: later changes of the
    underlying properties are ignored on purpose, the cached values describe
    the window as it was before any decoration write.
    """

    def __init__(
        self,
        table: WindowTable,
        resolver: "WindowIdentifierResolver",
        accessor: PropertyAccessor,
        log: Logger,
    ) -> None:
        self.table = table
        self.resolver = resolver
        self.accessor = accessor
        self.log = log

    def get_original_state(self, handle: "WindowHandle") -> WindowState:
        """Return the decoration policy the window had before being touched.

        UNKNOWN is never cached: the state is captured on a later call, once
        the window can be identified and read.
        """
        record = self.table.get(handle)
        if record.original_state is None:
            state = self._derive_original_state(handle)
            # not captured yet (xid unknown or properties unreadable): ask again next time
            if state is WindowState.UNKNOWN:
                return state
            record.original_state = state
            self.log.debug("Original state of '%s': %s", handle.title(), state)
        return record.original_state

    def _derive_original_state(self, handle: "WindowHandle") -> WindowState:
        if handle.client_decorated():
            return WindowState.UNDECORATED

        identity = self.resolver.resolve(handle)
        if identity is None:
            return WindowState.UNKNOWN

        try:
            props = self.accessor.query(identity, MARKER_HINT, GTK_HIDE_TITLEBAR_HINT)
        except PropertyQueryFailed as e:
            self.log.debug("Cannot read properties of %s: %s", identity, e)
            return WindowState.UNKNOWN

        marker = parse_cardinals(props.get(MARKER_HINT))
        if marker is not None and len(marker) == 1:
            return WindowState.HIDE_TITLEBAR if marker[0] else WindowState.DEFAULT

        toolkit = parse_cardinals(props.get(GTK_HIDE_TITLEBAR_HINT))
        if toolkit:
            hide = bool(toolkit[0])
            # a five values marker is a motif snapshot written earlier: keep it
            if marker is None:
                self.accessor.set_hint(identity, MARKER_HINT, "0x1" if hide else "0x0")
            return WindowState.HIDE_TITLEBAR if hide else WindowState.DEFAULT

        return WindowState.DEFAULT

    def get_motif_hints(self, handle: "WindowHandle") -> MotifHints:
        """Return the Motif hints the window had before being touched.

        The first derivation is persisted in the marker hint so that it
        survives a restart of the daemon.
        """
        record = self.table.get(handle)
        if record.motif_hints is not None:
            return record.motif_hints

        identity = self.resolver.resolve(handle)
        if identity is None:
            return MotifHints.default()

        hints = MotifHints.from_values(self._read_hint(identity, MARKER_HINT) or [])
        if hints is None:
            hints = MotifHints.from_values(self._read_hint(identity, MOTIF_HINT) or []) or MotifHints.default()
            self.accessor.set_hint(identity, MARKER_HINT, hints.format())
        record.motif_hints = hints
        return hints

    def _read_hint(self, identity: str, hint: str) -> list[int] | None:
        try:
            return self.accessor.get_hint(identity, hint)
        except PropertyQueryFailed as e:
            self.log.debug("Cannot read %s of %s: %s", hint, identity, e)
            return None

    def is_handleable(self, handle: "WindowHandle") -> bool:
        """Tell if this window's decorations may be altered."""
        if handle.client_decorated():
            return False
        return self.get_motif_hints(handle).decorations not in FOREIGN_DECORATIONS
