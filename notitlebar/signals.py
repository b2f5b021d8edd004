"""Minimal signal emitter: named signals with connect / disconnect / emit."""

import itertools
from collections.abc import Callable
from typing import Any

__all__ = ["SignalEmitter"]


class SignalEmitter:
    """Object exposing named signals.

    Handlers are identified by the integer returned from `connect`, which is
    what `disconnect` expects.
    """

    def __init__(self) -> None:
        self._handlers: dict[int, tuple[str, Callable[..., Any]]] = {}
        self._handler_ids = itertools.count(1)

    def connect(self, signal: str, callback: Callable[..., Any]) -> int:
        """Call `callback` each time `signal` is emitted.

        Returns:
            The handler id
        """
        handler_id = next(self._handler_ids)
        self._handlers[handler_id] = (signal, callback)
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        """Remove a handler, unknown ids are ignored."""
        self._handlers.pop(handler_id, None)

    def emit(self, signal: str, *args: Any) -> None:  # noqa: ANN401
        """Call every handler connected to `signal`, in connection order."""
        for name, callback in list(self._handlers.values()):
            if name == signal:
                callback(*args)

    def handler_count(self, signal: str) -> int:
        """Return how many handlers are connected to `signal`."""
        return sum(1 for name, _ in self._handlers.values() if name == signal)
