"""Idle scheduler: defer work to a later turn of the event loop."""

import asyncio
from collections.abc import Callable
from logging import Logger
from typing import Any

__all__ = ["IdleScheduler"]


class IdleScheduler:
    """Run callbacks on later event loop turns, while enabled.

    Callbacks scheduled before `stop()` (or before the latest `start()`) are
    dropped when their turn comes.
    """

    def __init__(self, log: Logger) -> None:
        self.log = log
        self.enabled = False
        self.generation = 0

    def start(self) -> None:
        self.generation += 1
        self.enabled = True

    def stop(self) -> None:
        self.enabled = False

    def idle(self, callback: Callable[..., Any], *args: Any) -> asyncio.Handle:  # noqa: ANN401
        """Run `callback(*args)` on the next loop turn."""
        return asyncio.get_running_loop().call_soon(self._run, self.generation, callback, args)

    def _run(self, generation: int, callback: Callable[..., Any], args: tuple) -> None:
        if not self.enabled or generation != self.generation:
            self.log.debug("Dropping stale %s", getattr(callback, "__name__", callback))
            return
        try:
            callback(*args)
        except Exception:  # pylint: disable=W0718
            self.log.exception("Unhandled error in %s", getattr(callback, "__name__", callback))
