"""Property accessor: read and write named hints on X windows.

Reads are blocking `xprop` calls (short-lived, memoized by callers).
Writes are detached: they are spawned in the background and only logged.
"""

import asyncio
from collections.abc import Callable
from logging import Logger

from .constants import CLIENT_LIST_HINT, DRAIN_TIMEOUT, MOTIF_HINT, PROPERTY_FORMAT
from .models import MotifHints
from .parsers import parse_cardinals, parse_client_list, parse_properties
from .process import run_query, spawn

__all__ = ["PropertyAccessor", "QueryRunner"]

QueryRunner = Callable[[list[str]], str]


class PropertyAccessor:
    """Access the X server property store through xprop / xwininfo.

    Methods returning data raise `PropertyQueryFailed` when the command
    itself fails; unparsable or missing values are returned as None.
    """

    def __init__(self, log: Logger, runner: QueryRunner = run_query) -> None:
        self.log = log
        self._run = runner
        self._pending: set[asyncio.Task] = set()
        self._last_write: dict[tuple[str, str], asyncio.Task] = {}

    def query(self, identity: str, *hints: str) -> dict[str, str]:
        """Return the raw values of `hints` present on the window."""
        return parse_properties(self._run(["xprop", "-id", identity, *hints]))

    def get_hint(self, identity: str, hint: str) -> list[int] | None:
        """Return the numeric values of `hint`, None when absent or garbled."""
        values = parse_cardinals(self.query(identity, hint).get(hint))
        if values is None:
            self.log.debug("%s not set on %s", hint, identity)
        return values

    def list_clients(self) -> list[str]:
        """Return the ids of every top-level client window."""
        return parse_client_list(self._run(["xprop", "-root", CLIENT_LIST_HINT]))

    def window_tree(self, identity: str) -> str:
        """Return the raw `xwininfo -children` output for a window."""
        return self._run(["xwininfo", "-children", "-id", identity])

    def set_hint(self, identity: str, hint: str, value: str) -> None:
        """Write `hint` on the window in the background.

        Writes to the same property of the same window are started in the order
        they were requested.
        """
        args = ["xprop", "-id", identity, "-f", hint, PROPERTY_FORMAT, "-set", hint, value]
        self.log.debug("Setting %s=%s on %s", hint, value, identity)
        key = (identity, hint)
        task = asyncio.create_task(self._write(args, self._last_write.get(key)))
        self._last_write[key] = task
        self._pending.add(task)
        task.add_done_callback(lambda done: self._forget_write(key, done))

    def set_motif_hints(self, identity: str, hints: MotifHints) -> None:
        """Write `_MOTIF_WM_HINTS` on the window in the background."""
        self.set_hint(identity, MOTIF_HINT, hints.format())

    async def _write(self, args: list[str], previous: asyncio.Task | None) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait([previous])
        await spawn(args, self.log)

    def _forget_write(self, key: tuple[str, str], task: asyncio.Task) -> None:
        self._pending.discard(task)
        if self._last_write.get(key) is task:
            del self._last_write[key]

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    async def drain(self, timeout: float = DRAIN_TIMEOUT) -> None:
        """Wait for in-flight writes, used before exiting."""
        if self._pending:
            _, not_done = await asyncio.wait(set(self._pending), timeout=timeout)
            if not_done:
                self.log.warning("%d property writes still running at exit", len(not_done))
