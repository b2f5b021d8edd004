"""Process helpers for talking to the X server through xprop & friends.

run_query:
    Blocking call returning stdout, raising PropertyQueryFailed on any failure.
spawn:
    Coroutine running a command to completion, logging failures.
ManagedProcess:
    Long-running subprocess (`xprop -spy`) with SIGTERM -> wait -> SIGKILL shutdown
    and stdout iteration.
"""

__all__ = ["ManagedProcess", "run_query", "spawn"]

import asyncio
import contextlib
import subprocess
from collections.abc import AsyncIterator
from logging import Logger
from typing import Any

from .constants import QUERY_TIMEOUT
from .models import PropertyQueryFailed


def run_query(args: list[str], timeout: float = QUERY_TIMEOUT) -> str:
    """Run a short-lived query command and return its output.

    Args:
        args: Command line
        timeout: Seconds before the command is killed

    Raises:
        PropertyQueryFailed: the command is missing, timed out or exited with an error
    """
    try:
        result = subprocess.run(  # noqa: S603
            args,
            check=False,
            capture_output=True,
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as e:
        msg = f"{args[0]} failed: {e}"
        raise PropertyQueryFailed(msg) from e
    if result.returncode != 0:
        msg = f"{' '.join(args)} exited with {result.returncode}: {result.stderr.decode(errors='replace').strip()}"
        raise PropertyQueryFailed(msg)
    return result.stdout.decode(errors="replace")


async def spawn(args: list[str], log: Logger) -> int | None:
    """Run `args` to completion, logging errors.

    Returns:
        The exit code, or None if the command could not be started
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
        _, stderr = await proc.communicate()
    except OSError as e:
        log.warning("Failed to run %s: %s", args[0], e)
        return None
    if proc.returncode != 0:
        log.warning("%s exited with %s: %s", " ".join(args), proc.returncode, stderr.decode(errors="replace").strip())
    return proc.returncode


class ManagedProcess:
    """Manages a subprocess with proper lifecycle handling.

    Provides consistent start/stop behavior with graceful shutdown:
    1. SIGTERM first (graceful)
    2. Wait with timeout
    3. SIGKILL if still alive
    4. Always wait() to reap zombie

    Usage:
        proc = ManagedProcess()
        await proc.start("xprop", "-root", "-spy", "_NET_ACTIVE_WINDOW", stdout=PIPE)

        async for line in proc.iter_lines():
            print(line)

        await proc.stop()
    """

    def __init__(self, graceful_timeout: float = 1.0) -> None:
        """Initialize.

        Args:
            graceful_timeout: Seconds to wait after SIGTERM before SIGKILL
        """
        self._proc: asyncio.subprocess.Process | None = None
        self._args: tuple[str, ...] = ()
        self._graceful_timeout = graceful_timeout

    @property
    def pid(self) -> int | None:
        """Return PID if process exists, else None."""
        return self._proc.pid if self._proc else None

    @property
    def is_alive(self) -> bool:
        """Check if process is currently running."""
        return self._proc is not None and self._proc.returncode is None

    @property
    def args(self) -> tuple[str, ...]:
        """Command line of the last started process."""
        return self._args

    async def start(self, *args: str, **subprocess_kwargs: Any) -> None:
        """Start the process. Stops existing process first if running.

        Args:
            *args: Command line
            **subprocess_kwargs: Passed to create_subprocess_exec (e.g., stdout=PIPE)
        """
        if self.is_alive:
            await self.stop()

        self._args = args
        self._proc = await asyncio.create_subprocess_exec(*args, **subprocess_kwargs)

    async def stop(self) -> int | None:
        """Stop the process gracefully.

        Returns:
            The process return code, or None if not running
        """
        if self._proc is None:
            return None

        if self._proc.returncode is not None:
            return self._proc.returncode

        with contextlib.suppress(ProcessLookupError):
            self._proc.terminate()

        try:
            await asyncio.wait_for(self._proc.wait(), timeout=self._graceful_timeout)
        except TimeoutError:
            with contextlib.suppress(ProcessLookupError):
                self._proc.kill()
            await self._proc.wait()

        return self._proc.returncode

    async def iter_lines(self) -> AsyncIterator[str]:
        """Iterate over stdout lines.

        Requires process to be started with stdout=asyncio.subprocess.PIPE.

        Yields:
            Decoded, stripped lines from stdout

        Raises:
            RuntimeError: If process has no stdout pipe
        """
        if self._proc is None or self._proc.stdout is None:
            msg = "No process or stdout not piped"
            raise RuntimeError(msg)

        # read until EOF: lines may still be buffered after the process exited
        while True:
            line = await self._proc.stdout.readline()
            if not line:
                break
            yield line.decode(errors="replace").strip()
