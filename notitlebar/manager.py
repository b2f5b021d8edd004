"""NoTitleBar manager - the core daemon class."""

import asyncio
import signal
from typing import Any

from .adapters.backend import DesktopBackend
from .adapters.xorg import XorgBackend
from .config_loader import ConfigLoader
from .identity import WindowIdentifierResolver
from .logging_setup import get_logger, is_debug, set_debug
from .models import ConfigError
from .policy import IgnorePolicy
from .properties import PropertyAccessor
from .router import EventRouter
from .scheduler import IdleScheduler
from .settings import Settings
from .store import DecorationStateStore, WindowTable
from .toggle import ToggleProtocol

__all__ = ["NoTitleBar", "run_daemon"]

COMPONENT_LOGGERS = ("notitlebar", "settings", "xorg", "properties", "identity", "store", "toggle", "scheduler", "router")


class NoTitleBar:  # pylint: disable=too-many-instance-attributes
    """Main app object, wiring the backend to the event router."""

    def __init__(self, config_filename: str = "", backend: DesktopBackend | None = None, accessor: PropertyAccessor | None = None) -> None:
        self.config_filename = config_filename
        self.log = get_logger()
        self.stopped = asyncio.Event()
        self._tasks: set[asyncio.Task] = set()
        self.settings = Settings(logger=get_logger("settings"))
        self.backend = backend or XorgBackend(get_logger("xorg"))
        self.accessor = accessor or PropertyAccessor(get_logger("properties"))
        self.table = WindowTable()
        self.resolver = WindowIdentifierResolver(self.table, self.accessor, get_logger("identity"))
        self.store = DecorationStateStore(self.table, self.resolver, self.accessor, get_logger("store"))
        self.policy = IgnorePolicy(self.settings)
        self.toggle = ToggleProtocol(self.store, self.resolver, self.accessor, self.policy, get_logger("toggle"))
        self.scheduler = IdleScheduler(get_logger("scheduler"))
        self.router = EventRouter(
            self.backend,
            self.settings,
            self.table,
            self.resolver,
            self.store,
            self.toggle,
            self.scheduler,
            get_logger("router"),
        )

    async def load_config(self) -> dict[str, Any]:
        """Load the configuration file and apply it to the settings.

        Raises:
            ConfigError: the file is missing or broken
        """
        section = await ConfigLoader(self.log).load(self.config_filename)
        self.settings.update(section)
        if self.settings.config.get_bool("debug") and not is_debug():
            set_debug(True)
            for name in COMPONENT_LOGGERS:
                get_logger(name)
        for error in self.settings.validate():
            self.log.error(error)
        return section

    async def initialize(self) -> None:
        """Load the configuration, then start the backend and the router."""
        await self.load_config()
        await self.backend.start()
        self.router.start()

    async def reload(self) -> None:
        """Reload the configuration, keeping the current one on error."""
        self.log.info("Reloading configuration")
        try:
            await self.load_config()
        except ConfigError:
            self.log.error("Configuration not reloaded")

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self.stopped.set)
        loop.add_signal_handler(signal.SIGHUP, self._schedule_reload)

    def _schedule_reload(self) -> asyncio.Task:
        task = asyncio.create_task(self.reload())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run(self) -> None:
        """Wait for SIGTERM or SIGINT."""
        self._install_signal_handlers()
        await self.stopped.wait()

    async def shutdown(self) -> None:
        """Restore the windows, wait for pending writes and stop the backend."""
        self.log.info("Shutting down")
        self.router.destroy()
        await self.accessor.drain()
        await self.backend.stop()


async def run_daemon(config_filename: str = "") -> None:
    """Run the daemon until a termination signal is received.

    Raises:
        ConfigError: the configuration could not be loaded
        OSError: no X server can be reached
    """
    if not await XorgBackend.is_available():
        msg = "xprop cannot reach an X server"
        raise OSError(msg)

    manager = NoTitleBar(config_filename)
    await manager.initialize()
    manager.log.debug("[ initialized ]".center(80, "="))
    try:
        await manager.run()
    except asyncio.CancelledError:
        manager.log.critical("cancelled")
    finally:
        await manager.shutdown()
