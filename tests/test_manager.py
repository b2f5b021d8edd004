import asyncio
import signal

import pytest

from notitlebar.manager import NoTitleBar
from notitlebar.properties import PropertyAccessor

from .testtools import FakeBackend, FakeWindow, run_idle


@pytest.fixture
def manager(xserver, test_logger, tmp_path):
    config = tmp_path / "config.toml"
    config.write_text("[notitlebar]\nonly_main_monitor = false\n")
    return NoTitleBar(str(config), backend=FakeBackend(), accessor=PropertyAccessor(test_logger, runner=xserver))


@pytest.mark.asyncio
async def test_lifecycle(xserver, manager):
    xserver.add_window("0x10", title="Win")
    manager.backend.add_window(FakeWindow("Win", xid=0x10, maximized=True), notify=False)

    await manager.initialize()
    manager.backend.start_mock.assert_called_once()
    assert manager.router.enabled
    await run_idle()
    await manager.accessor.drain()
    assert xserver.motif_writes() == ["0x2, 0x0, 0x2, 0x0, 0x0"]

    await manager.shutdown()
    manager.backend.stop_mock.assert_called_once()
    assert not manager.router.enabled
    # title bar restored
    assert xserver.motif_writes() == ["0x2, 0x0, 0x2, 0x0, 0x0", "0x2, 0x0, 0x1, 0x0, 0x0"]
    assert manager.accessor.pending_writes == 0


@pytest.mark.asyncio
async def test_reload(manager, tmp_path):
    await manager.initialize()
    assert not manager.settings.only_main_monitor

    (tmp_path / "config.toml").write_text("[notitlebar]\nonly_main_monitor = true\n")
    await manager.reload()
    assert manager.settings.only_main_monitor

    # a broken file keeps the current settings
    (tmp_path / "config.toml").write_text("[notitlebar\n")
    await manager.reload()
    assert manager.settings.only_main_monitor
    await manager.shutdown()


@pytest.mark.asyncio
async def test_reload_task_is_kept_until_done(manager, tmp_path):
    await manager.initialize()
    (tmp_path / "config.toml").write_text("[notitlebar]\nonly_main_monitor = true\n")

    task = manager._schedule_reload()
    assert task in manager._tasks
    await task
    await asyncio.sleep(0)
    assert not manager._tasks
    assert manager.settings.only_main_monitor
    await manager.shutdown()


@pytest.mark.asyncio
async def test_run_stops_on_signal(manager):
    await manager.initialize()
    runner = asyncio.create_task(manager.run())
    await asyncio.sleep(0)
    signal.raise_signal(signal.SIGTERM)
    await asyncio.wait_for(runner, timeout=1)
    await manager.shutdown()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT, signal.SIGHUP):
        loop.remove_signal_handler(sig)
