" generic fixtures "
import logging
from dataclasses import dataclass

import pytest
from pytest_asyncio import fixture

from notitlebar.identity import WindowIdentifierResolver
from notitlebar.policy import IgnorePolicy
from notitlebar.properties import PropertyAccessor
from notitlebar.router import EventRouter
from notitlebar.scheduler import IdleScheduler
from notitlebar.settings import Settings
from notitlebar.store import DecorationStateStore, WindowTable
from notitlebar.toggle import ToggleProtocol

from .testtools import FakeBackend, FakeXServer


def pytest_configure():
    "Runs once before all"
    from notitlebar.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


@pytest.fixture
def test_logger():
    from notitlebar.logging_setup import get_logger

    return get_logger("tests", level=logging.DEBUG)


@pytest.fixture
def xserver(monkeypatch):
    "Fake X server, receiving the property writes"
    server = FakeXServer()
    monkeypatch.setattr("notitlebar.properties.spawn", server.spawn)
    return server


@dataclass
class Stack:
    "Every component, wired like the daemon does"

    xserver: FakeXServer
    backend: FakeBackend
    settings: Settings
    accessor: PropertyAccessor
    table: WindowTable
    resolver: WindowIdentifierResolver
    store: DecorationStateStore
    policy: IgnorePolicy
    toggle: ToggleProtocol
    scheduler: IdleScheduler
    router: EventRouter


def build_stack(xserver, logger, section=None):
    backend = FakeBackend()
    settings = Settings(section or {}, logger=logger)
    accessor = PropertyAccessor(logger, runner=xserver)
    table = WindowTable()
    resolver = WindowIdentifierResolver(table, accessor, logger)
    store = DecorationStateStore(table, resolver, accessor, logger)
    policy = IgnorePolicy(settings)
    toggle = ToggleProtocol(store, resolver, accessor, policy, logger)
    scheduler = IdleScheduler(logger)
    router = EventRouter(backend, settings, table, resolver, store, toggle, scheduler, logger)
    return Stack(xserver, backend, settings, accessor, table, resolver, store, policy, toggle, scheduler, router)


@fixture
async def stack(xserver, test_logger):
    "Components on a fake desktop"
    components = build_stack(xserver, test_logger)
    yield components
    components.scheduler.stop()
    await components.accessor.drain()
