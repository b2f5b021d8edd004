import pytest

from notitlebar.identity import WindowIdentifierResolver
from notitlebar.models import IdentityUnresolvable
from notitlebar.properties import PropertyAccessor
from notitlebar.store import WindowTable

from .test_parsers import TREE_OUTPUT
from .testtools import FakeWindow


@pytest.fixture
def resolver(xserver, test_logger):
    return WindowIdentifierResolver(WindowTable(), PropertyAccessor(test_logger, runner=xserver), test_logger)


def test_from_description_no_external_call(xserver, resolver):
    window = FakeWindow("Firefox", description="0xa1b2c3 Firefox")
    assert resolver.resolve(window) == "0xa1b2c3"
    assert xserver.calls == []


def test_from_window_tree(xserver, resolver):
    xserver.trees["0x55"] = TREE_OUTPUT
    window = FakeWindow("MyWindow", actor_xwindow=0x55)
    assert resolver.resolve(window) == "0x99"
    assert xserver.calls == [["xwininfo", "-children", "-id", "0x55"]]


def test_window_tree_needs_realized_actor(xserver, resolver):
    xserver.trees["0x55"] = TREE_OUTPUT
    window = FakeWindow("MyWindow", actor_xwindow=0x55, actor_ready=False)
    assert resolver.resolve(window) is None
    assert ["xwininfo", "-children", "-id", "0x55"] not in xserver.calls


def test_from_client_list_skips_marked_windows(xserver, resolver):
    xserver.add_window("0x10", title="Term", _NO_TITLE_BAR_ORIGINAL_STATE="0x1")
    xserver.add_window("0x11", title="Other")
    xserver.add_window("0x12", title="Term")
    window = FakeWindow("Term", actor_ready=False)
    assert resolver.resolve(window) == "0x12"


def test_client_list_ignores_vanished_windows(xserver, resolver):
    xserver.add_window("0x12", title="Term")
    xserver.outputs[("xprop", "-root", "_NET_CLIENT_LIST")] = "_NET_CLIENT_LIST(WINDOW): window id # 0x404, 0x12\n"
    assert resolver.resolve(FakeWindow("Term")) == "0x12"


def test_undecodable_description_falls_through(xserver, resolver):
    xserver.add_window("0x12", title="Term")
    window = FakeWindow("Term", description=UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"))
    assert resolver.resolve(window) == "0x12"


def test_memoized(xserver, resolver):
    xserver.add_window("0x12", title="Term")
    window = FakeWindow("Term")
    assert resolver.resolve(window) == "0x12"
    calls = len(xserver.calls)
    assert resolver.resolve(window) == "0x12"
    assert len(xserver.calls) == calls
    assert resolver.table.get(window).identity == "0x12"


def test_failures_are_not_cached(xserver, resolver):
    window = FakeWindow("Term")
    assert resolver.resolve(window) is None
    xserver.add_window("0x12", title="Term")
    assert resolver.resolve(window) == "0x12"


def test_require(resolver):
    with pytest.raises(IdentityUnresolvable):
        resolver.require(FakeWindow("Nowhere"))
    assert resolver.require(FakeWindow("Firefox", xid=0xA1)) == "0xa1"
