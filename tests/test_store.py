import pytest

from notitlebar.models import MotifHints, WindowState

from .testtools import FakeWindow

MARKER = "_NO_TITLE_BAR_ORIGINAL_STATE"
GTK = "_GTK_HIDE_TITLEBAR_WHEN_MAXIMIZED"
MOTIF = "_MOTIF_WM_HINTS"


@pytest.fixture
def window(xserver):
    xserver.add_window("0xa1b2c3", title="Firefox")
    return FakeWindow("Firefox", xid=0xA1B2C3)


@pytest.mark.asyncio
async def test_client_decorated_is_undecorated(xserver, stack):
    window = FakeWindow("Gedit", xid=0x10, client_decorated=True)
    assert stack.store.get_original_state(window) is WindowState.UNDECORATED
    assert xserver.calls == []


@pytest.mark.asyncio
async def test_unresolvable_is_unknown(xserver, stack):
    window = FakeWindow("Nowhere")
    assert stack.store.get_original_state(window) is WindowState.UNKNOWN
    assert stack.table.get(window).original_state is None

    # identified later: the real state is captured then
    xserver.add_window("0x20", title="Nowhere")
    assert stack.store.get_original_state(window) is WindowState.DEFAULT
    assert stack.table.get(window).original_state is WindowState.DEFAULT


@pytest.mark.asyncio
async def test_query_failure_is_unknown(stack):
    # the id is known but the window is gone
    assert stack.store.get_original_state(FakeWindow("Gone", xid=0x404)) is WindowState.UNKNOWN


@pytest.mark.asyncio
async def test_no_hints_is_default(xserver, stack, window):
    assert stack.store.get_original_state(window) is WindowState.DEFAULT
    await stack.accessor.drain()
    assert xserver.writes == []


@pytest.mark.asyncio
async def test_toolkit_hint_persisted_in_marker(xserver, stack, window):
    xserver.set_prop("0xa1b2c3", GTK, "1")
    assert stack.store.get_original_state(window) is WindowState.HIDE_TITLEBAR
    await stack.accessor.drain()
    assert xserver.writes == [("0xa1b2c3", MARKER, "0x1")]


@pytest.mark.asyncio
async def test_toolkit_hint_off(xserver, stack, window):
    xserver.set_prop("0xa1b2c3", GTK, "0")
    assert stack.store.get_original_state(window) is WindowState.DEFAULT
    await stack.accessor.drain()
    assert xserver.writes == [("0xa1b2c3", MARKER, "0x0")]


@pytest.mark.asyncio
async def test_marker_wins_over_toolkit_hint(xserver, stack, window):
    xserver.set_prop("0xa1b2c3", GTK, "1")
    xserver.set_prop("0xa1b2c3", MARKER, "0")
    assert stack.store.get_original_state(window) is WindowState.DEFAULT
    await stack.accessor.drain()
    assert xserver.writes == []


@pytest.mark.asyncio
async def test_motif_snapshot_does_not_decide_state(xserver, stack, window):
    xserver.set_prop("0xa1b2c3", MARKER, "0x2, 0x0, 0x1, 0x0, 0x0")
    assert stack.store.get_original_state(window) is WindowState.DEFAULT

    other = FakeWindow("Term", xid=0x20)
    xserver.add_window("0x20", title="Term", **{MARKER: "0x2, 0x0, 0x1, 0x0, 0x0", GTK: "1"})
    assert stack.store.get_original_state(other) is WindowState.HIDE_TITLEBAR
    await stack.accessor.drain()
    # the snapshot is kept
    assert xserver.writes == []


@pytest.mark.asyncio
async def test_original_state_memoized(xserver, stack, window):
    assert stack.store.get_original_state(window) is WindowState.DEFAULT
    xserver.set_prop("0xa1b2c3", MARKER, "1")
    calls = len(xserver.calls)
    assert stack.store.get_original_state(window) is WindowState.DEFAULT
    assert len(xserver.calls) == calls


@pytest.mark.asyncio
async def test_motif_hints_default_persisted(xserver, stack, window):
    assert stack.store.get_motif_hints(window) == MotifHints.default()
    await stack.accessor.drain()
    assert xserver.writes == [("0xa1b2c3", MARKER, "0x2, 0x0, 0x1, 0x0, 0x0")]


@pytest.mark.asyncio
async def test_motif_hints_native(xserver, stack, window):
    xserver.set_prop("0xa1b2c3", MOTIF, "0x3, 0x1, 0x4, 0x0, 0x0", MOTIF)
    assert stack.store.get_motif_hints(window) == MotifHints(3, 1, 4, 0, 0)
    await stack.accessor.drain()
    assert xserver.writes == [("0xa1b2c3", MARKER, "0x3, 0x1, 0x4, 0x0, 0x0")]


@pytest.mark.asyncio
async def test_motif_hints_from_snapshot(xserver, stack, window):
    # the current value was written by an earlier run
    xserver.set_prop("0xa1b2c3", MOTIF, "0x2, 0x0, 0x2, 0x0, 0x0", MOTIF)
    xserver.set_prop("0xa1b2c3", MARKER, "0x2, 0x0, 0x1, 0x0, 0x0")
    assert stack.store.get_motif_hints(window) == MotifHints.default()
    await stack.accessor.drain()
    assert xserver.writes == []


@pytest.mark.asyncio
async def test_motif_hints_memoized(xserver, stack, window):
    hints = stack.store.get_motif_hints(window)
    xserver.set_prop("0xa1b2c3", MOTIF, "0x2, 0x0, 0x0, 0x0, 0x0", MOTIF)
    await stack.accessor.drain()
    calls = len(xserver.calls)
    assert stack.store.get_motif_hints(window) is hints
    assert len(xserver.calls) == calls


@pytest.mark.asyncio
async def test_motif_hints_unresolvable_not_cached(stack):
    window = FakeWindow("Nowhere")
    assert stack.store.get_motif_hints(window) == MotifHints.default()
    assert stack.table.get(window).motif_hints is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("decorations", "handleable"),
    [
        ("0x0", False),
        ("0x2", False),
        ("0x1", True),
    ],
)
async def test_is_handleable(xserver, stack, window, decorations, handleable):
    xserver.set_prop("0xa1b2c3", MOTIF, f"0x2, 0x0, {decorations}, 0x0, 0x0", MOTIF)
    assert stack.store.is_handleable(window) is handleable


@pytest.mark.asyncio
async def test_client_decorated_not_handleable(stack):
    assert not stack.store.is_handleable(FakeWindow("Gedit", xid=0x10, client_decorated=True))
