"""X11/Xorg backend built on xprop, xwininfo and xrandr.

Events come from two `xprop -spy` processes: one on the root window (client
list, focus, workspace count, desktop geometry), one on the focused window's
`_NET_WM_STATE` (maximize / resize and monitor moves).
"""

import asyncio
import contextlib
import re
from dataclasses import dataclass
from logging import Logger

from ..models import PropertyQueryFailed, WindowType
from ..parsers import XID_RE, parse_cardinals, parse_properties, parse_quoted_string
from ..process import ManagedProcess, run_query
from ..properties import QueryRunner
from .backend import DesktopBackend, WindowHandle, Workspace

__all__ = ["Monitor", "XorgBackend", "XorgWindow", "parse_xrandr_output", "parse_xwininfo"]

ROOT_PROPERTIES = ("_NET_CLIENT_LIST", "_NET_ACTIVE_WINDOW", "_NET_NUMBER_OF_DESKTOPS", "_NET_DESKTOP_GEOMETRY")
WINDOW_PROPERTIES = ("_NET_WM_NAME", "WM_NAME", "WM_CLASS", "_NET_WM_WINDOW_TYPE", "_NET_WM_STATE", "_GTK_FRAME_EXTENTS", "_NET_WM_DESKTOP")

ALL_DESKTOPS = 0xFFFFFFFF

WINDOW_TYPES = {
    "_NET_WM_WINDOW_TYPE_NORMAL": WindowType.NORMAL,
    "_NET_WM_WINDOW_TYPE_DESKTOP": WindowType.DESKTOP,
    "_NET_WM_WINDOW_TYPE_DOCK": WindowType.DOCK,
    "_NET_WM_WINDOW_TYPE_DIALOG": WindowType.DIALOG,
    "_NET_WM_WINDOW_TYPE_UTILITY": WindowType.UTILITY,
    "_NET_WM_WINDOW_TYPE_SPLASH": WindowType.SPLASHSCREEN,
}

XRANDR_RE = re.compile(
    r"^(\S+)\s+connected"  # name
    r"(?P<primary>\s+primary)?"
    r"\s+(\d+)x(\d+)\+(-?\d+)\+(-?\d+)"  # WxH+X+Y
)
QUOTED_ITEM_RE = re.compile(r'"((?:[^\\"]|\\.)*)"')


@dataclass
class Monitor:
    """An active output."""

    index: int
    name: str
    width: int
    height: int
    x: int
    y: int
    primary: bool = False

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height


def parse_xrandr_output(output: str) -> list[Monitor]:
    """Parse `xrandr --query` output, keeping active outputs only.

    Example xrandr output:
        DP-1 connected primary 1920x1080+0+0 left (normal left inverted right x axis y axis) 527mm x 296mm
           1920x1080     60.00*+
        HDMI-1 connected 2560x1440+1920+0 (normal left inverted right x axis y axis) 597mm x 336mm
        VGA-1 disconnected (normal left inverted right x axis y axis)
    """
    monitors: list[Monitor] = []
    for line in output.splitlines():
        match = XRANDR_RE.match(line)
        if not match:
            continue
        name, _, width, height, pos_x, pos_y = match.groups()
        monitors.append(
            Monitor(
                index=len(monitors),
                name=name,
                width=int(width),
                height=int(height),
                x=int(pos_x),
                y=int(pos_y),
                primary=match.group("primary") is not None,
            )
        )
    return monitors


def parse_xwininfo(output: str) -> dict[str, str]:
    """Parse `xwininfo` output into a `label: value` mapping.

    Example:
          Absolute upper-left X:  0
          Width: 1920
          Map State: IsViewable
          Parent window id: 0x1e00005 (has no name)
    """
    info = {}
    for line in output.splitlines():
        label, sep, value = line.strip().partition(":")
        if sep:
            info[label] = value.strip()
    return info


class XorgWindow(WindowHandle):
    """A client window, queried on demand through xprop & xwininfo."""

    def __init__(self, backend: "XorgBackend", xid: int) -> None:
        self.backend = backend
        self.xid = xid
        self.identity = f"0x{xid:x}"

    def __repr__(self) -> str:
        return f"<XorgWindow {self.identity}>"

    def _props(self, *names: str) -> dict[str, str]:
        try:
            return parse_properties(self.backend.runner(["xprop", "-id", self.identity, *names]))
        except PropertyQueryFailed as e:
            self.backend.log.debug("xprop failed on %s: %s", self.identity, e)
            return {}

    def _info(self, *flags: str) -> dict[str, str]:
        try:
            return parse_xwininfo(self.backend.runner(["xwininfo", *flags, "-id", self.identity]))
        except PropertyQueryFailed as e:
            self.backend.log.debug("xwininfo failed on %s: %s", self.identity, e)
            return {}

    def _states(self) -> set[str]:
        return {state.strip() for state in self._props("_NET_WM_STATE").get("_NET_WM_STATE", "").split(",") if state.strip()}

    def window_type(self) -> WindowType:
        props = self._props("_NET_WM_WINDOW_TYPE", "_NET_WM_STATE")
        types = [t.strip() for t in props.get("_NET_WM_WINDOW_TYPE", "").split(",")]
        window_type = next((WINDOW_TYPES[t] for t in types if t in WINDOW_TYPES), WindowType.NORMAL)
        if window_type is WindowType.DIALOG and "_NET_WM_STATE_MODAL" in props.get("_NET_WM_STATE", ""):
            return WindowType.MODAL_DIALOG
        return window_type

    def title(self) -> str:
        props = self._props("_NET_WM_NAME", "WM_NAME")
        return parse_quoted_string(props.get("_NET_WM_NAME")) or parse_quoted_string(props.get("WM_NAME")) or ""

    def description(self) -> str:
        # same shape as mutter's "0x%x %10s"
        return f"{self.identity} {self.title()[:10]}"

    def wm_class(self) -> str:
        items = QUOTED_ITEM_RE.findall(self._props("WM_CLASS").get("WM_CLASS", ""))
        return items[-1] if items else ""

    def maximized(self) -> bool:
        states = self._states()
        return {"_NET_WM_STATE_MAXIMIZED_VERT", "_NET_WM_STATE_MAXIMIZED_HORZ"} <= states

    def client_decorated(self) -> bool:
        return "_GTK_FRAME_EXTENTS" in self._props("_GTK_FRAME_EXTENTS")

    def compositor_actor_ready(self) -> bool:
        # windows on other workspaces or minimized are unmapped but managed: only the frame matters
        return self.actor_xwindow() is not None

    def actor_xwindow(self) -> int | None:
        parent = self._info("-tree").get("Parent window id", "")
        match = XID_RE.match(parent)
        if not match:
            return None
        if "(the root window)" in parent:
            return self.xid
        return int(match.group(0), 16)

    def workspace_index(self) -> int | None:
        values = parse_cardinals(self._props("_NET_WM_DESKTOP").get("_NET_WM_DESKTOP"))
        if not values or values[0] == ALL_DESKTOPS:
            return None
        return values[0]

    def monitor_index(self) -> int | None:
        info = self._info()
        try:
            center_x = int(info["Absolute upper-left X"]) + int(info["Width"]) // 2
            center_y = int(info["Absolute upper-left Y"]) + int(info["Height"]) // 2
        except (KeyError, ValueError):
            return None
        return self.backend.monitor_at(center_x, center_y)

    def on_primary_monitor(self) -> bool:
        return self.monitor_index() == self.backend.primary_monitor_index()


class XorgBackend(DesktopBackend):  # pylint: disable=too-many-instance-attributes
    """X11 desktop backend."""

    def __init__(self, log: Logger, runner: QueryRunner = run_query) -> None:
        super().__init__()
        self.log = log
        self.runner = runner
        self.monitors: list[Monitor] = []
        self._windows: dict[int, XorgWindow] = {}
        self._workspaces: list[Workspace] = []
        self._active: int | None = None
        self._desktop_geometry = ""
        self._window_monitors: dict[int, int | None] = {}
        self._root_spy = ManagedProcess()
        self._state_spy = ManagedProcess()
        self._tasks: list[asyncio.Task] = []
        self._state_task: asyncio.Task | None = None

    @classmethod
    async def is_available(cls) -> bool:
        """Check if xprop can talk to an X server."""
        try:
            proc = await asyncio.create_subprocess_exec(
                "xprop",
                "-root",
                "_NET_SUPPORTED",
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            return await proc.wait() == 0
        except OSError:
            return False

    # DesktopBackend

    def workspaces(self) -> list[Workspace]:
        return list(self._workspaces)

    def windows(self) -> list[WindowHandle]:
        return list(self._windows.values())

    def focus_window(self) -> WindowHandle | None:
        return self._focused()

    def _focused(self) -> XorgWindow | None:
        if self._active is None:
            return None
        return self._windows.get(self._active)

    def primary_monitor_index(self) -> int:
        for monitor in self.monitors:
            if monitor.primary:
                return monitor.index
        return 0

    def monitor_at(self, x: int, y: int) -> int | None:
        for monitor in self.monitors:
            if monitor.contains(x, y):
                return monitor.index
        return None

    def window(self, xid: int) -> XorgWindow:
        """Return the handle of `xid`, the same object for the window's life."""
        handle = self._windows.get(xid)
        if handle is None:
            handle = self._windows[xid] = XorgWindow(self, xid)
        return handle

    async def start(self) -> None:
        self.refresh_monitors()
        try:
            self.apply_root_properties(parse_properties(self.runner(["xprop", "-root", *ROOT_PROPERTIES])), initial=True)
        except PropertyQueryFailed as e:
            self.log.warning("Cannot read root window properties: %s", e)
        await self._root_spy.start("xprop", "-root", "-spy", *ROOT_PROPERTIES, stdout=asyncio.subprocess.PIPE)
        self._tasks.append(asyncio.create_task(self._read_root_events()))
        await self._watch_focused()

    async def stop(self) -> None:
        for task in [*self._tasks, self._state_task]:
            if task is not None:
                task.cancel()
        self._tasks = []
        self._state_task = None
        await self._state_spy.stop()
        await self._root_spy.stop()

    # Monitors

    def refresh_monitors(self) -> None:
        try:
            self.monitors = parse_xrandr_output(self.runner(["xrandr", "--query"]))
        except PropertyQueryFailed as e:
            self.log.warning("Failed to get monitors from xrandr: %s", e)
            self.monitors = []
        for monitor in self.monitors:
            self.log.debug("xrandr monitor: %s %dx%d+%d+%d primary=%s", monitor.name, monitor.width, monitor.height, monitor.x, monitor.y, monitor.primary)

    # Events

    def apply_root_properties(self, props: dict[str, str], initial: bool = False) -> bool:
        """Update the state from root window properties, emitting signals unless `initial`.

        Returns:
            True if the focused window changed
        """
        focus_changed = False
        if "_NET_NUMBER_OF_DESKTOPS" in props:
            self._set_workspace_count(props["_NET_NUMBER_OF_DESKTOPS"], initial)
        if "_NET_CLIENT_LIST" in props:
            self._set_client_list(props["_NET_CLIENT_LIST"], initial)
        if "_NET_ACTIVE_WINDOW" in props:
            focus_changed = self._set_active_window(props["_NET_ACTIVE_WINDOW"], initial)
        if "_NET_DESKTOP_GEOMETRY" in props and props["_NET_DESKTOP_GEOMETRY"] != self._desktop_geometry:
            self._desktop_geometry = props["_NET_DESKTOP_GEOMETRY"]
            if not initial:
                self.refresh_monitors()
                self.emit("monitors-changed")
        return focus_changed

    def _set_workspace_count(self, raw: str, initial: bool) -> None:
        values = parse_cardinals(raw)
        if not values or values[0] == len(self._workspaces):
            return
        self._workspaces = [Workspace(index) for index in range(values[0])]
        if not initial:
            self.emit("n-workspaces")

    def _set_client_list(self, raw: str, initial: bool) -> None:
        current = {int(xid, 16) for xid in XID_RE.findall(raw)}
        for xid in [xid for xid in self._windows if xid not in current]:
            handle = self._windows.pop(xid)
            self._window_monitors.pop(xid, None)
            if not initial:
                self.emit("window-removed", handle)
        for xid in sorted(current - set(self._windows)):
            handle = self.window(xid)
            if not initial:
                self._emit_window_added(handle)

    def _emit_window_added(self, handle: XorgWindow) -> None:
        if not self._workspaces:
            return
        index = handle.workspace_index()
        workspace = self._workspaces[index] if index is not None and index < len(self._workspaces) else self._workspaces[0]
        workspace.emit("window-added", workspace, handle)

    def _set_active_window(self, raw: str, initial: bool) -> bool:
        match = XID_RE.search(raw)
        active = int(match.group(0), 16) if match else None
        if active == 0:
            active = None
        if active == self._active:
            return False
        self._active = active
        if not initial:
            self.emit("focus-window")
        return True

    def handle_state_change(self) -> None:
        """The focused window's `_NET_WM_STATE` changed."""
        handle = self._focused()
        if handle is None:
            return
        self.emit("size-change")
        monitor = handle.monitor_index()
        previous = self._window_monitors.get(handle.xid)
        self._window_monitors[handle.xid] = monitor
        if monitor is not None and previous is not None and monitor != previous:
            self.emit("window-entered-monitor", monitor, handle)

    async def _read_root_events(self) -> None:
        async for line in self._root_spy.iter_lines():
            try:
                if self.apply_root_properties(parse_properties(line)):
                    await self._watch_focused()
            except Exception:  # pylint: disable=W0718
                self.log.exception("Error processing root event %r", line)
        self.log.critical("xprop root spy stopped")

    async def _watch_focused(self) -> None:
        if self._state_task is not None:
            self._state_task.cancel()
            self._state_task = None
        await self._state_spy.stop()
        handle = self._focused()
        if handle is None:
            return
        self._window_monitors.setdefault(handle.xid, handle.monitor_index())
        await self._state_spy.start("xprop", "-spy", "-id", handle.identity, "_NET_WM_STATE", stdout=asyncio.subprocess.PIPE)
        self._state_task = asyncio.create_task(self._read_state_events())

    async def _read_state_events(self) -> None:
        first = True
        with contextlib.suppress(RuntimeError):
            async for _ in self._state_spy.iter_lines():
                # xprop prints the current value when it starts
                if first:
                    first = False
                    continue
                try:
                    self.handle_state_change()
                except Exception:  # pylint: disable=W0718
                    self.log.exception("Error processing window state event")
