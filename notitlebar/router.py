"""Event router: turn desktop events into title bar toggles.

Per window state machine:

    UNSEEN -> PENDING_REALIZATION -> PENDING_IDENTITY -> TRACKED
                      |                      |
                      +------> ABANDONED <---+

Windows not yet known to the compositor are re-checked on the following idle
turns (REALIZE_MAX_RETRIES times), then their identity is resolved with its own
budget (IDENTITY_ATTEMPTS). Exhausting a budget abandons the window.
"""

from logging import Logger

from .adapters.backend import DesktopBackend, WindowHandle, Workspace
from .constants import IDENTITY_ATTEMPTS, REALIZE_MAX_RETRIES
from .identity import WindowIdentifierResolver
from .models import IdentityUnresolvable, NotYetRealized, TrackingState, WindowState, WindowType
from .scheduler import IdleScheduler
from .settings import Settings
from .store import DecorationStateStore, WindowTable
from .toggle import ToggleProtocol

__all__ = ["EventRouter"]

SKIPPED_TYPES = (WindowType.DESKTOP, WindowType.MODAL_DIALOG)
PENDING_STATES = (TrackingState.PENDING_REALIZATION, TrackingState.PENDING_IDENTITY)


class EventRouter:  # pylint: disable=too-many-instance-attributes
    """Subscribe to the backend & settings signals and drive the toggle protocol."""

    def __init__(  # noqa: PLR0913  # pylint: disable=too-many-arguments
        self,
        backend: DesktopBackend,
        settings: Settings,
        table: WindowTable,
        resolver: WindowIdentifierResolver,
        store: DecorationStateStore,
        toggle: ToggleProtocol,
        scheduler: IdleScheduler,
        log: Logger,
    ) -> None:
        self.backend = backend
        self.settings = settings
        self.table = table
        self.resolver = resolver
        self.store = store
        self.toggle = toggle
        self.scheduler = scheduler
        self.log = log
        self._workspace_subscriptions: dict[int, tuple[Workspace, int]] = {}
        self._backend_subscriptions: list[int] = []
        self._global_subscriptions: list[tuple[Settings | DesktopBackend, int]] = []

    @property
    def enabled(self) -> bool:
        return self.scheduler.enabled

    # Lifecycle

    def start(self) -> None:
        """Connect the long lived signals and enable the router."""
        self._global_subscriptions = [
            (self.backend, self.backend.connect("monitors-changed", self.on_monitors_changed)),
            (self.backend, self.backend.connect("window-removed", self.on_window_removed)),
            (self.settings, self.settings.connect("changed::only-main-monitor", self.on_settings_changed)),
            (self.settings, self.settings.connect("changed::ignore-list", self.on_settings_changed)),
            (self.settings, self.settings.connect("changed::ignore-list-type", self.on_settings_changed)),
        ]
        self.enable()

    def destroy(self) -> None:
        """Disable the router and disconnect every signal."""
        self.disable()
        for source, handler_id in self._global_subscriptions:
            source.disconnect(handler_id)
        self._global_subscriptions = []

    def enable(self) -> None:
        self.log.debug("Enabling")
        self._backend_subscriptions = [
            self.backend.connect("n-workspaces", self.on_n_workspaces_changed),
            self.backend.connect("window-entered-monitor", self.on_window_entered_monitor),
            self.backend.connect("focus-window", self.on_focus_changed),
            self.backend.connect("size-change", self.on_size_change),
        ]
        self.scheduler.start()
        # existing windows first: window-added subscriptions would process them twice
        self.scheduler.idle(self._process_existing_windows)

    def disable(self) -> None:
        """Restore the title bar of windows which had one and drop all cached state."""
        self.log.debug("Disabling")
        for handler_id in self._backend_subscriptions:
            self.backend.disconnect(handler_id)
        self._backend_subscriptions = []
        self._clean_workspaces()

        for handle in self.table.tracked():
            if self.store.get_original_state(handle) is WindowState.DEFAULT:
                self.toggle.set_hidden(handle, False)
        self.table.clear()
        self.scheduler.stop()

    def _process_existing_windows(self) -> None:
        for handle in self._each_window():
            self.on_window_added(None, handle)
        self.on_n_workspaces_changed()

    # Signal handlers

    def on_monitors_changed(self) -> None:
        self.log.debug("Monitors changed, reloading")
        self.disable()
        self.enable()

    def on_settings_changed(self, key: str) -> None:
        self.log.debug("Setting %s changed, reloading", key)
        self.disable()
        self.enable()

    def on_n_workspaces_changed(self) -> None:
        """Subscribe to window-added on every workspace."""
        self._clean_workspaces()
        for workspace in self.backend.workspaces():
            handler_id = workspace.connect("window-added", self._on_workspace_window_added)
            self._workspace_subscriptions[workspace.index] = (workspace, handler_id)

    def _on_workspace_window_added(self, workspace: Workspace, handle: WindowHandle) -> None:
        # maximized state is not final yet when the signal fires
        self.scheduler.idle(self.on_window_added, workspace, handle)

    def on_window_added(self, workspace: Workspace | None, handle: WindowHandle) -> None:
        """Start tracking a new window."""
        if handle.window_type() in SKIPPED_TYPES:
            return
        record = self.table.get(handle)
        # known window, probably switching workspace
        if record.tracking is not TrackingState.UNSEEN or record.original_state is not None:
            return
        self.log.debug("Window '%s' added to %s", handle.title(), workspace)
        record.tracking = TrackingState.PENDING_REALIZATION
        record.attempts = 0
        self._check_realized(handle)

    def on_focus_changed(self) -> None:
        self.log.debug("Focus changed, toggling titlebar")
        self._toggle_focused()

    def on_size_change(self) -> None:
        self.log.debug("Size changed, toggling titlebar")
        self._toggle_focused()

    def on_window_entered_monitor(self, monitor_index: int, handle: WindowHandle) -> None:
        hide = handle.maximized()
        if self.settings.only_main_monitor:
            hide = monitor_index == self.backend.primary_monitor_index()
        self._toggle(handle, hide)

    def on_window_removed(self, handle: WindowHandle) -> None:
        self.table.forget(handle)

    # Tracking state machine

    def _check_realized(self, handle: WindowHandle) -> None:
        record = self.table.peek(handle)
        if record is None or record.tracking is not TrackingState.PENDING_REALIZATION:
            return
        try:
            self._probe_realized(handle)
        except NotYetRealized:
            if record.attempts >= REALIZE_MAX_RETRIES:
                self._abandon(handle, "never realized")
                return
            record.attempts += 1
            self.scheduler.idle(self._check_realized, handle)
            return
        record.tracking = TrackingState.PENDING_IDENTITY
        record.attempts = 0
        self.scheduler.idle(self._identify, handle)

    @staticmethod
    def _probe_realized(handle: WindowHandle) -> None:
        if not handle.compositor_actor_ready():
            raise NotYetRealized(handle.title())

    def _identify(self, handle: WindowHandle) -> None:
        record = self.table.peek(handle)
        if record is None or record.tracking is not TrackingState.PENDING_IDENTITY:
            return
        record.attempts += 1
        try:
            self.resolver.require(handle)
        except IdentityUnresolvable:
            if record.attempts < IDENTITY_ATTEMPTS:
                self.scheduler.idle(self._identify, handle)
            else:
                self._abandon(handle, "no xid")
            return
        record.tracking = TrackingState.TRACKED
        hide = handle.maximized()
        if self.settings.only_main_monitor:
            hide = handle.on_primary_monitor()
        self.toggle.set_hidden(handle, hide)

    def _abandon(self, handle: WindowHandle, reason: str) -> None:
        self.log.debug("Giving up on window '%s': %s", handle.title(), reason)
        self.table.get(handle).tracking = TrackingState.ABANDONED

    # Utilities

    def _toggle_focused(self) -> None:
        handle = self.backend.focus_window()
        if handle is None:
            self.log.debug("Tried to toggle titlebar, but couldn't find focus window")
            return
        self._toggle(handle, handle.maximized())

    def _toggle(self, handle: WindowHandle, hide: bool) -> None:
        record = self.table.get(handle)
        if record.tracking in PENDING_STATES or record.tracking is TrackingState.ABANDONED:
            self.log.debug("Window '%s' is %s, not toggled", handle.title(), record.tracking.value)
            return
        self.toggle.set_hidden(handle, hide)
        if record.original_state is not None:
            record.tracking = TrackingState.TRACKED

    def _clean_workspaces(self) -> None:
        for workspace, handler_id in self._workspace_subscriptions.values():
            workspace.disconnect(handler_id)
        self._workspace_subscriptions = {}

    def _each_window(self) -> list[WindowHandle]:
        return [handle for handle in self.backend.windows() if handle.window_type() is not WindowType.DESKTOP]
