from __future__ import annotations

from typing import Optional

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Header, Log

from physna_tui.core.controller import ModeController, Outcome
from physna_tui.core.keys import KeyEvent
from physna_tui.core.modes import Mode
from physna_tui.tui.debug import DebugLogger
from physna_tui.tui.log_handler import TuiLogHandler
from physna_tui.tui.models import WidgetIds
from physna_tui.tui.widgets import (
    FolderList,
    HelpOverlay,
    ModelTable,
    SearchBox,
    StatusBar,
    TenantPicker,
)

# Lines kept in the on-screen log.
LOG_PANE_MAX_LINES = 1000


def to_key_event(event: events.Key) -> KeyEvent:
    """Translate a Textual key press into the controller's `KeyEvent`."""
    key = str(event.key or "")
    ch = event.character
    if ch and event.is_printable and not key.startswith(("ctrl+", "alt+")):
        return KeyEvent(code=ch)
    return KeyEvent.parse(key)


class PhysnaTuiApp(App):
    """
    Full-screen client for browsing Physna folders and models.

    The app is only a renderer: every key goes to `ModeController.handle` and
    each widget is redrawn from the resulting snapshot.
    """

    CSS_PATH = "theme.tcss"
    TITLE = "Physna TUI"
    ENABLE_COMMAND_PALETTE = False
    AUTO_FOCUS = None

    BINDINGS = [
        # priority=True so Textual's focus navigation and widgets never consume these
        # before the controller sees them.
        Binding("tab", "dispatch_key('tab')", "Next pane", show=False, priority=True),
        Binding("escape", "dispatch_key('escape')", "Back", show=False, priority=True),
    ]

    def __init__(
        self,
        controller: ModeController,
        *,
        log_handler: Optional[TuiLogHandler] = None,
    ) -> None:
        super().__init__()
        self.controller = controller
        self._log_handler = log_handler
        self._debug_logger = DebugLogger()

    # -----------------------
    # Compose
    # -----------------------
    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Vertical(id="main"):
            yield SearchBox("", id=WidgetIds.SEARCH_BOX)
            with Horizontal(id=WidgetIds.CONTENT):
                yield FolderList("", id=WidgetIds.FOLDER_LIST)
                yield ModelTable("", id=WidgetIds.MODEL_TABLE)
            yield Log(id=WidgetIds.LOG_PANE, max_lines=LOG_PANE_MAX_LINES)
            yield StatusBar("", id=WidgetIds.STATUS_BAR)
        yield HelpOverlay()
        yield TenantPicker()

    def on_mount(self) -> None:
        self.query_one(f"#{WidgetIds.SEARCH_BOX}").border_title = "Search"
        self.query_one(f"#{WidgetIds.FOLDER_LIST}").border_title = "Folders"
        self.query_one(f"#{WidgetIds.MODEL_TABLE}").border_title = "Models"
        log_pane = self.query_one(f"#{WidgetIds.LOG_PANE}", Log)
        log_pane.border_title = "Log"
        # Scroll keys on a focused log would shadow the controller's navigation keys.
        log_pane.can_focus = False
        if self._log_handler is not None:
            self._log_handler.attach(log_pane.write_line)
        self.refresh_view()

    def on_unmount(self) -> None:
        if self._log_handler is not None:
            self._log_handler.detach()
        self._debug_logger.close_debug_file()

    # -----------------------
    # Input
    # -----------------------
    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.send_key(to_key_event(event))

    def action_dispatch_key(self, key: str) -> None:
        self.send_key(KeyEvent.parse(key))

    def send_key(self, key: KeyEvent) -> None:
        """Hand one key to the controller, then redraw or exit."""
        self._debug_logger.log(
            event="key",
            mode=str(self.controller.mode),
            data={"key": str(key)},
        )
        if self.controller.handle(key) is Outcome.QUIT:
            self.exit()
            return
        self.refresh_view()

    # -----------------------
    # Render
    # -----------------------
    def refresh_view(self) -> None:
        snap = self.controller.snapshot()
        self.query_one(f"#{WidgetIds.SEARCH_BOX}", SearchBox).show(
            snap.search_text, snap.search_cursor, active=snap.mode is Mode.SEARCH
        )
        self.query_one(f"#{WidgetIds.FOLDER_LIST}", FolderList).show(
            snap.folders, active_folder=snap.active_folder, active=snap.mode is Mode.FOLDER
        )
        self.query_one(f"#{WidgetIds.MODEL_TABLE}", ModelTable).show(
            snap.models, active_model=snap.active_model, active=snap.mode is Mode.MODEL
        )
        self.query_one(f"#{WidgetIds.STATUS_BAR}", StatusBar).show(snap.mode, snap.status_line)
        self.query_one(f"#{WidgetIds.HELP_OVERLAY}", HelpOverlay).show(
            visible=snap.help_visible, text=snap.help_text
        )
        self.query_one(f"#{WidgetIds.TENANT_PICKER}", TenantPicker).show(
            visible=snap.tenant_picker_visible, view=snap.tenants, active_tenant=snap.active_tenant
        )
        self.sub_title = snap.active_tenant or ""

    @property
    def debug_events(self) -> list[dict[str, object]]:
        return self._debug_logger.debug_events


__all__ = ["PhysnaTuiApp", "to_key_event"]
