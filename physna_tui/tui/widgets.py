"""Widgets that draw a `ControllerSnapshot`.

None of these widgets take focus or handle keys: every key goes to the app,
which hands it to the controller and then calls ``show`` on each widget with
the new snapshot.
"""

from __future__ import annotations

from typing import Optional

from rich.table import Table
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.widgets import Static

from physna_tui.core.controller import CollectionView
from physna_tui.core.presenter import StatusPresenter
from physna_tui.core.modes import Mode
from physna_tui.model import Folder, Model, ModelState
from physna_tui.tui.models import WidgetIds

HIGHLIGHT_SYMBOL = "->"

_STATE_STYLES = {
    ModelState.RECEIVED: "dim",
    ModelState.INDEXING: "yellow",
    ModelState.READY: "green",
}


def _set_active(widget: Static, active: bool) -> None:
    if active:
        widget.add_class("active")
    else:
        widget.remove_class("active")


def render_search_text(text: str, cursor: int, *, show_cursor: bool) -> Text:
    """Search text with the character under the cursor drawn in reverse video."""
    out = Text(text + " ")
    if show_cursor:
        out.stylize("reverse", cursor, cursor + 1)
    return out


def render_selectable_lines(view: CollectionView, *, marked: Optional[object] = None) -> Text:
    """One line per item; the selected one gets the highlight symbol, the marked one a star."""
    out = Text()
    pad = " " * len(HIGHLIGHT_SYMBOL)
    for i, item in enumerate(view.items):
        prefix = HIGHLIGHT_SYMBOL if i == view.selected else pad
        star = "*" if marked is not None and item == marked else " "
        line = Text(f"{prefix}{star}{item}")
        if i == view.selected:
            line.stylize("bold")
        if i:
            out.append("\n")
        out.append_text(line)
    return out


class SearchBox(Static):
    """Single-line search field with a visible caret while Search mode is active."""

    def show(self, text: str, cursor: int, *, active: bool) -> None:
        _set_active(self, active)
        self.update(render_search_text(text, cursor, show_cursor=active))


class FolderList(Static):
    def show(self, view: CollectionView[Folder], *, active_folder: Optional[Folder], active: bool) -> None:
        _set_active(self, active)
        if not view.items:
            self.update(Text("No folders", style="dim"))
            return
        self.update(render_selectable_lines(view, marked=active_folder))


class ModelTable(Static):
    def show(self, view: CollectionView[Model], *, active_model: Optional[Model], active: bool) -> None:
        _set_active(self, active)
        table = Table(expand=True, box=None, show_edge=False)
        table.add_column("", width=len(HIGHLIGHT_SYMBOL) + 1, no_wrap=True)
        table.add_column("Name", ratio=3)
        table.add_column("State", ratio=1)
        table.add_column("UUID", ratio=3, style="dim")
        for i, m in enumerate(view.items):
            marker = (HIGHLIGHT_SYMBOL if i == view.selected else "") + ("*" if m == active_model else "")
            table.add_row(
                marker,
                m.name,
                Text(str(m.state), style=_STATE_STYLES.get(m.state, "")),
                m.uuid,
                style="bold" if i == view.selected else None,
            )
        self.update(table)


class StatusBar(Static):
    """Mode badge followed by the status line."""

    def show(self, mode: Mode, status_line: str) -> None:
        text = Text()
        text.append(StatusPresenter.badge(mode), style="black on yellow")
        text.append(f" {status_line}", style="green")
        self.update(text)


class HelpOverlay(Container):
    """Centered help panel; shown while the controller reports help as visible."""

    def __init__(self, *, id: str = WidgetIds.HELP_OVERLAY, classes: str = "") -> None:
        super().__init__(id=id, classes=classes)

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            yield Static("Help", classes="title")
            yield Static("", id=WidgetIds.HELP_BODY)

    def show(self, *, visible: bool, text: str) -> None:
        if visible:
            self.query_one(f"#{WidgetIds.HELP_BODY}", Static).update(Text(text))
            self.add_class("open")
        else:
            self.remove_class("open")


class TenantPicker(Container):
    def __init__(self, *, id: str = WidgetIds.TENANT_PICKER, classes: str = "") -> None:
        super().__init__(id=id, classes=classes)

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            yield Static("Select tenant", classes="title")
            yield Static("", id=WidgetIds.TENANT_LIST)

    def show(self, *, visible: bool, view: CollectionView[str], active_tenant: Optional[str]) -> None:
        if not visible:
            self.remove_class("open")
            return
        body = self.query_one(f"#{WidgetIds.TENANT_LIST}", Static)
        if view.items:
            body.update(render_selectable_lines(view, marked=active_tenant))
        else:
            body.update(Text("No tenants configured", style="dim"))
        self.add_class("open")


__all__ = [
    "FolderList",
    "HelpOverlay",
    "ModelTable",
    "SearchBox",
    "StatusBar",
    "TenantPicker",
    "render_search_text",
    "render_selectable_lines",
]
