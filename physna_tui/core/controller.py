"""
Modal key dispatch.

`ModeController` owns every piece of interaction state: the active mode, the
status line, the help overlay, the tenant picker, the search field and the
folder / model / tenant collections. `handle` consumes one key event and
mutates that state; `snapshot` hands a read-only copy to whatever draws the
screen.

Help nests one level deep: `previous_mode` remembers where help was opened
from and is never itself `Mode.HELP`, since the only way out of help restores
it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Generic, Iterable, Optional, Tuple, TypeVar

from physna_tui.backend.service import BackendService
from physna_tui.core.errors import BackendServiceError
from physna_tui.core.keys import (
    BACKSPACE,
    DELETE,
    DOWN,
    END,
    ENTER,
    ESCAPE,
    HOME,
    LEFT,
    RIGHT,
    UP,
    KeyEvent,
    Keymap,
)
from physna_tui.core.modes import HelpTopic, Mode
from physna_tui.core.presenter import HelpCatalog, StatusPresenter
from physna_tui.core.selectable import SelectableCollection
from physna_tui.core.text_field import TextField
from physna_tui.model import Folder, Model

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Outcome(Enum):
    CONTINUE = "continue"
    QUIT = "quit"


@dataclass(frozen=True)
class CollectionView(Generic[T]):
    items: Tuple[T, ...]
    selected: Optional[int]

    @property
    def selected_item(self) -> Optional[T]:
        return None if self.selected is None else self.items[self.selected]


@dataclass(frozen=True)
class ControllerSnapshot:
    """Everything the renderer needs for one frame."""

    mode: Mode
    previous_mode: Mode
    status_line: str
    help_visible: bool
    help_text: str
    tenant_picker_visible: bool
    search_text: str
    search_cursor: int
    folders: CollectionView[Folder]
    models: CollectionView[Model]
    tenants: CollectionView[str]
    active_tenant: Optional[str]
    active_folder: Optional[Folder]
    active_model: Optional[Model]
    last_search: Optional[str]


def _named(event: KeyEvent, name: str) -> bool:
    return event.code == name and not (event.ctrl or event.alt)


def _navigate(collection: SelectableCollection, event: KeyEvent, *, home_end: bool = True) -> bool:
    """Apply up/down (and home/end) to ``collection``. Returns False if the key isn't navigation."""
    if _named(event, UP):
        collection.previous()
    elif _named(event, DOWN):
        collection.next()
    elif home_end and _named(event, HOME):
        collection.first()
    elif home_end and _named(event, END):
        collection.last()
    else:
        return False
    return True


class ModeController:
    """Finite-state machine over `Mode`, driven one `KeyEvent` at a time."""

    def __init__(
        self,
        backend: BackendService,
        *,
        tenants: Iterable[str] = (),
        keymap: Optional[Keymap] = None,
    ):
        self.backend = backend
        self.keymap = keymap or Keymap()
        self.presenter = StatusPresenter(self.keymap)
        self.help_catalog = HelpCatalog(self.keymap)

        self.mode: Mode = Mode.NORMAL
        self.previous_mode: Mode = Mode.NORMAL
        self.status_line: str = ""
        self.help_visible: bool = False
        self.help_text: str = ""
        self.tenant_picker_visible: bool = False

        self.search = TextField()
        self.folders: SelectableCollection[Folder] = SelectableCollection()
        self.models: SelectableCollection[Model] = SelectableCollection()
        self.tenants: SelectableCollection[str] = SelectableCollection(tenants)

        self.active_tenant: Optional[str] = None
        self.active_folder: Optional[Folder] = None
        self.active_model: Optional[Model] = None
        self.last_search: Optional[str] = None

        self._handlers: Dict[Mode, Callable[[KeyEvent], Optional[Outcome]]] = {
            Mode.NORMAL: self._handle_normal,
            Mode.SEARCH: self._handle_search,
            Mode.FOLDER: self._handle_folder,
            Mode.MODEL: self._handle_model,
            Mode.MATCH: self._handle_match,
            Mode.HELP: self._handle_help,
            Mode.TENANT: self._handle_tenant,
        }

    # -----------------------
    # Lifecycle
    # -----------------------
    def start(self, tenant: Optional[str] = None) -> None:
        """
        Put the controller in its initial state.

        With a tenant (explicit, or the only one configured) a session is opened
        and folders are loaded. With several tenants and none chosen the tenant
        picker opens first. With no tenants at all the backend is asked for
        folders directly.
        """
        names = list(self.tenants)
        if tenant is None and len(names) == 1:
            tenant = names[0]

        if tenant is not None:
            self.status_line = self.presenter.hint(Mode.NORMAL)
            if not self.connect(tenant):
                message = self.status_line
                self._open_tenant_picker()
                self.status_line = message
            return
        if names:
            self._open_tenant_picker()
            return
        self.status_line = self.presenter.hint(Mode.NORMAL)
        self.reload_folders()

    # -----------------------
    # Dispatch
    # -----------------------
    def handle(self, event: KeyEvent) -> Outcome:
        """Consume one key event in the current mode."""
        outcome = self._handlers[self.mode](event)
        return outcome or Outcome.CONTINUE

    def change_mode(self, mode: Mode) -> None:
        if self.mode is not Mode.HELP:
            self.previous_mode = self.mode
        old = self.mode
        self.mode = mode
        self.status_line = self.presenter.hint(mode)
        logger.debug("Change mode from %s to %s", old, mode)

    def show_help(self, topic: HelpTopic) -> None:
        self.help_text = self.help_catalog.body(topic)
        self.help_visible = True
        self.change_mode(Mode.HELP)

    def hide_help(self) -> None:
        self.help_visible = False
        self.change_mode(self.previous_mode)

    def snapshot(self) -> ControllerSnapshot:
        return ControllerSnapshot(
            mode=self.mode,
            previous_mode=self.previous_mode,
            status_line=self.status_line,
            help_visible=self.help_visible,
            help_text=self.help_text,
            tenant_picker_visible=self.tenant_picker_visible,
            search_text=self.search.text,
            search_cursor=self.search.cursor,
            folders=CollectionView(self.folders.items, self.folders.selected),
            models=CollectionView(self.models.items, self.models.selected),
            tenants=CollectionView(self.tenants.items, self.tenants.selected),
            active_tenant=self.active_tenant,
            active_folder=self.active_folder,
            active_model=self.active_model,
            last_search=self.last_search,
        )

    # -----------------------
    # Mode handlers
    # -----------------------
    def _handle_normal(self, event: KeyEvent) -> Optional[Outcome]:
        action = self.keymap.action_for(event)
        if action == "quit":
            logger.debug("Quit requested")
            return Outcome.QUIT
        if action in ("folder", "tab"):
            self.change_mode(Mode.FOLDER)
        elif action == "search":
            self.change_mode(Mode.SEARCH)
        elif action == "model":
            self.change_mode(Mode.MODEL)
        elif action == "match":
            self.change_mode(Mode.MATCH)
        elif action == "help":
            self.show_help(HelpTopic.NORMAL)
        elif action == "tenant":
            self._open_tenant_picker()
        else:
            logger.debug("Unsupported key binding %s. Displaying the help message in the status bar.", event)
            self.status_line = self.presenter.generic_hint
        return None

    def _handle_search(self, event: KeyEvent) -> Optional[Outcome]:
        field = self.search
        if _named(event, ESCAPE):
            self.change_mode(Mode.NORMAL)
        elif event.matches(self.keymap.help_chord):
            self.show_help(HelpTopic.SEARCH)
        elif _named(event, ENTER):
            self.submit_search()
        elif _named(event, BACKSPACE):
            field.backspace()
        elif _named(event, DELETE):
            field.delete()
        elif _named(event, LEFT):
            field.left()
        elif _named(event, RIGHT):
            field.right()
        elif _named(event, HOME):
            field.home()
        elif _named(event, END):
            field.end()
        elif event.character is not None:
            field.insert_character(event.character)
        return None

    def _handle_folder(self, event: KeyEvent) -> Optional[Outcome]:
        if _named(event, ESCAPE):
            self.change_mode(Mode.NORMAL)
            return None
        if _navigate(self.folders, event):
            return None
        if _named(event, ENTER):
            self.load_selected_folder()
            return None
        action = self.keymap.action_for(event)
        if action == "tab":
            self.change_mode(Mode.MODEL)
        elif action == "help":
            self.show_help(HelpTopic.FOLDER)
        elif action == "reload":
            self.reload_folders()
        return None

    def _handle_model(self, event: KeyEvent) -> Optional[Outcome]:
        if _named(event, ESCAPE):
            self.change_mode(Mode.NORMAL)
            return None
        if _navigate(self.models, event):
            return None
        if _named(event, ENTER):
            self.select_current_model()
            return None
        action = self.keymap.action_for(event)
        if action == "tab":
            self.change_mode(Mode.FOLDER)
        elif action == "help":
            self.show_help(HelpTopic.MODEL)
        return None

    def _handle_match(self, event: KeyEvent) -> Optional[Outcome]:
        if _named(event, ESCAPE):
            self.change_mode(Mode.NORMAL)
        elif self.keymap.action_for(event) == "help":
            self.show_help(HelpTopic.MATCH)
        return None

    def _handle_help(self, event: KeyEvent) -> Optional[Outcome]:
        self.hide_help()
        return None

    def _handle_tenant(self, event: KeyEvent) -> Optional[Outcome]:
        if _named(event, ESCAPE):
            self.tenant_picker_visible = False
            self.change_mode(Mode.NORMAL)
            return None
        if _navigate(self.tenants, event):
            return None
        if _named(event, ENTER):
            self.switch_to_selected_tenant()
            return None
        if self.keymap.action_for(event) == "help":
            self.show_help(HelpTopic.TENANT)
        return None

    # -----------------------
    # Actions
    # -----------------------
    def submit_search(self) -> None:
        query = self.search.text.strip()
        if not query:
            self._report("Nothing to search for")
            return
        try:
            results = self.backend.submit_search(query)
        except BackendServiceError as e:
            self._report_error(f'Search for "{query}" failed', e)
            return
        self.last_search = query
        self._report(f'Executed search on "{query}" ({len(results)} results)')

    def load_selected_folder(self) -> None:
        folder = self.folders.selected_item
        if folder is None:
            self._clear_active_folder()
            self._report("No folder selected")
            return
        try:
            models = self.backend.list_models({folder.id})
        except BackendServiceError as e:
            self._clear_active_folder()
            self._report_error(f"Could not load models for folder {folder.name}", e)
            return
        self.active_folder = folder
        self.active_model = None
        self.models.replace_all(models)
        self._report(f"Loaded {len(self.models)} models from folder {folder.name}")

    def reload_folders(self) -> None:
        try:
            folders = self.backend.list_folders()
        except BackendServiceError as e:
            self.folders.clear()
            self._report_error("Could not load folders", e)
            return
        self.folders.replace_all(folders)
        self._report(f"Loaded {len(self.folders)} folders")

    def select_current_model(self) -> None:
        model = self.models.selected_item
        if model is None:
            self._report("No model selected")
            return
        self.active_model = model
        self._report(f"Selected model {model.name}")

    def switch_to_selected_tenant(self) -> None:
        tenant = self.tenants.selected_item
        if tenant is None:
            self._report("No tenant selected")
            return
        if not self.connect(tenant):
            return
        self.tenant_picker_visible = False
        self.change_mode(Mode.NORMAL)
        self._report(f"Switched to tenant {tenant} ({len(self.folders)} folders)")

    def connect(self, tenant: str) -> bool:
        """Open a session for ``tenant`` and reload its folders. Returns False on failure."""
        self._clear_active_folder()
        try:
            self.backend.establish_session(tenant)
        except BackendServiceError as e:
            self.active_tenant = None
            self.folders.clear()
            self._report_error(f"Could not connect to tenant {tenant}", e)
            return False
        # The backend is signed in from here on, even if the folder list fails.
        self.active_tenant = tenant
        try:
            folders = self.backend.list_folders()
        except BackendServiceError as e:
            self.folders.clear()
            self._report_error(f"Connected to tenant {tenant} but could not load folders", e)
            return False
        self.folders.replace_all(folders)
        logger.info("Loaded %d folders for tenant %s", len(self.folders), tenant)
        return True

    # -----------------------
    # Helpers
    # -----------------------
    def _open_tenant_picker(self) -> None:
        self.tenant_picker_visible = True
        if self.active_tenant is not None and self.active_tenant in self.tenants.items:
            self.tenants.select(self.tenants.items.index(self.active_tenant))
        self.change_mode(Mode.TENANT)
        if self.tenants.is_empty():
            self.status_line = "No tenants configured"

    def _clear_active_folder(self) -> None:
        self.active_folder = None
        self.active_model = None
        self.models.clear()

    def _report(self, message: str) -> None:
        self.status_line = message
        logger.info(message)

    def _report_error(self, context: str, error: BackendServiceError) -> None:
        message = f"{context}: {error}"
        self.status_line = message
        logger.warning(message)


__all__ = ["ModeController", "ControllerSnapshot", "CollectionView", "Outcome"]
