import pytest

from physna_tui.core.controller import ModeController, Outcome
from physna_tui.core.keys import KeyEvent, Keymap
from physna_tui.core.modes import HelpTopic, Mode
from physna_tui.model import Folder
from tests.harness import FlakyBackend, press, type_text


# -----------------------
# Startup
# -----------------------
def test_start_with_tenant_loads_folders(controller, backend):
    assert controller.mode is Mode.NORMAL
    assert controller.previous_mode is Mode.NORMAL
    assert controller.active_tenant == "acme"
    assert [f.name for f in controller.folders] == ["First", "Second", "Empty"]
    assert ("establish_session", "acme") in backend.calls


def test_start_with_several_tenants_opens_picker(backend):
    c = ModeController(backend, tenants=["acme", "globex"])
    c.start()
    assert c.mode is Mode.TENANT
    assert c.tenant_picker_visible
    assert c.folders.is_empty()


def test_start_with_single_tenant_connects(backend):
    c = ModeController(backend, tenants=["globex"])
    c.start()
    assert c.mode is Mode.NORMAL
    assert c.active_tenant == "globex"


def test_start_without_tenants_loads_folders_directly(backend):
    c = ModeController(backend)
    c.start()
    assert c.mode is Mode.NORMAL
    assert len(c.folders) == 3
    assert not any(call[0] == "establish_session" for call in backend.calls)


def test_start_with_failing_session_opens_picker(backend):
    backend.fail.add("establish_session")
    c = ModeController(backend, tenants=["acme", "globex"])
    c.start("acme")
    assert c.mode is Mode.TENANT
    assert c.tenant_picker_visible
    assert "Could not connect to tenant acme" in c.status_line


# -----------------------
# Normal mode
# -----------------------
def test_quit_key_ends_the_loop(controller):
    assert press(controller, "q") is Outcome.QUIT


def test_other_keys_continue(controller):
    assert press(controller, "f") is Outcome.CONTINUE


@pytest.mark.parametrize(
    "key,mode",
    [("f", Mode.FOLDER), ("tab", Mode.FOLDER), ("s", Mode.SEARCH), ("m", Mode.MODEL), ("c", Mode.MATCH)],
)
def test_normal_mode_switches(controller, key, mode):
    press(controller, key)
    assert controller.mode is mode
    assert controller.previous_mode is Mode.NORMAL
    assert controller.status_line == controller.presenter.hint(mode)


def test_normal_help(controller):
    press(controller, "h")
    assert controller.mode is Mode.HELP
    assert controller.help_visible
    assert controller.help_text == controller.help_catalog.body(HelpTopic.NORMAL)


def test_normal_tenant_key_opens_picker_on_current_tenant(controller):
    press(controller, "t")
    assert controller.mode is Mode.TENANT
    assert controller.tenant_picker_visible
    assert controller.tenants.selected_item == "acme"


def test_unbound_key_shows_generic_hint(controller):
    controller.status_line = "something else"
    press(controller, "z")
    assert controller.mode is Mode.NORMAL
    assert controller.status_line == "Press <h> for help or <q> to exit"


# -----------------------
# Help
# -----------------------
def test_folder_help_round_trip(controller):
    press(controller, "f")
    assert controller.mode is Mode.FOLDER
    assert controller.previous_mode is Mode.NORMAL
    assert controller.status_line == controller.presenter.hint(Mode.FOLDER)

    press(controller, "h")
    assert controller.mode is Mode.HELP
    assert controller.previous_mode is Mode.FOLDER

    press(controller, "x")
    assert controller.mode is Mode.FOLDER
    assert not controller.help_visible


@pytest.mark.parametrize(
    "enter_keys,help_key,mode",
    [
        ((), "h", Mode.NORMAL),
        (("s",), "f1", Mode.SEARCH),
        (("f",), "h", Mode.FOLDER),
        (("m",), "h", Mode.MODEL),
        (("c",), "h", Mode.MATCH),
        (("t",), "h", Mode.TENANT),
    ],
)
def test_help_restores_the_mode_it_was_opened_from(controller, enter_keys, help_key, mode):
    press(controller, *enter_keys)
    assert controller.mode is mode
    press(controller, help_key)
    assert controller.mode is Mode.HELP
    assert controller.help_text == controller.help_catalog.body(HelpTopic[mode.name])
    press(controller, "escape")
    assert controller.mode is mode
    assert controller.previous_mode is not Mode.HELP
    assert not controller.help_visible


def test_previous_mode_is_never_help(controller):
    for keys in (("f", "h", "a"), ("tab", "h", "enter"), ("escape", "h", "q")):
        press(controller, *keys)
        assert controller.previous_mode is not Mode.HELP


def test_quit_key_inside_help_only_closes_help(controller):
    press(controller, "h")
    assert press(controller, "q") is Outcome.CONTINUE
    assert controller.mode is Mode.NORMAL


# -----------------------
# Search
# -----------------------
def test_search_typing_and_editing(controller):
    press(controller, "s")
    type_text(controller, "gear q")
    assert controller.search.text == "gear q"
    assert controller.mode is Mode.SEARCH
    press(controller, "backspace", "backspace", "home", "delete", "end", "left", "right")
    assert controller.search.text == "ear"
    assert controller.search.cursor == 3


def test_search_letters_are_not_commands(controller):
    press(controller, "s")
    assert press(controller, "q") is Outcome.CONTINUE
    press(controller, "h", "f")
    assert controller.mode is Mode.SEARCH
    assert controller.search.text == "qhf"


def test_search_enter_submits_query(controller, backend):
    press(controller, "s")
    type_text(controller, "gear")
    press(controller, "enter")
    assert ("submit_search", "gear") in backend.calls
    assert controller.last_search == "gear"
    assert controller.mode is Mode.SEARCH
    assert controller.status_line == 'Executed search on "gear" (1 results)'


def test_empty_search_is_not_submitted(controller, backend):
    press(controller, "s", "enter")
    assert not any(call[0] == "submit_search" for call in backend.calls)
    assert controller.status_line == "Nothing to search for"


def test_search_failure_is_reported(controller, backend):
    backend.fail.add("submit_search")
    press(controller, "s")
    type_text(controller, "gear")
    press(controller, "enter")
    assert controller.mode is Mode.SEARCH
    assert 'Search for "gear" failed' in controller.status_line
    assert controller.last_search is None


def test_search_buffer_survives_mode_switches(controller):
    press(controller, "s")
    type_text(controller, "abc")
    press(controller, "escape", "f", "escape", "s")
    assert controller.search.text == "abc"


def test_ctrl_chords_are_not_typed(controller):
    press(controller, "s")
    controller.handle(KeyEvent.parse("ctrl+x"))
    assert controller.search.text == ""


# -----------------------
# Folder
# -----------------------
def test_enter_without_selection_reports_and_keeps_models_empty(controller):
    press(controller, "f")
    assert controller.folders.selected is None
    press(controller, "enter")
    assert controller.status_line == "No folder selected"
    assert controller.models.is_empty()
    assert controller.mode is Mode.FOLDER


def test_folder_navigation(controller):
    press(controller, "f", "down")
    assert controller.folders.selected == 0
    press(controller, "up")
    assert controller.folders.selected == 2
    press(controller, "home")
    assert controller.folders.selected == 0
    press(controller, "end")
    assert controller.folders.selected == 2


def test_enter_loads_models_of_selected_folder(controller, backend):
    press(controller, "f", "down", "enter")
    assert ("list_models", frozenset({1})) in backend.calls
    assert controller.active_folder.name == "First"
    assert [m.name for m in controller.models] == ["bracket.stl", "housing.step"]
    assert controller.models.selected is None
    assert controller.mode is Mode.FOLDER
    assert controller.status_line == "Loaded 2 models from folder First"


def test_models_are_replaced_when_another_folder_loads(controller):
    press(controller, "f", "down", "enter", "down", "enter")
    assert controller.active_folder.name == "Second"
    assert [m.name for m in controller.models] == ["gear.obj"]


def test_model_load_failure_clears_models(controller, backend):
    press(controller, "f", "down", "enter")
    backend.fail.add("list_models")
    press(controller, "down", "enter")
    assert controller.active_folder is None
    assert controller.models.is_empty()
    assert controller.mode is Mode.FOLDER
    assert "Could not load models for folder Second" in controller.status_line


def test_no_selection_clears_previously_loaded_models(controller):
    press(controller, "f", "down", "enter")
    controller.folders.select(None)
    press(controller, "enter")
    assert controller.active_folder is None
    assert controller.models.is_empty()


def test_folder_tab_goes_to_model(controller):
    press(controller, "f", "tab")
    assert controller.mode is Mode.MODEL
    assert controller.previous_mode is Mode.FOLDER


def test_folder_reload(controller, backend):
    press(controller, "f")
    backend.folders.append(Folder(4, "New"))
    press(controller, "r")
    assert [f.name for f in controller.folders][-1] == "New"
    assert controller.status_line == "Loaded 4 folders"


def test_folder_reload_failure_clears_folders(controller, backend):
    press(controller, "f")
    backend.fail.add("list_folders")
    press(controller, "r")
    assert controller.folders.is_empty()
    assert controller.mode is Mode.FOLDER
    assert "Could not load folders" in controller.status_line


# -----------------------
# Model
# -----------------------
def test_model_selection(controller):
    press(controller, "f", "down", "enter", "tab", "down", "down", "enter")
    assert controller.mode is Mode.MODEL
    assert controller.active_model.name == "housing.step"
    assert controller.status_line == "Selected model housing.step"


def test_model_enter_without_selection(controller):
    press(controller, "m", "enter")
    assert controller.active_model is None
    assert controller.status_line == "No model selected"


def test_model_navigation_on_empty_table_is_noop(controller):
    press(controller, "m", "down", "up", "end")
    assert controller.models.selected is None


def test_model_tab_goes_to_folder(controller):
    press(controller, "m", "tab")
    assert controller.mode is Mode.FOLDER


# -----------------------
# Match
# -----------------------
def test_match_ignores_other_keys(controller):
    press(controller, "c", "q", "f", "down")
    assert controller.mode is Mode.MATCH
    press(controller, "escape")
    assert controller.mode is Mode.NORMAL


# -----------------------
# Tenant
# -----------------------
def test_tenant_escape_hides_picker(controller):
    press(controller, "t", "escape")
    assert controller.mode is Mode.NORMAL
    assert not controller.tenant_picker_visible


def test_tenant_switch(controller, backend):
    press(controller, "f", "down", "enter", "escape")
    press(controller, "t", "down", "enter")
    assert controller.active_tenant == "globex"
    assert ("establish_session", "globex") in backend.calls
    assert controller.mode is Mode.NORMAL
    assert not controller.tenant_picker_visible
    assert controller.active_folder is None
    assert controller.models.is_empty()
    assert len(controller.folders) == 3
    assert controller.status_line == "Switched to tenant globex (3 folders)"


def test_tenant_switch_failure_keeps_picker_open(controller, backend):
    backend.fail.add("establish_session")
    press(controller, "t", "down", "enter")
    assert controller.mode is Mode.TENANT
    assert controller.tenant_picker_visible
    assert controller.folders.is_empty()
    assert controller.active_tenant is None
    assert "Could not connect to tenant globex" in controller.status_line


def test_tenant_stays_active_when_folder_listing_fails(controller, backend):
    backend.fail.add("list_folders")
    press(controller, "t", "down", "enter")
    assert ("establish_session", "globex") in backend.calls
    assert controller.active_tenant == "globex"
    assert controller.folders.is_empty()
    assert controller.mode is Mode.TENANT
    assert "Connected to tenant globex but could not load folders" in controller.status_line

    backend.fail.discard("list_folders")
    press(controller, "escape", "f", "r")
    assert controller.active_tenant == "globex"
    assert len(controller.folders) == 3


def test_tenant_enter_without_selection(backend):
    c = ModeController(backend, tenants=["acme", "globex"])
    c.start()
    c.handle(KeyEvent.parse("enter"))
    assert c.status_line == "No tenant selected"
    assert c.mode is Mode.TENANT


def test_tenant_picker_without_tenants(backend):
    c = ModeController(backend)
    c.start()
    c.handle(KeyEvent.parse("t"))
    assert c.mode is Mode.TENANT
    assert c.status_line == "No tenants configured"
    c.handle(KeyEvent.parse("down"))
    assert c.tenants.selected is None


# -----------------------
# Keymap and snapshot
# -----------------------
def test_rebound_keys():
    backend = FlakyBackend()
    c = ModeController(backend, keymap=Keymap(quit="x", folder="d"))
    c.start()
    assert c.handle(KeyEvent.parse("q")) is Outcome.CONTINUE
    c.handle(KeyEvent.parse("d"))
    assert c.mode is Mode.FOLDER
    c.handle(KeyEvent.parse("escape"))
    assert c.handle(KeyEvent.parse("x")) is Outcome.QUIT


def test_snapshot_reflects_state(controller):
    press(controller, "f", "down", "enter", "escape", "s")
    type_text(controller, "ab")
    press(controller, "left")
    snap = controller.snapshot()
    assert snap.mode is Mode.SEARCH
    assert snap.previous_mode is Mode.NORMAL
    assert snap.search_text == "ab"
    assert snap.search_cursor == 1
    assert snap.folders.selected_item.name == "First"
    assert len(snap.models.items) == 2
    assert snap.active_tenant == "acme"
    assert snap.active_folder.name == "First"


def test_snapshot_is_immutable(controller):
    snap = controller.snapshot()
    with pytest.raises(Exception):
        snap.mode = Mode.HELP
    press(controller, "f", "down")
    assert snap.folders.selected is None
