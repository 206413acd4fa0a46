"""Shared helpers for controller and TUI tests."""

from __future__ import annotations

from typing import Sequence, Set

from physna_tui.backend.service import StaticBackend
from physna_tui.core.controller import ModeController
from physna_tui.core.errors import BackendServiceError
from physna_tui.core.keys import KeyEvent
from physna_tui.model import Folder, Model


class FlakyBackend(StaticBackend):
    """StaticBackend that records calls and can be told to fail specific operations."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.fail: Set[str] = set()
        self.calls: list[tuple] = []

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail:
            raise BackendServiceError(f"{op} unavailable")

    def list_folders(self) -> Sequence[Folder]:
        self.calls.append(("list_folders",))
        self._maybe_fail("list_folders")
        return super().list_folders()

    def list_models(self, folder_ids: Set[int]) -> Sequence[Model]:
        self.calls.append(("list_models", frozenset(folder_ids)))
        self._maybe_fail("list_models")
        return super().list_models(folder_ids)

    def establish_session(self, tenant: str) -> None:
        self.calls.append(("establish_session", tenant))
        self._maybe_fail("establish_session")
        super().establish_session(tenant)

    def submit_search(self, query: str) -> Sequence[Model]:
        self.calls.append(("submit_search", query))
        self._maybe_fail("submit_search")
        return super().submit_search(query)


def press(controller: ModeController, *keys: str):
    """Send key specs to the controller; returns the last outcome."""
    outcome = None
    for k in keys:
        outcome = controller.handle(KeyEvent.parse(k))
    return outcome


def type_text(controller: ModeController, text: str) -> None:
    for ch in text:
        controller.handle(KeyEvent(code=ch))
