from __future__ import annotations

import pytest

from physna_tui.core.controller import ModeController
from physna_tui.model import Folder, Model, ModelState
from tests.harness import FlakyBackend


@pytest.fixture
def backend() -> FlakyBackend:
    return FlakyBackend(
        folders=[Folder(1, "First"), Folder(2, "Second"), Folder(3, "Empty")],
        models={
            1: [
                Model("u-1", "bracket.stl", ModelState.READY),
                Model("u-2", "housing.step", ModelState.INDEXING),
            ],
            2: [Model("u-3", "gear.obj", ModelState.RECEIVED)],
        },
        tenants=["acme", "globex"],
    )


@pytest.fixture
def controller(backend: FlakyBackend) -> ModeController:
    c = ModeController(backend, tenants=["acme", "globex"])
    c.start("acme")
    return c
