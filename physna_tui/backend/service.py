"""
Backend service contract.

The controller only talks to the backend through `BackendService`. Every
method either returns its result or raises `BackendServiceError`.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Set

from physna_tui.core.errors import BackendServiceError
from physna_tui.model import Folder, Model, ModelState


class BackendService(Protocol):
    def list_folders(self) -> Sequence[Folder]:
        """Folders visible in the current session, in display order."""
        ...

    def list_models(self, folder_ids: Set[int]) -> Sequence[Model]:
        """Models contained in any of ``folder_ids``."""
        ...

    def establish_session(self, tenant: str) -> None:
        """Sign in to ``tenant``, discarding any cached credential for it first."""
        ...

    def submit_search(self, query: str) -> Sequence[Model]:
        """Run a model search."""
        ...


class StaticBackend:
    """
    In-memory catalogue implementing `BackendService`.

    Backs ``physna-tui tui --offline`` so the interface can be explored without
    credentials, and gives tests a deterministic collaborator.
    """

    def __init__(
        self,
        folders: Optional[Iterable[Folder]] = None,
        models: Optional[Dict[int, List[Model]]] = None,
        tenants: Optional[Iterable[str]] = None,
    ):
        self.folders: List[Folder] = list(folders or [])
        self.models: Dict[int, List[Model]] = {k: list(v) for k, v in (models or {}).items()}
        self.tenants: Optional[Set[str]] = set(tenants) if tenants is not None else None
        self.tenant: Optional[str] = None
        self.searches: List[str] = []

    @classmethod
    def demo(cls) -> "StaticBackend":
        folders = [Folder(1, "First"), Folder(2, "Second")]
        models = {
            1: [
                Model("0b6c3a8e-1f3e-4c84-9a55-3f1c9f4a7a01", "bracket.stl", ModelState.READY),
                Model("5d0f7c2a-8b7e-4f1a-b1f3-2a9c4e6d8b02", "housing.step", ModelState.INDEXING),
            ],
            2: [
                Model("9a4e2b1c-6d3f-4e8a-8c7b-1f2e3d4c5b03", "gear.obj", ModelState.RECEIVED),
            ],
        }
        return cls(folders=folders, models=models)

    def list_folders(self) -> Sequence[Folder]:
        return list(self.folders)

    def list_models(self, folder_ids: Set[int]) -> Sequence[Model]:
        out: List[Model] = []
        for folder in self.folders:
            if folder.id in folder_ids:
                out.extend(self.models.get(folder.id, []))
        return out

    def establish_session(self, tenant: str) -> None:
        if self.tenants is not None and tenant not in self.tenants:
            raise BackendServiceError(f"Unknown tenant '{tenant}'")
        self.tenant = tenant

    def submit_search(self, query: str) -> Sequence[Model]:
        self.searches.append(query)
        needle = query.lower()
        return [m for ms in self.models.values() for m in ms if needle in m.name.lower()]


__all__ = ["BackendService", "StaticBackend"]
