"""
Value records supplied by the Physna backend.

The interaction core stores and displays these; it never mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class ModelState(Enum):
    RECEIVED = "received"
    INDEXING = "indexing"
    READY = "ready"

    def __str__(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_api(cls, value: Any) -> "ModelState":
        """
        Map a backend state string onto the three states the client tracks.

        The service reports finer-grained processing states; anything that is
        still being processed counts as indexing and finished models are ready.
        """
        s = str(value or "").strip().lower()
        if s in {"ready", "finished", "complete", "completed", "indexed"}:
            return cls.READY
        if s in {"", "received", "uploaded", "pending", "queued"}:
            return cls.RECEIVED
        return cls.INDEXING


@dataclass(frozen=True)
class Folder:
    id: int
    name: str

    def __str__(self) -> str:
        return f"{self.id}: {self.name}"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Folder":
        return cls(id=int(data["id"]), name=str(data.get("name") or ""))


@dataclass(frozen=True)
class Model:
    uuid: str
    name: str
    state: ModelState = ModelState.RECEIVED

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Model":
        return cls(
            uuid=str(data["id"]),
            name=str(data.get("name") or ""),
            state=ModelState.from_api(data.get("state")),
        )


__all__ = ["Folder", "Model", "ModelState"]
