"""Interaction modes and help topics."""

from __future__ import annotations

from enum import Enum


class Mode(Enum):
    NORMAL = "Normal"
    SEARCH = "Search"
    FOLDER = "Folder"
    MODEL = "Model"
    MATCH = "Match"
    HELP = "Help"
    TENANT = "Tenant"

    def __str__(self) -> str:
        return self.value


class HelpTopic(Enum):
    NORMAL = "normal"
    SEARCH = "search"
    FOLDER = "folder"
    MODEL = "model"
    MATCH = "match"
    TENANT = "tenant"


__all__ = ["Mode", "HelpTopic"]
