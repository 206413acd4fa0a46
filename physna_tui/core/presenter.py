"""
Display strings derived from the active mode.

`StatusPresenter` maps a `Mode` to its status line hint and `HelpCatalog` maps
a `HelpTopic` to its help body. Both are pure lookups over a `Keymap`, so the
text always names the keys that are actually bound.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from physna_tui.core.keys import Keymap
from physna_tui.core.modes import HelpTopic, Mode


class StatusPresenter:
    """Fixed per-mode hint strings for the status line."""

    def __init__(self, keymap: Optional[Keymap] = None):
        km = keymap or Keymap()
        back = "Press <Esc> to return to Normal mode"
        self._hints: Dict[Mode, str] = {
            Mode.NORMAL: f"Press {km.display('help')} for help or {km.display('quit')} to exit",
            Mode.SEARCH: f"{back}, <Enter> to search, {km.display('help_chord')} for help",
            Mode.FOLDER: f"{back}, <Enter> to load the folder's models",
            Mode.MODEL: f"{back}, <Enter> to select a model",
            Mode.MATCH: back,
            Mode.HELP: "Press any key to close help",
            Mode.TENANT: "Press <Enter> to switch tenant or <Esc> to cancel",
        }
        self._generic = self._hints[Mode.NORMAL]

    def hint(self, mode: Mode) -> str:
        return self._hints[mode]

    @property
    def generic_hint(self) -> str:
        """Shown when a key has no binding in Normal mode."""
        return self._generic

    @staticmethod
    def badge(mode: Mode) -> str:
        """Fixed-width mode label for the left of the status bar."""
        return f" {str(mode):<6} "


class HelpCatalog:
    """Help bodies, one per topic."""

    CLOSE_LINE = "Press any key to close this help."

    def __init__(self, keymap: Optional[Keymap] = None):
        km = keymap or Keymap()
        esc = ("<Esc>", "Exit to Normal mode")
        entries: Dict[HelpTopic, List[Tuple[str, str]]] = {
            HelpTopic.NORMAL: [
                (km.display("quit"), "Exit the program"),
                (km.display("folder"), "Switch to Folder mode"),
                (km.display("tab"), "Switch to Folder mode"),
                (km.display("search"), "Switch to Search mode"),
                (km.display("model"), "Switch to Model mode"),
                (km.display("match"), "Switch to Match mode"),
                (km.display("tenant"), "Choose a different tenant"),
                (km.display("help"), "Show this help"),
            ],
            HelpTopic.SEARCH: [
                esc,
                ("<Enter>", "Execute search"),
                ("<Backspace>", "Delete the previous character"),
                ("<Delete>", "Delete the character under the cursor"),
                ("<Left>/<Right>", "Move the cursor"),
                ("<Home>/<End>", "Jump to the start or end of the query"),
                (km.display("help_chord"), "Show this help"),
            ],
            HelpTopic.FOLDER: [
                esc,
                (km.display("tab"), "Switch to Model mode"),
                ("<Up>/<Down>", "Select the previous or next folder"),
                ("<Home>/<End>", "Select the first or last folder"),
                ("<Enter>", "Load the models of the selected folder"),
                (km.display("reload"), "Reload the list of folders"),
                (km.display("help"), "Show this help"),
            ],
            HelpTopic.MODEL: [
                esc,
                (km.display("tab"), "Switch to Folder mode"),
                ("<Up>/<Down>", "Select the previous or next model"),
                ("<Enter>", "Use the selected model"),
                (km.display("help"), "Show this help"),
            ],
            HelpTopic.MATCH: [
                esc,
                (km.display("help"), "Show this help"),
            ],
            HelpTopic.TENANT: [
                ("<Esc>", "Close the tenant picker"),
                ("<Up>/<Down>", "Select the previous or next tenant"),
                ("<Home>/<End>", "Select the first or last tenant"),
                ("<Enter>", "Sign in to the selected tenant"),
                (km.display("help"), "Show this help"),
            ],
        }
        self._bodies = {topic: self._format(rows) for topic, rows in entries.items()}

    @classmethod
    def _format(cls, rows: List[Tuple[str, str]]) -> str:
        width = max(len(k) for k, _ in rows) + 2
        lines = [f"{k:<{width}}{desc}" for k, desc in rows]
        return "\n" + "\n".join(lines) + "\n\n" + cls.CLOSE_LINE + "\n"

    def body(self, topic: HelpTopic) -> str:
        return self._bodies[topic]

    @staticmethod
    def topic_for(mode: Mode) -> HelpTopic:
        """Help topic shown when help is requested from ``mode``."""
        if mode is Mode.HELP:
            raise ValueError("Help has no help topic of its own")
        return HelpTopic[mode.name]


__all__ = ["StatusPresenter", "HelpCatalog"]
