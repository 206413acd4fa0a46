"""Key and dispatch trace for debugging the TUI.

Enabled with ``PHYSNA_TUI_DEBUG=1`` (in-memory events) and/or
``PHYSNA_TUI_DEBUG_FILE=/path`` (each event streamed as NDJSON so a session can
be replayed or inspected after a crash).
"""

import json
import os
import time
from typing import Optional, TextIO

# In-memory cap during long sessions.
_MAX_EVENTS = 500


class DebugLogger:
    """Best-effort debug event sink. Never lets a logging failure break the UI."""

    def __init__(self) -> None:
        self._debug_events: list[dict[str, object]] = []
        self._debug_file_path: Optional[str] = None
        self._debug_file: Optional[TextIO] = None

    @staticmethod
    def enabled() -> bool:
        return bool(os.getenv("PHYSNA_TUI_DEBUG") or os.getenv("PHYSNA_TUI_DEBUG_FILE"))

    def log(self, *, event: str, mode: str = "", data: Optional[dict[str, object]] = None) -> None:
        if not self.enabled():
            return
        payload: dict[str, object] = {
            "t": float(time.time()),
            "event": str(event),
            "mode": mode,
            "data": data or {},
        }
        self._debug_events.append(payload)
        if len(self._debug_events) > _MAX_EVENTS:
            self._debug_events = self._debug_events[-(_MAX_EVENTS // 2):]

        debug_file_path = os.getenv("PHYSNA_TUI_DEBUG_FILE")
        if not debug_file_path:
            return
        try:
            if self._debug_file is None or self._debug_file_path != debug_file_path:
                self.close_debug_file()
                self._debug_file_path = debug_file_path
                # Line-buffered so a crash or a wedged terminal still leaves the trace on disk.
                self._debug_file = open(debug_file_path, "a", encoding="utf-8", buffering=1)
            self._debug_file.write(json.dumps(payload, ensure_ascii=False, separators=(",", ":")) + "\n")
        except OSError:
            return

    def close_debug_file(self) -> None:
        if self._debug_file is not None:
            try:
                self._debug_file.close()
            except OSError:
                pass
        self._debug_file = None
        self._debug_file_path = None

    @property
    def debug_events(self) -> list[dict[str, object]]:
        return self._debug_events.copy()


__all__ = ["DebugLogger"]
