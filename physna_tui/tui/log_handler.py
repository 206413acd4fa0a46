"""Logging handler that feeds the on-screen log pane.

Records emitted before the pane exists (for example while the controller
signs in at startup) are buffered and flushed once a writer is attached.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Optional

LOG_FORMAT = "%(asctime)s|%(levelname)-8s|%(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Lines kept while no writer is attached.
_BUFFER_LIMIT = 500


class TuiLogHandler(logging.Handler):
    def __init__(self, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        self._write: Optional[Callable[[str], object]] = None
        self._pending: Deque[str] = deque(maxlen=_BUFFER_LIMIT)

    def attach(self, write: Callable[[str], object]) -> None:
        """Start sending lines to ``write``, flushing anything buffered so far."""
        self._write = write
        while self._pending:
            write(self._pending.popleft())

    def detach(self) -> None:
        self._write = None

    @property
    def pending(self) -> list[str]:
        return list(self._pending)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            if self._write is None:
                self._pending.append(line)
            else:
                self._write(line)
        except Exception:
            self.handleError(record)


def configure_logging(
    level: int = logging.DEBUG,
    *,
    tui_handler: Optional[TuiLogHandler] = None,
    log_file: Optional[str] = None,
) -> None:
    """Route the ``physna_tui`` loggers to the log pane and, optionally, a file."""
    pkg_logger = logging.getLogger("physna_tui")
    pkg_logger.setLevel(level)
    if tui_handler is not None:
        pkg_logger.addHandler(tui_handler)
    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        pkg_logger.addHandler(fh)
    # The screen belongs to Textual; keep records off stderr.
    pkg_logger.propagate = False


__all__ = ["TuiLogHandler", "configure_logging", "LOG_FORMAT"]
