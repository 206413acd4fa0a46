"""
Error types for physna-tui.

Only `FatalIOError` is allowed to end the program. Backend failures are
recovered by the controller and turned into status line / log output.
"""

from __future__ import annotations


class PhysnaTuiError(Exception):
    """Base class for all physna-tui errors."""


class InvalidCursorPosition(PhysnaTuiError, ValueError):
    """A cursor was placed outside ``[0, len(text)]``."""

    def __init__(self, index: int, length: int):
        super().__init__(f"Invalid cursor position {index} (text length {length})")
        self.index = index
        self.length = length


class BackendServiceError(PhysnaTuiError):
    """Any failure reported by the backend service (network, auth, payload)."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigError(PhysnaTuiError):
    """The configuration file could not be read or is malformed."""


class FatalIOError(PhysnaTuiError):
    """Reading the next input event or drawing a frame failed."""


__all__ = [
    "PhysnaTuiError",
    "InvalidCursorPosition",
    "BackendServiceError",
    "ConfigError",
    "FatalIOError",
]
