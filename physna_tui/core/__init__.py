"""Core interaction modules for physna-tui."""

__all__ = [
    "config",
    "controller",
    "errors",
    "keys",
    "loop",
    "modes",
    "presenter",
    "selectable",
    "text_field",
]
