"""physna-tui - interactive terminal client for Physna model search."""

__version__ = "0.1.0"
__description__ = "Browse Physna folders and models from the terminal"

from physna_tui.cli import app, main

__all__ = ["app", "main", "__version__"]
