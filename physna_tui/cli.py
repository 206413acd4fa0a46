#!/usr/bin/env python3
"""
physna-tui - terminal client for Physna model search
Main CLI entry point
"""

from __future__ import annotations

import typer

from physna_tui.commands import config_cmd, replay_cmd, tui_cmd

app = typer.Typer(
    name="physna-tui",
    help="Browse Physna folders and models from the terminal",
    no_args_is_help=True,
    add_completion=True,
)

app.command(name="tui", help="Launch the full-screen client")(tui_cmd.tui)
app.command(name="replay", help="Run a key script headlessly and print the final state")(replay_cmd.replay)

app.add_typer(config_cmd.app, name="config", help="Manage configuration settings")


@app.callback()
def callback() -> None:
    """
    physna-tui - terminal client for Physna model search

    Primary workflow:
      tui        - Full-screen client (folders, models, search)

    Utilities:
      replay     - Feed a key script through the controller without a terminal
      config     - Manage configuration settings
    """
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
