"""Replay command: drive the controller from a key script without a terminal."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from physna_tui.commands.tui_cmd import build_controller, close_backend, load_config_or_exit, parse_log_level
from physna_tui.core.controller import ControllerSnapshot, Outcome
from physna_tui.core.errors import FatalIOError
from physna_tui.core.loop import parse_key_script, reader, run_event_loop

console = Console()


def snapshot_table(snap: ControllerSnapshot) -> Table:
    table = Table(title="Final state", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Mode", str(snap.mode))
    table.add_row("Previous mode", str(snap.previous_mode))
    table.add_row("Status", snap.status_line)
    table.add_row("Search", f"{snap.search_text!r} (cursor {snap.search_cursor})")
    table.add_row("Tenant", snap.active_tenant or "-")
    table.add_row("Folders", f"{len(snap.folders.items)} (selected {snap.folders.selected})")
    table.add_row("Active folder", str(snap.active_folder) if snap.active_folder else "-")
    table.add_row("Models", f"{len(snap.models.items)} (selected {snap.models.selected})")
    table.add_row("Active model", snap.active_model.name if snap.active_model else "-")
    table.add_row("Help visible", "yes" if snap.help_visible else "no")
    table.add_row("Tenant picker", "open" if snap.tenant_picker_visible else "closed")
    return table


def replay(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, help="Key script, one key per line"),
    tenant: Optional[str] = typer.Option(None, "--tenant", "-t", help="Tenant to sign in to first"),
    offline: bool = typer.Option(False, "--offline", help="Use the built-in demo catalogue"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    frames: bool = typer.Option(False, "--frames", help="Print the status line after every key"),
    log_level: str = typer.Option("warning", "--log-level", help="Level for log output on stderr"),
) -> None:
    """
    Run a key script through the controller and print the final state.

    Lines hold key specs such as `f`, `down`, `enter` or `ctrl+h`; `text:abc`
    types each character; `#` starts a comment.
    """
    logging.basicConfig(level=parse_log_level(log_level), format="%(levelname)s %(name)s: %(message)s")
    cfg = load_config_or_exit(config_file)
    events = parse_key_script(script.read_text(encoding="utf-8").splitlines())

    def render(snap: ControllerSnapshot) -> None:
        if frames:
            console.print(f"[black on yellow] {str(snap.mode):<6} [/] [green]{snap.status_line}[/]")

    controller = build_controller(cfg, offline=offline, tenant=tenant)
    try:
        outcome = run_event_loop(controller, reader(events), render)
    except FatalIOError as e:
        console.print(f"[bold red]❌ {e}[/]")
        raise typer.Exit(1)
    finally:
        close_backend(controller)

    console.print(snapshot_table(controller.snapshot()))
    if outcome is Outcome.QUIT:
        console.print("[dim]Quit key reached.[/]")
