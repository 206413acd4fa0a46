"""
Full-screen TUI entrypoint.

Loads configuration, wires the backend into a `ModeController`, signs in and
hands the controller to the Textual app.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple

import typer
from rich.console import Console

from physna_tui.backend import BackendService, PhysnaClient, StaticBackend
from physna_tui.core.config import AppConfig, load_config
from physna_tui.core.controller import ModeController
from physna_tui.core.errors import ConfigError

console = Console(stderr=True)


def parse_log_level(value: str) -> int:
    level = logging.getLevelName(str(value).upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level '{value}'")
    return level


def load_config_or_exit(config_file: Optional[Path]) -> AppConfig:
    try:
        return load_config(config_file)
    except ConfigError as e:
        console.print(f"[bold red]❌ Invalid configuration:[/] {e}")
        raise typer.Exit(1)


def build_backend(cfg: AppConfig, *, offline: bool) -> Tuple[BackendService, Sequence[str]]:
    """Backend plus the tenant names offered in the picker."""
    if offline:
        return StaticBackend.demo(), ()
    return PhysnaClient(cfg), cfg.tenant_names


def build_controller(cfg: AppConfig, *, offline: bool, tenant: Optional[str]) -> ModeController:
    backend, tenants = build_backend(cfg, offline=offline)
    controller = ModeController(backend, tenants=tenants, keymap=cfg.keys)
    controller.start(tenant or (None if offline else cfg.default_tenant))
    return controller


def close_backend(controller: ModeController) -> None:
    close = getattr(controller.backend, "close", None)
    if callable(close):
        close()


def tui(
    tenant: Optional[str] = typer.Option(None, "--tenant", "-t", help="Tenant to sign in to at startup"),
    offline: bool = typer.Option(False, "--offline", help="Browse a built-in demo catalogue instead of the API"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    log_level: str = typer.Option("debug", "--log-level", help="Level for the on-screen log"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write the log to this file"),
) -> None:
    """Launch the full-screen client."""
    try:
        from physna_tui.tui.app import PhysnaTuiApp
        from physna_tui.tui.log_handler import TuiLogHandler, configure_logging
    except ImportError as e:  # pragma: no cover
        console.print(f"[bold red]❌ Failed to import TUI dependencies:[/] {e}")
        raise typer.Exit(1)

    cfg = load_config_or_exit(config_file)
    handler = TuiLogHandler()
    configure_logging(
        parse_log_level(log_level),
        tui_handler=handler,
        log_file=str(log_file) if log_file else None,
    )

    controller = build_controller(cfg, offline=offline, tenant=tenant)
    app = PhysnaTuiApp(controller, log_handler=handler)
    try:
        app.run()
    finally:
        close_backend(controller)
    if app.return_code:
        console.print("[bold red]❌ The terminal client stopped because of an error.[/]")
        raise typer.Exit(app.return_code)
