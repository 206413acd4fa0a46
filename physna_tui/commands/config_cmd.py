"""Config command for the physna-tui CLI."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from physna_tui.core.config import default_config_path, export_template, load_config
from physna_tui.core.errors import ConfigError

app = typer.Typer()
console = Console()


@app.command("path")
def path():
    """Print where the configuration file is read from."""
    console.print(str(default_config_path()))


@app.command("show")
def show(config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml")):
    """Show current configuration."""
    try:
        cfg = load_config(config_file)
    except ConfigError as e:
        console.print(f"[bold red]❌ Invalid configuration:[/] {e}")
        raise typer.Exit(1)
    summary = cfg.get_config_summary()

    console.print("\n[bold]Current Configuration:[/]")
    console.print(f"  Config file: [cyan]{summary['config_path'] or '(defaults)'}[/]")
    console.print(f"  Base URL: [cyan]{summary['base_url']}[/]")
    console.print(f"  Identity provider: [cyan]{summary['identity_provider_url']}[/]")
    console.print(f"  Default tenant: [cyan]{summary['default_tenant'] or '-'}[/]")
    console.print(f"  Timeout: [cyan]{summary['timeout']}s[/]")
    console.print(f"  Page size: [cyan]{summary['page_size']}[/]")
    console.print(f"  Tenants: [cyan]{', '.join(summary['tenants']) or '-'}[/]")

    console.print("\n[bold]Keys:[/]")
    for action, key in summary["keys"].items():
        console.print(f"  {action:<11} [cyan]{key}[/]")
    console.print()


@app.command("init")
def init(
    output: Optional[Path] = typer.Argument(None, help="Where to write the template (default: config path)"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
):
    """Write a configuration template."""
    target = output or default_config_path()
    if target.exists() and not force:
        console.print(f"[bold red]❌ Error:[/] {target} already exists (use --force to overwrite)")
        raise typer.Exit(1)
    export_template(target)
    console.print(f"[bold green]✔[/] Configuration template written to [underline]{target}[/]")
    console.print("[dim]Fill in client_id/client_secret for each tenant[/]")


@app.command("validate")
def validate(config_file: Path = typer.Argument(..., help="Config file to validate")):
    """Validate a configuration file."""
    try:
        cfg = load_config(config_file)
    except ConfigError as e:
        console.print(f"[bold red]❌ Invalid configuration:[/] {e}")
        raise typer.Exit(1)
    console.print(f"[bold green]✔[/] Configuration file is valid: [underline]{config_file}[/]")
    console.print(f"  Tenants: {len(cfg.tenants)}")
