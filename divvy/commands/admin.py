"""Admin command for initializing configuration and the ledger directory."""

import sys

from rich.console import Console

from divvy.config import ConfigError, create_default_config, get_config_path, load_settings

console = Console()


def init_command(force: bool = False) -> None:
    """Initialize divvy configuration and ledger directory."""
    config_path = get_config_path()

    if config_path.exists() and not force:
        console.print("[red]Initialization failed:[/red]", style="bold")
        console.print(f"  Config already exists: {config_path}")
        console.print("\n[yellow]Use 'divvy init --force' to overwrite[/yellow]")
        sys.exit(1)

    try:
        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")

        settings = load_settings(config_path)
        console.print(f"[cyan]Creating ledger directory at {settings.ledger_dir}...[/cyan]")
        settings.ledger_dir.mkdir(parents=True, exist_ok=True)
        console.print("[green]✓[/green] Ledger directory ready")

        console.print("\n[green]Initialization complete![/green]", style="bold")
        console.print(f"[dim]Config: {config_path}[/dim]")
        console.print(f"[dim]Ledger: {settings.ledger_dir}[/dim]")
        console.print(f"[dim]People: {', '.join(settings.people)}[/dim]")

    except ConfigError as e:
        console.print(f"[red]Config error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)
