"""Shared setup for commands: settings resolution and path validation."""

import sys
from datetime import timedelta
from pathlib import Path
from typing import NoReturn

from rich.console import Console

from divvy.config import ConfigError, Settings, load_settings, parse_settlement_period

console = Console()


def fail(message: str) -> NoReturn:
    """Print a fatal diagnostic and exit with status 1."""
    console.print(f"[red]{message}[/red]", style="bold")
    sys.exit(1)


def resolve_settings() -> Settings:
    """Load settings, exiting on an invalid config file."""
    try:
        return load_settings()
    except ConfigError as e:
        fail(f"Config error: {e}")


def resolve_settlement_period(override: str | None, settings: Settings) -> timedelta:
    """Settlement period from the command line, falling back to the config."""
    if override is None:
        return settings.settlement_period
    try:
        return parse_settlement_period(override)
    except ConfigError as e:
        fail(f"Invalid settlement period: {e}")


def ensure_ledger_dir(ledger_dir: Path) -> Path:
    """Create the ledger directory if missing; exit if the path is not a directory."""
    try:
        if not ledger_dir.exists():
            ledger_dir.mkdir(parents=True)
            console.print(f"[dim]Created ledger directory: {ledger_dir}[/dim]")
        elif not ledger_dir.is_dir():
            fail(f"'{ledger_dir}' is not a directory")
    except OSError as e:
        fail(f"Failed to create ledger directory '{ledger_dir}': {e}")
    return ledger_dir


def ensure_transactions_file(transactions_path: Path) -> Path:
    """Exit if the transactions file does not exist."""
    if not transactions_path.is_file():
        fail(f"Transactions file '{transactions_path}' does not exist")
    return transactions_path
