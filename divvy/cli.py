"""CLI entry point for divvy."""

import typer

from divvy.commands.admin import init_command
from divvy.commands.assign import assign_command
from divvy.commands.check import check_command
from divvy.commands.report import ledgers_command, sum_command
from divvy.logging_setup import configure_logging

app = typer.Typer(
    name="divvy",
    help="Divvy shared transactions between people and keep an append-only ledger",
    add_completion=False,
)

LEDGER_HELP = "The directory in which ledger files are stored (overrides config)"
TRANSACTIONS_HELP = "The transactions CSV to process (overrides config)"
SETTLEMENT_HELP = (
    "When transactions settle, their dates and descriptions sometimes change so that they "
    "look like new transactions. Only transactions older than this period (e.g. 168h, 7d) are loaded."
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug diagnostics"),
) -> None:
    """Divvy shared transactions between people and keep an append-only ledger."""
    configure_logging(verbose=verbose)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Initialize divvy configuration and ledger directory."""
    init_command(force)


@app.command()
def assign(
    ledger: str = typer.Option(None, "--ledger", "-l", help=LEDGER_HELP),
    transactions: str = typer.Option(None, "--transactions", "-t", help=TRANSACTIONS_HELP),
    continue_last: bool = typer.Option(
        False, "--continue", "-c", help="Append to the latest ledger file instead of creating a new one"
    ),
    settlement_period: str = typer.Option(None, "--settlement-period", help=SETTLEMENT_HELP),
) -> None:
    """Divvy every settled transaction that has no ledger entry yet."""
    assign_command(ledger, transactions, continue_last, settlement_period)


@app.command()
def check(
    ledger: str = typer.Option(None, "--ledger", "-l", help=LEDGER_HELP),
    transactions: str = typer.Option(None, "--transactions", "-t", help=TRANSACTIONS_HELP),
    settlement_period: str = typer.Option(None, "--settlement-period", help=SETTLEMENT_HELP),
    all: bool = typer.Option(False, "--all", "-a", help="Show orphans hidden by check rules"),
) -> None:
    """Show unassigned transactions and ledger entries whose transaction changed upstream."""
    check_command(ledger, transactions, settlement_period, all)


@app.command(name="sum")
def sum_(
    ledger_file: str = typer.Argument(None, help="Ledger file to total"),
    all: bool = typer.Option(False, "--all", "-a", help="Total the whole ledger directory"),
    ledger: str = typer.Option(None, "--ledger", "-l", help=LEDGER_HELP),
) -> None:
    """Show per-person totals from a ledger file."""
    sum_command(ledger_file, all, ledger)


@app.command(name="ledgers")
def ledgers(
    ledger: str = typer.Option(None, "--ledger", "-l", help=LEDGER_HELP),
) -> None:
    """List ledger files with their entry counts and totals."""
    ledgers_command(ledger)


if __name__ == "__main__":
    app()
