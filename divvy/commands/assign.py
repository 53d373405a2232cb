"""Assign command for divvying unassigned transactions."""

from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console

from divvy.commands.report import render_totals
from divvy.commands.setup import (
    ensure_ledger_dir,
    ensure_transactions_file,
    fail,
    resolve_settings,
    resolve_settlement_period,
)
from divvy.domain.assignment import (
    Decision,
    assign_transactions,
    build_choice_menu,
    decision_label,
)
from divvy.domain.models import PersonName
from divvy.domain.reconcile import reconcile
from divvy.domain.report import format_money_display
from divvy.domain.transactions import SourceFormatError, Transaction
from divvy.source import load_settled_transactions
from divvy.store import LedgerDecodeError, LedgerFile, load_ledger, load_ledger_file

console = Console()

QUIT_KEY = "q"


class PromptDecisionSource:
    """Decision source that asks the operator at the terminal, one key per transaction."""

    def __init__(self, people: list[PersonName]) -> None:
        self.menu = build_choice_menu(people)
        choices = [f"[{key}] {decision_label(decision)}" for key, decision in self.menu.items()]
        choices.append(f"[{QUIT_KEY}] Quit")
        self.prompt_text = "  ".join(choices)

    def __call__(self, txn: Transaction) -> Decision | None:
        display_transaction_details(txn)
        while True:
            console.print(self.prompt_text, markup=False)
            raw: str = typer.prompt("Choice", type=str, default="", show_default=False)
            key = raw.strip()[:1]
            if key.lower() == QUIT_KEY:
                console.print("[yellow]Exiting[/yellow]")
                return None
            if key in self.menu:
                decision = self.menu[key]
                console.print(f"[green]✓ {decision_label(decision)}[/green]\n")
                return decision
            console.print(f"[red]choice '{key}' not found[/red]")


def display_transaction_details(txn: Transaction) -> None:
    """Display transaction details for review.

    Args:
        txn: Transaction to display.
    """
    console.print("─" * 80, style="dim")
    console.print(f"[bold]Date:[/bold] {txn.date.isoformat()}")
    console.print(f"[bold]Description:[/bold] {txn.description}")
    if txn.original_description and txn.original_description != txn.description:
        console.print(f"[bold]Original:[/bold] {txn.original_description}")
    console.print(f"[bold]Amount:[/bold] {format_money_display(txn.amount, include_sign=True)}")
    if txn.category:
        console.print(f"[bold]Category:[/bold] {txn.category}")
    if txn.account_name:
        console.print(f"[bold]Account:[/bold] {txn.account_name}")
    if txn.labels:
        console.print(f"[bold]Labels:[/bold] {txn.labels}")
    if txn.notes:
        console.print(f"[bold]Notes:[/bold] {txn.notes}")
    console.print()


def open_ledger_file(ledger_dir: Path, continue_last: bool) -> LedgerFile:
    """Create this run's ledger file, or continue the latest one."""
    try:
        if continue_last:
            return LedgerFile.open_latest(ledger_dir)
        return LedgerFile.create(ledger_dir, datetime.now())
    except FileExistsError as e:
        fail(f"Ledger file already exists, try again in a second: {e.filename}")
    except FileNotFoundError as e:
        fail(f"Failed to get latest ledger file: {e}")
    except OSError as e:
        fail(f"Failed to open ledger file: {e}")


def assign_command(
    ledger_dir: str | None = None,
    transactions_path: str | None = None,
    continue_last: bool = False,
    settlement_period: str | None = None,
) -> None:
    """Divvy every settled transaction that has no ledger entry yet."""
    settings = resolve_settings()
    ledger_path = ensure_ledger_dir(Path(ledger_dir).expanduser() if ledger_dir else settings.ledger_dir)
    csv_path = ensure_transactions_file(
        Path(transactions_path).expanduser() if transactions_path else settings.transactions_path
    )
    period = resolve_settlement_period(settlement_period, settings)

    try:
        transactions = load_settled_transactions(csv_path, period)
        history = load_ledger(ledger_path)
    except SourceFormatError as e:
        fail(f"Failed to parse transactions: {e}")
    except LedgerDecodeError as e:
        fail(f"Failed to load ledger: {e}")
    except OSError as e:
        fail(f"Failed to read input: {e}")

    result = reconcile(transactions, history)
    for txn in result.shadowed:
        console.print(f"[yellow]Duplicate transaction, only one will be offered: {txn.summary()}[/yellow]")

    ledger_file = open_ledger_file(ledger_path, continue_last)
    console.print(f"[dim]Ledger file: {ledger_file.path}[/dim]")

    if result.unassigned:
        console.print(f"[cyan]Found {len(result.unassigned)} unassigned transactions[/cyan]\n")

    try:
        decide = PromptDecisionSource(settings.people)
        assign_transactions(result.unassigned, settings.people, decide, ledger_file.write)
    except (OSError, ValueError) as e:
        ledger_file.discard_if_empty()
        fail(f"Failed to divvy transactions: {e}")
    except typer.Abort:
        ledger_file.discard_if_empty()
        raise

    if ledger_file.discard_if_empty():
        console.print("[yellow]No new transactions found[/yellow]")
        return

    try:
        entries = load_ledger_file(ledger_file.path)
    except (OSError, LedgerDecodeError) as e:
        fail(f"Failed to open ledger file '{ledger_file.path}' for reporting: {e}")

    if not entries:
        console.print("[yellow]No new transactions found[/yellow]")
        return

    console.print()
    render_totals(entries, title=f"Totals for {ledger_file.path.name}")
