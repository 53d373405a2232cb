"""Check command for reconciling the ledger against the transactions file."""

from pathlib import Path

from rich.console import Console
from rich.table import Table

from divvy.commands.setup import (
    ensure_ledger_dir,
    ensure_transactions_file,
    fail,
    resolve_settings,
    resolve_settlement_period,
)
from divvy.domain.assignment import LedgerEntry
from divvy.domain.reconcile import filter_orphans, reconcile
from divvy.domain.report import format_money_display
from divvy.domain.transactions import SourceFormatError, Transaction
from divvy.source import load_settled_transactions
from divvy.store import LedgerDecodeError, load_ledger

console = Console()


def render_transactions(transactions: list[Transaction], title: str) -> None:
    """Render transactions as a table."""
    table = Table(title=title)
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Amount", justify="right")
    table.add_column("Account", style="dim")

    for txn in transactions:
        table.add_row(txn.date.isoformat(), txn.description, format_money_display(txn.amount), txn.account_name)

    console.print(table)


def render_orphans(entries: list[LedgerEntry], title: str) -> None:
    """Render orphaned ledger entries with how they were divvied."""
    table = Table(title=title)
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Amount", justify="right")
    table.add_column("Assignment", style="magenta")

    for entry in entries:
        txn = entry.transaction
        assignment = ", ".join(
            f"{person}: {format_money_display(amount)}" for person, amount in entry.assignment.items()
        )
        table.add_row(txn.date.isoformat(), txn.description, format_money_display(txn.amount), assignment or "Skip")

    console.print(table)


def check_command(
    ledger_dir: str | None = None,
    transactions_path: str | None = None,
    settlement_period: str | None = None,
    show_all: bool = False,
) -> None:
    """Report unassigned transactions and orphaned ledger entries."""
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
    orphans = result.orphaned if show_all else filter_orphans(result.orphaned, settings.orphan_filter)
    hidden = len(result.orphaned) - len(orphans)

    console.print(
        f"[cyan]{len(transactions)} transactions, {len(history)} ledger entries, "
        f"{len(result.matched)} matched[/cyan]\n"
    )

    if result.unassigned:
        render_transactions(result.unassigned, f"Unassigned transactions ({len(result.unassigned)})")
    else:
        console.print("[green]✓ Every transaction has a ledger entry[/green]")

    if result.shadowed:
        render_transactions(result.shadowed, f"Duplicate transactions sharing an identity ({len(result.shadowed)})")

    if orphans:
        render_orphans(orphans, f"Orphaned ledger entries ({len(orphans)})")
    else:
        console.print("[green]✓ Every ledger entry matches a transaction[/green]")

    if hidden:
        console.print(f"[dim]{hidden} orphaned entries hidden by check rules (use --all to show)[/dim]")
