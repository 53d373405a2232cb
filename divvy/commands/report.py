"""Sum and ledgers commands for viewing ledger totals."""

from pathlib import Path

from rich.console import Console
from rich.table import Table

from divvy.commands.setup import ensure_ledger_dir, fail, resolve_settings
from divvy.domain.assignment import LedgerEntry
from divvy.domain.report import format_money_display, sum_by_person, summarize_ledger
from divvy.store import LedgerDecodeError, list_ledger_files, load_ledger, load_ledger_file

console = Console()


def render_totals(entries: list[LedgerEntry], title: str = "Total responsibilities") -> None:
    """Render per-person totals for a set of ledger entries.

    Args:
        entries: Ledger entries to total.
        title: Table title.
    """
    totals = sum_by_person(entries)
    if not totals:
        console.print("[yellow]No assigned amounts[/yellow]")
        return

    table = Table(title=title)
    table.add_column("Person", style="cyan")
    table.add_column("Total", justify="right")
    for person, total in totals.items():
        table.add_row(person, format_money_display(total))
    console.print(table)


def sum_command(ledger_file: str | None = None, all: bool = False, ledger_dir: str | None = None) -> None:
    """Show totals from one ledger file, or from the whole ledger."""
    if ledger_file and all:
        fail("Give either a ledger file or --all, not both")
    if not ledger_file and not all:
        fail("Give a ledger file to sum, or --all for the whole ledger")

    try:
        if ledger_file:
            path = Path(ledger_file).expanduser()
            entries = load_ledger_file(path)
            title = f"Total responsibilities ({path.name})"
        else:
            settings = resolve_settings()
            directory = Path(ledger_dir).expanduser() if ledger_dir else settings.ledger_dir
            if not directory.is_dir():
                fail(f"Ledger directory '{directory}' does not exist")
            entries = load_ledger(directory)
            title = f"Total responsibilities ({directory})"
    except (OSError, LedgerDecodeError) as e:
        fail(f"Failed to load ledger for sum: {e}")

    if not entries:
        console.print("[yellow]No ledger entries found[/yellow]")
        return

    render_totals(entries, title=title)


def ledgers_command(ledger_dir: str | None = None) -> None:
    """List ledger files with their entry counts and totals."""
    settings = resolve_settings()
    directory = ensure_ledger_dir(Path(ledger_dir).expanduser() if ledger_dir else settings.ledger_dir)

    files = list_ledger_files(directory)
    if not files:
        console.print("[yellow]No ledger files found[/yellow]")
        return

    table = Table(title=f"Ledger files ({directory})")
    table.add_column("File", style="cyan")
    table.add_column("Entries", justify="right")
    table.add_column("Skipped", justify="right", style="dim")
    table.add_column("Totals")

    for path in files:
        try:
            summary = summarize_ledger(load_ledger_file(path))
        except (OSError, LedgerDecodeError) as e:
            table.add_row(path.name, "[red]error[/red]", "", f"[red]{e}[/red]")
            continue
        totals = ", ".join(f"{person}: {format_money_display(total)}" for person, total in summary.totals.items())
        table.add_row(path.name, str(summary.entries), str(summary.skipped), totals or "[dim]-[/dim]")

    console.print(table)
