"""Pure functions for report calculations and aggregations.

This module contains the functional core for reporting operations:
- No I/O operations (no files, no console)
- No side effects
- Pure data transformations
- Easy to test
"""

from collections.abc import Iterable
from dataclasses import dataclass

from divvy.domain.assignment import LedgerEntry
from divvy.domain.models import PersonName


@dataclass(frozen=True)
class LedgerSummary:
    """Immutable summary of a set of ledger entries."""

    entries: int
    skipped: int
    totals: dict[PersonName, float]


def sum_by_person(entries: Iterable[LedgerEntry]) -> dict[PersonName, float]:
    """Total every person's assigned amounts.

    Args:
        entries: Ledger entries to total.

    Returns:
        Mapping of person -> total, in order of first appearance.
    """
    totals: dict[PersonName, float] = {}
    for entry in entries:
        for person, amount in entry.assignment.items():
            if person in totals:
                totals[person] = totals[person] + amount
            else:
                totals[person] = amount
    return totals


def summarize_ledger(entries: Iterable[LedgerEntry]) -> LedgerSummary:
    """Count entries and skips and total per person in one pass."""
    entry_list = list(entries)
    return LedgerSummary(
        entries=len(entry_list),
        skipped=sum(1 for entry in entry_list if entry.is_skip),
        totals=sum_by_person(entry_list),
    )


def format_money_display(amount: float, include_sign: bool = False) -> str:
    """Format an amount for display.

    Args:
        amount: Amount in dollars.
        include_sign: Whether to include + for positive amounts.

    Returns:
        Formatted string (e.g., "-$123.45" or "$123.45").
    """
    formatted = f"${abs(amount):,.2f}"
    if amount < 0:
        return f"-{formatted}"
    if include_sign:
        return f"+{formatted}"
    return formatted
