"""Pure functions for turning decisions into ledger entries.

This module contains the functional core for assignment operations:
- No console or file access (decisions are pulled from a callable,
  entries are pushed to a callable)
- Pure data transformations
- Easy to test headlessly
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from divvy.domain.models import PersonName
from divvy.domain.transactions import Transaction

# Person -> portion of the transaction amount they are responsible for
Assignment = dict[PersonName, float]

# Keys offered to the operator, in menu order
CHOICE_KEYS = ("1", "2", "3", "4", "5", "6", "7", "8", "9")


class Choice(Enum):
    """Decisions that are not a single person."""

    SPLIT = "Split"
    SKIP = "Skip"


Decision = PersonName | Choice

# Pulls one decision per transaction; None means stop asking
DecisionSource = Callable[[Transaction], Decision | None]


@dataclass(frozen=True)
class LedgerEntry:
    """A transaction together with how it was divvied."""

    transaction: Transaction
    assignment: Assignment = field(default_factory=dict)

    @property
    def is_skip(self) -> bool:
        return not self.assignment


def build_choice_menu(people: Sequence[PersonName]) -> dict[str, Decision]:
    """Map menu keys to decisions: every person, then Split, then Skip.

    Args:
        people: Known people, in menu order.

    Returns:
        Ordered mapping of key -> decision.

    Raises:
        ValueError: If there are more choices than menu keys.
    """
    choices: list[Decision] = [*people, Choice.SPLIT, Choice.SKIP]
    if len(choices) > len(CHOICE_KEYS):
        raise ValueError(f"At most {len(CHOICE_KEYS) - 2} people fit in the choice menu, got {len(people)}")
    return dict(zip(CHOICE_KEYS, choices, strict=False))


def decision_label(decision: Decision) -> str:
    """Human-readable label for a decision."""
    if isinstance(decision, Choice):
        return decision.value
    return str(decision)


def apply_decision(transaction: Transaction, decision: Decision, people: Sequence[PersonName]) -> Assignment:
    """Turn a decision about a transaction into an assignment.

    Split divides the amount evenly over every known person with no remainder
    redistribution, so a cent-level residual may remain. Skip yields an empty
    assignment, which still marks the transaction as considered.

    Args:
        transaction: Transaction being divvied.
        decision: A person, Choice.SPLIT or Choice.SKIP.
        people: Every known person.

    Returns:
        Assignment mapping.

    Raises:
        ValueError: If splitting between nobody or assigning to an unknown person.
    """
    if decision is Choice.SKIP:
        return {}

    if decision is Choice.SPLIT:
        if not people:
            raise ValueError("Cannot split a transaction between zero people")
        share = transaction.amount / len(people)
        return {person: share for person in people}

    if decision not in people:
        raise ValueError(f"Unknown person '{decision}'")
    return {PersonName(decision): transaction.amount}


def assign_transactions(
    transactions: Iterable[Transaction],
    people: Sequence[PersonName],
    decide: DecisionSource,
    write: Callable[[LedgerEntry], None],
) -> list[LedgerEntry]:
    """Pull one decision per transaction and hand each entry to the writer.

    Each entry is written before the next decision is requested, so quitting
    (the source returning None) keeps everything decided so far.

    Args:
        transactions: Transactions needing a decision, in presentation order.
        people: Every known person.
        decide: Decision source.
        write: Called with each new entry, in order.

    Returns:
        Entries written during this call.
    """
    written: list[LedgerEntry] = []
    for txn in transactions:
        decision = decide(txn)
        if decision is None:
            break
        entry = LedgerEntry(txn, apply_decision(txn, decision, people))
        write(entry)
        written.append(entry)
    return written
