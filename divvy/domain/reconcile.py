"""Pure functions for reconciling transactions against the ledger.

This module contains the functional core for reconciliation:
- No I/O operations
- No side effects
- Single pass over the ledger, O(transactions + ledger)
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from divvy.domain.assignment import LedgerEntry
from divvy.domain.models import TransactionId
from divvy.domain.transactions import Transaction, transaction_id

IdentityFunction = Callable[[Transaction], TransactionId]


@dataclass(frozen=True)
class Reconciliation:
    """Immutable result of diffing transactions against the ledger.

    Attributes:
        unassigned: Transactions with no ledger entry, in source order.
        orphaned: Ledger entries with no current transaction, in ledger order.
        matched: Ledger entries accounted for by a current transaction.
        shadowed: Transactions overwritten by a later one with the same identity.
    """

    unassigned: list[Transaction]
    orphaned: list[LedgerEntry]
    matched: list[LedgerEntry]
    shadowed: list[Transaction] = field(default_factory=list)


@dataclass(frozen=True)
class OrphanFilter:
    """Rules for hiding expected orphans from check reports."""

    descriptions: frozenset[str] = frozenset()
    accounts: frozenset[str] = frozenset()
    categories: frozenset[str] = frozenset()
    hide_skipped: bool = False

    def hides(self, entry: LedgerEntry) -> bool:
        """Check whether an orphaned entry should be left out of reports."""
        txn = entry.transaction
        return (
            txn.description in self.descriptions
            or txn.account_name in self.accounts
            or txn.category in self.categories
            or (self.hide_skipped and entry.is_skip)
        )


def index_transactions(
    transactions: Iterable[Transaction], identify: IdentityFunction = transaction_id
) -> tuple[dict[TransactionId, Transaction], list[Transaction]]:
    """Index transactions by identity.

    Duplicate identities overwrite silently (last one wins) while keeping the
    position of the first occurrence; the overwritten ones are returned too.

    Returns:
        Tuple of (index, shadowed transactions).
    """
    index: dict[TransactionId, Transaction] = {}
    shadowed: list[Transaction] = []
    for txn in transactions:
        key = identify(txn)
        if key in index:
            shadowed.append(index[key])
        index[key] = txn
    return index, shadowed


def reconcile(
    transactions: Iterable[Transaction],
    ledger: Iterable[LedgerEntry],
    identify: IdentityFunction = transaction_id,
) -> Reconciliation:
    """Diff the current transactions against the loaded ledger.

    Each ledger entry whose identity is still indexed removes it from the
    index and counts as matched; every other entry is orphaned. Whatever is
    left in the index afterwards is unassigned.

    Args:
        transactions: Current transactions, in source order.
        ledger: Every loaded ledger entry.
        identify: Identity function used for matching.

    Returns:
        Reconciliation result.
    """
    index, shadowed = index_transactions(transactions, identify)

    orphaned: list[LedgerEntry] = []
    matched: list[LedgerEntry] = []
    for entry in ledger:
        key = identify(entry.transaction)
        if key in index:
            del index[key]
            matched.append(entry)
        else:
            orphaned.append(entry)

    return Reconciliation(
        unassigned=list(index.values()),
        orphaned=orphaned,
        matched=matched,
        shadowed=shadowed,
    )


def filter_orphans(orphaned: Sequence[LedgerEntry], rules: OrphanFilter) -> list[LedgerEntry]:
    """Drop orphans the rules expect to disappear upstream."""
    return [entry for entry in orphaned if not rules.hides(entry)]
