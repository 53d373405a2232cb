"""Pure functions for transaction parsing and identity.

This module contains the functional core for transaction operations:
- No console output (row-level problems are logged, not printed)
- No file access (callers hand in already-split CSV rows)
- Pure data transformations
- Easy to test

Amounts are floats, signed: negative for debits, positive for credits.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

import pandas as pd

from divvy.domain.models import Description, TransactionId
from divvy.logging_setup import get_logger

logger = get_logger(__name__)

SOURCE_DATE_FORMAT = "%m/%d/%Y"

# Header row of the source export, matched exactly
SOURCE_HEADER = (
    "Date",
    "Description",
    "Original Description",
    "Amount",
    "Transaction Type",
    "Category",
    "Account Name",
    "Labels",
    "Notes",
)

SOURCE_COLUMN_COUNT = len(SOURCE_HEADER)


class SourceFormatError(ValueError):
    """The transaction source is structurally malformed."""


class TransactionType(Enum):
    """Direction of a transaction as given by the source's type column."""

    DEBIT = "debit"
    CREDIT = "credit"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction data."""

    date: date
    description: Description
    original_description: str
    amount: float
    category: str = ""
    account_name: str = ""
    labels: str = ""
    notes: str = ""

    def summary(self) -> str:
        """One-line rendering of the identity-relevant fields."""
        return f"{self.date.isoformat()} ${self.amount} '{self.description}'"


def transaction_id(transaction: Transaction) -> TransactionId:
    """Compute the identity key of a transaction.

    Only date, amount and description take part, so upstream edits to
    category, account, labels or notes do not make a transaction look new.
    Two distinct transactions sharing all three fields collide.

    Args:
        transaction: Transaction to identify.

    Returns:
        Opaque identity string.
    """
    return TransactionId(transaction.summary())


def parse_transaction_type(raw_type: str) -> TransactionType:
    """Parse the source's type column.

    Args:
        raw_type: Raw type value ("debit" or "credit", any case).

    Returns:
        Parsed TransactionType.

    Raises:
        ValueError: If the value is neither debit nor credit.
    """
    try:
        return TransactionType(raw_type.strip().lower())
    except ValueError:
        raise ValueError(f"failed to parse transaction type '{raw_type}'") from None


def normalize_csv_date(raw_date: str) -> date:
    """Parse a source date in M/D/YYYY format.

    Args:
        raw_date: Raw date string from the CSV.

    Returns:
        Parsed calendar date.

    Raises:
        ValueError: If the date cannot be parsed.
    """
    try:
        parsed = pd.to_datetime(raw_date.strip(), format=SOURCE_DATE_FORMAT)
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"failed to parse transaction date '{raw_date}': {e}") from e
    if pd.isna(parsed):
        raise ValueError(f"failed to parse transaction date '{raw_date}'")
    return parsed.date()


def parse_amount(raw_amount: str) -> float:
    """Parse a decimal amount string.

    Raises:
        ValueError: If the amount is not a finite decimal number.
    """
    cleaned = raw_amount.strip().replace("$", "").replace(",", "")
    try:
        amount = float(cleaned)
    except ValueError:
        amount = math.nan
    if "_" in cleaned or not math.isfinite(amount):
        raise ValueError(f"failed to parse transaction amount '{raw_amount}'")
    return amount


def apply_type_sign(amount: float, transaction_type: TransactionType) -> float:
    """Sign a parsed amount according to the transaction type.

    Debits become negative and credits positive, whether or not the source
    already carried a sign. Unknown types keep the amount as written.
    """
    if transaction_type is TransactionType.DEBIT:
        return -abs(amount)
    if transaction_type is TransactionType.CREDIT:
        return abs(amount)
    return amount


def is_header_row(row: Sequence[str]) -> bool:
    """Check whether a row is the source's header row."""
    return tuple(field.strip() for field in row) == SOURCE_HEADER


def parse_row(row: Sequence[str], row_num: int | None = None) -> Transaction:
    """Parse one source row into a Transaction.

    Bad dates, amounts and types are logged and replaced by defaults
    (date.min, 0.0, amount as written) so the row still yields a record.

    Args:
        row: The nine source fields, in source order.
        row_num: Row number for diagnostics.

    Returns:
        Parsed Transaction.

    Raises:
        SourceFormatError: If the row does not have exactly nine fields.
    """
    where = f"row {row_num}: " if row_num is not None else ""
    if len(row) != SOURCE_COLUMN_COUNT:
        raise SourceFormatError(f"{where}expected {SOURCE_COLUMN_COUNT} fields, got {len(row)}")

    raw_date, description, original_description, raw_amount, raw_type, category, account, labels, notes = row

    try:
        txn_date = normalize_csv_date(raw_date)
    except ValueError as e:
        logger.error("%s%s", where, e)
        txn_date = date.min

    try:
        amount = parse_amount(raw_amount)
    except ValueError as e:
        logger.error("%s%s", where, e)
        amount = 0.0

    try:
        transaction_type = parse_transaction_type(raw_type)
    except ValueError as e:
        logger.error("%s%s", where, e)
        transaction_type = TransactionType.UNKNOWN

    return Transaction(
        date=txn_date,
        description=Description(description),
        original_description=original_description,
        amount=apply_type_sign(amount, transaction_type),
        category=category,
        account_name=account,
        labels=labels,
        notes=notes,
    )


def parse_transactions(rows: Iterable[Sequence[str]]) -> list[Transaction]:
    """Parse source rows into Transactions, preserving source order.

    A header row, if present, is skipped. Row-level errors never stop the
    parse; a row with the wrong column count does.

    Args:
        rows: CSV rows as sequences of strings.

    Returns:
        Transactions in source order.

    Raises:
        SourceFormatError: If any row has the wrong number of fields.
    """
    transactions: list[Transaction] = []
    for row_num, row in enumerate(rows, start=1):
        if is_header_row(row):
            continue
        transactions.append(parse_row(row, row_num))
    return transactions


def split_settled(
    transactions: Iterable[Transaction], cutoff: datetime
) -> tuple[list[Transaction], list[Transaction]]:
    """Partition transactions into settled and pending ones.

    Transactions dated strictly before the cutoff are settled. Newer ones may
    still change date or description upstream, so they are held back.

    Args:
        transactions: Transactions in source order.
        cutoff: Settlement cutoff (now minus the settlement period).

    Returns:
        Tuple of (settled, pending), each in source order.
    """
    settled: list[Transaction] = []
    pending: list[Transaction] = []
    for txn in transactions:
        if datetime.combine(txn.date, datetime.min.time()) < cutoff:
            settled.append(txn)
        else:
            pending.append(txn)
    return settled, pending
