"""Transaction source file loading.

Reads the 9-column CSV export and holds back transactions that are still
inside the settlement period.
"""

import csv
from datetime import datetime, timedelta
from pathlib import Path

from divvy.dates import settlement_cutoff
from divvy.domain.transactions import (
    SourceFormatError,
    Transaction,
    parse_transactions,
    split_settled,
    transaction_id,
)
from divvy.logging_setup import get_logger

logger = get_logger(__name__)


def read_transactions(csv_path: Path) -> list[Transaction]:
    """Read and parse every transaction of a source CSV file.

    Args:
        csv_path: Path to the CSV export.

    Returns:
        Transactions in source order.

    Raises:
        OSError: If the file cannot be opened.
        SourceFormatError: If a row has the wrong number of columns, or the
            file is not UTF-8 text.
    """
    try:
        with open(csv_path, encoding="utf-8-sig", newline="") as f:
            return parse_transactions(csv.reader(f))
    except UnicodeDecodeError as e:
        raise SourceFormatError(f"'{csv_path}' is not UTF-8 text ({e.reason})") from e


def load_settled_transactions(
    csv_path: Path, settlement_period: timedelta, now: datetime | None = None
) -> list[Transaction]:
    """Read the source and keep only transactions older than the settlement period.

    When transactions settle, their dates and descriptions sometimes change so
    they would look like new transactions. Pending ones are logged and left
    for a later run.

    Args:
        csv_path: Path to the CSV export.
        settlement_period: Minimum age of a processed transaction.
        now: Current time. Defaults to datetime.now().

    Returns:
        Settled transactions in source order.
    """
    if now is None:
        now = datetime.now()
    transactions = read_transactions(csv_path)
    settled, pending = split_settled(transactions, settlement_cutoff(now, settlement_period))
    if pending:
        logger.info("Pending transactions ignored: %d", len(pending))
        for txn in pending:
            logger.info("    %s", transaction_id(txn))
    return settled
