"""Ledger record encoding.

A ledger file is a concatenation of indented JSON objects, one per entry:

    {
        "transaction": {
            "date": "2023-01-01",
            "description": "Coffee",
            "original_description": "COFFEE SHOP #12",
            "amount": -10.0,
            "category": "Coffee Shops",
            "account_name": "Checking",
            "labels": "",
            "notes": ""
        },
        "assignment": {
            "Mark": -10.0
        }
    }

Each object is self-delimiting, so files can be appended to without rewriting
and read back by decoding objects until end of file.
"""

import json
from collections.abc import Iterator
from datetime import date
from typing import Any

from divvy.domain.assignment import LedgerEntry
from divvy.domain.models import Description, PersonName
from divvy.domain.transactions import Transaction

_decoder = json.JSONDecoder()


class LedgerDecodeError(ValueError):
    """A ledger record could not be decoded."""


def entry_to_dict(entry: LedgerEntry) -> dict[str, Any]:
    """Convert a ledger entry to a JSON-compatible dictionary."""
    txn = entry.transaction
    return {
        "transaction": {
            "date": txn.date.isoformat(),
            "description": txn.description,
            "original_description": txn.original_description,
            "amount": txn.amount,
            "category": txn.category,
            "account_name": txn.account_name,
            "labels": txn.labels,
            "notes": txn.notes,
        },
        "assignment": dict(entry.assignment),
    }


def entry_from_dict(data: Any) -> LedgerEntry:
    """Build a ledger entry from a decoded JSON object.

    Raises:
        LedgerDecodeError: If required fields are missing or mistyped.
    """
    try:
        raw_txn = data["transaction"]
        txn = Transaction(
            date=date.fromisoformat(raw_txn["date"]),
            description=Description(raw_txn["description"]),
            original_description=raw_txn["original_description"],
            amount=float(raw_txn["amount"]),
            category=raw_txn.get("category", ""),
            account_name=raw_txn.get("account_name", ""),
            labels=raw_txn.get("labels", ""),
            notes=raw_txn.get("notes", ""),
        )
        assignment = {PersonName(person): float(amount) for person, amount in data["assignment"].items()}
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise LedgerDecodeError(f"malformed ledger record: {e!r}") from e
    return LedgerEntry(txn, assignment)


def encode_entry(entry: LedgerEntry) -> str:
    """Render one entry as a self-delimited text record, newline terminated."""
    return json.dumps(entry_to_dict(entry), indent=4) + "\n"


def decode_entries(text: str) -> Iterator[LedgerEntry]:
    """Decode concatenated records in order, stopping cleanly at the end.

    Raises:
        LedgerDecodeError: On the first record that fails to decode.
    """
    pos = 0
    end = len(text)
    while True:
        while pos < end and text[pos].isspace():
            pos += 1
        if pos == end:
            return
        try:
            data, pos = _decoder.raw_decode(text, pos)
        except json.JSONDecodeError as e:
            raise LedgerDecodeError(f"invalid JSON at line {e.lineno} column {e.colno}: {e.msg}") from e
        yield entry_from_dict(data)
