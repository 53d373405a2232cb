"""Ledger store layer - provides persistence for the application.

This module re-exports all public ledger functions for easy importing.
"""

from divvy.store.codec import LedgerDecodeError, decode_entries, encode_entry, entry_from_dict, entry_to_dict
from divvy.store.ledger import (
    LedgerFile,
    find_latest_ledger_file,
    list_ledger_files,
    load_ledger,
    load_ledger_file,
)

__all__ = [
    # Codec
    "LedgerDecodeError",
    "decode_entries",
    "encode_entry",
    "entry_from_dict",
    "entry_to_dict",
    # Files
    "LedgerFile",
    "find_latest_ledger_file",
    "list_ledger_files",
    "load_ledger",
    "load_ledger_file",
]
