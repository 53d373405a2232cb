"""Pytest configuration for test isolation.

Config and default ledger locations are resolved from the XDG environment
variables. Every test gets its own XDG directories so nothing touches the
real user's config or ledger.
"""

import os
from datetime import date
from pathlib import Path

import pytest

from divvy.domain.models import Description
from divvy.domain.transactions import Transaction


@pytest.fixture(autouse=True)
def _isolate_xdg_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point XDG config and data homes at per-test temporary directories."""
    monkeypatch.setenv("XDG_CONFIG_HOME", os.fspath(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", os.fspath(tmp_path / "data"))
    monkeypatch.delenv("DIVVY_LOG_LEVEL", raising=False)


def make_transaction(
    when: date = date(2023, 1, 1),
    description: str = "Coffee",
    amount: float = -10.0,
    **fields: str,
) -> Transaction:
    """Build a transaction with sensible defaults for tests."""
    return Transaction(
        date=when,
        description=Description(description),
        original_description=fields.pop("original_description", description.upper()),
        amount=amount,
        category=fields.pop("category", ""),
        account_name=fields.pop("account_name", ""),
        labels=fields.pop("labels", ""),
        notes=fields.pop("notes", ""),
    )


@pytest.fixture
def txn_factory():
    """Factory fixture for transactions."""
    return make_transaction


@pytest.fixture
def ledger_dir(tmp_path: Path) -> Path:
    """An empty ledger directory."""
    path = tmp_path / "history"
    path.mkdir()
    return path
