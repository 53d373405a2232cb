"""Domain models and types for divvy.

This package contains the functional core:
- Pure functions with no side effects
- No console output (diagnostics go to the package logger)
- Easy to test
- Reconciliation logic separated from the ledger files and the terminal
"""

from divvy.domain.models import Description, PersonName, TransactionId

__all__ = ["Description", "PersonName", "TransactionId"]
