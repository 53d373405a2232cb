"""Domain type definitions for divvy.

These NewTypes provide semantic clarity and help with type checking:
- PersonName: Name of a person transactions are divvied between
- TransactionId: Opaque identity key used to match transactions across runs
- Description: Transaction description text
"""

from typing import NewType

# Person who can be made responsible for (part of) a transaction
PersonName = NewType("PersonName", str)

# Rendered identity of a transaction, compared for equality only
TransactionId = NewType("TransactionId", str)

# Transaction description text
Description = NewType("Description", str)
