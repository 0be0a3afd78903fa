"""
GrantsDAO Token Ledger

Provides:
  - TokenLedger : protocol the DAO consumes (balance_of / transfer)
  - MockToken   : in-memory fungible token
"""

from .ledger import (
    InsufficientBalanceError,
    MockToken,
    TokenError,
    TokenLedger,
    TransferEvent,
)

__all__ = [
    "InsufficientBalanceError",
    "MockToken",
    "TokenError",
    "TokenLedger",
    "TransferEvent",
]
