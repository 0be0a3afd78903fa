"""
GrantsDAO

A treasury-governance engine: team and community members propose and vote on
disbursements of a custodial token balance, with time-boxed voting windows,
a quorum threshold and a team veto.
"""

__version__ = "1.0.0"

from .exceptions import (
    ConfigurationError,
    GrantsDAOError,
    GrantsDAOException,
    InsufficientFunds,
    InvalidArgument,
    InvalidConfig,
    InvalidState,
    TokenTransferError,
    Unauthorized,
)
from .governance import GrantsDAO
from .tokens import MockToken, TokenLedger

__all__ = [
    "ConfigurationError",
    "GrantsDAO",
    "GrantsDAOError",
    "GrantsDAOException",
    "InsufficientFunds",
    "InvalidArgument",
    "InvalidConfig",
    "InvalidState",
    "MockToken",
    "TokenLedger",
    "TokenTransferError",
    "Unauthorized",
]
