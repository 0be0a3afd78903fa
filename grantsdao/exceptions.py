"""
GrantsDAO Exceptions

Custom exception classes for the GrantsDAO governance engine.

Every governance error carries the verbatim revert reason that callers and
indexers see, available both as ``str(exc)`` and ``exc.reason``.
"""


class GrantsDAOException(Exception):
    """Base exception for GrantsDAO."""
    pass


class ConfigurationError(GrantsDAOException):
    """Configuration file or environment error."""
    pass


class GrantsDAOError(GrantsDAOException):
    """A governance call was rejected. State is left unchanged."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InvalidConfig(GrantsDAOError):
    """Construction parameters violate the membership/quorum rules."""
    pass


class Unauthorized(GrantsDAOError):
    """Caller lacks the role required for the operation."""
    pass


class InvalidArgument(GrantsDAOError):
    """Malformed call parameters (zero amount, zero receiver, bad address)."""
    pass


class InsufficientFunds(GrantsDAOError):
    """Treasury cannot cover the requested reservation or withdrawal."""
    pass


class InvalidState(GrantsDAOError):
    """Operation attempted outside its valid lifecycle phase."""
    pass


class TokenTransferError(GrantsDAOError):
    """The token ledger reported a failed transfer."""
    pass
