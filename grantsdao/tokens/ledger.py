"""
Token Ledger: the fungible token a GrantsDAO governs

Defines:
  - TokenLedger : the two calls the DAO consumes (balance_of / transfer)
  - MockToken   : an in-memory ERC-20–style token for tests, local
                  simulations and the CLI dry-run
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, runtime_checkable

from ..address import normalize_address
from ..logger import get_logger

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  EXCEPTIONS
# ══════════════════════════════════════════════════════════════════════

class TokenError(Exception):
    """Base exception for token operations."""


class InsufficientBalanceError(TokenError):
    """Raised when sender balance is too low."""


# ══════════════════════════════════════════════════════════════════════
#  PROTOCOL
# ══════════════════════════════════════════════════════════════════════

@runtime_checkable
class TokenLedger(Protocol):
    """
    The token ledger as seen by the DAO.

    ``transfer`` returns False (or raises) when the ledger refuses the
    transfer; the DAO checks the result and aborts the whole call.
    """

    def balance_of(self, account: str) -> int:
        ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        ...


# ══════════════════════════════════════════════════════════════════════
#  EVENTS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TransferEvent:
    """Emitted on every successful transfer or mint."""
    token_symbol: str
    sender: str
    recipient: str
    amount: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "Transfer",
            "token": self.token_symbol,
            "from": self.sender,
            "to": self.recipient,
            "amount": self.amount,
            "timestamp": self.timestamp,
        }


# ══════════════════════════════════════════════════════════════════════
#  MOCK TOKEN
# ══════════════════════════════════════════════════════════════════════

class MockToken:
    """
    In-memory fungible token.

    Mirrors ERC-20 semantics with integer base units:
        - balance_of(address) → int
        - transfer(sender, recipient, amount) → bool
        - total_supply → int

    A frozen token refuses transfers by returning False rather than raising,
    the way some deployed tokens report failure.
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        decimals: int = 18,
        total_supply: int = 0,
        deployer: str = "",
    ):
        if not name:
            raise TokenError("Token name cannot be empty")
        if not symbol:
            raise TokenError("Token symbol cannot be empty")
        if decimals < 0 or decimals > 18:
            raise TokenError(f"Decimals must be 0-18, got {decimals}")
        if total_supply < 0:
            raise TokenError("Total supply cannot be negative")

        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._total_supply = total_supply
        self.deployer = normalize_address(deployer) if deployer else ""
        self._frozen = False

        self._balances: Dict[str, int] = {}
        self._events: List[Any] = []

        if total_supply > 0 and self.deployer:
            self._balances[self.deployer] = total_supply

        logger.info(f"Token deployed: {symbol} ({name}), supply={total_supply}")

    # ── Read-only views ───────────────────────────────────────────────

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @property
    def events(self) -> List[Any]:
        return list(self._events)

    # ── Core operations ───────────────────────────────────────────────

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        bal = self._balances.get(sender, 0)
        if bal < amount:
            raise InsufficientBalanceError(
                f"{sender} balance {bal} < transfer amount {amount}"
            )
        self._balances[sender] = bal - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount
        self._events.append(TransferEvent(self.symbol, sender, recipient, amount))

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        if amount < 0:
            raise TokenError("Transfer amount cannot be negative")
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        if self._frozen:
            logger.warning(f"Transfer refused, token {self.symbol} is frozen")
            return False

        self._move(sender, recipient, amount)
        logger.debug(f"Transfer: {sender} → {recipient} amount={amount} {self.symbol}")
        return True

    def mint(self, recipient: str, amount: int) -> None:
        """Credit *recipient* with newly created tokens."""
        if amount <= 0:
            raise TokenError("Mint amount must be positive")
        recipient = normalize_address(recipient)
        self._total_supply += amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount
        self._events.append(TransferEvent(self.symbol, "", recipient, amount))
        logger.debug(f"Mint: amount={amount} {self.symbol} → {recipient}")

    # ── Freeze / unfreeze ─────────────────────────────────────────────

    def freeze(self):
        self._frozen = True
        logger.warning(f"Token {self.symbol} FROZEN")

    def unfreeze(self):
        self._frozen = False
        logger.info(f"Token {self.symbol} unfrozen")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "totalSupply": self._total_supply,
            "deployer": self.deployer,
            "frozen": self._frozen,
            "holders": len([b for b in self._balances.values() if b > 0]),
        }

    def __repr__(self) -> str:
        return f"<MockToken {self.symbol} supply={self._total_supply}>"
