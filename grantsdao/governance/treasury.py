"""
Treasury Accounting

The token ledger is authoritative for the DAO's balance and is read on every
call, never cached. The treasury only tracks how much of that balance is
locked by active proposals:

    withdrawable = balance_of(dao) − locked
"""

from ..address import is_zero_address, normalize_address
from ..constants import (
    ERR_AMOUNT_NOT_INTEGER,
    ERR_AMOUNT_ZERO,
    ERR_RECEIVER_ZERO,
    ERR_TRANSFER_FAILED,
    ERR_UNABLE_TO_WITHDRAW,
)
from ..exceptions import InsufficientFunds, InvalidArgument, TokenTransferError
from ..logger import get_logger
from ..tokens import TokenLedger
from .state import DAOState

logger = get_logger(__name__)


def is_token_amount(value) -> bool:
    """Token amounts are integer base units; bools are not amounts."""
    return isinstance(value, int) and not isinstance(value, bool)


class TreasuryAccounting:
    """Locked/withdrawable bookkeeping and checked payouts."""

    def __init__(self, state: DAOState, ledger: TokenLedger, address: str):
        self._state = state
        self._ledger = ledger
        self.address = normalize_address(address)

    @property
    def ledger(self) -> TokenLedger:
        return self._ledger

    def balance(self) -> int:
        return self._ledger.balance_of(self.address)

    @property
    def locked(self) -> int:
        return self._state.locked

    def withdrawable(self) -> int:
        return self.balance() - self._state.locked

    def reserve(self, amount: int) -> None:
        """Lock *amount*; the caller has checked ``withdrawable() >= amount``."""
        self._state.locked += amount
        logger.debug(f"Reserved amount={amount}, locked={self._state.locked}")

    def release(self, amount: int) -> None:
        """Unlock *amount* when its proposal reaches a terminal state."""
        if amount > self._state.locked:
            raise ValueError(f"Cannot release {amount}, only {self._state.locked} locked")
        self._state.locked -= amount
        logger.debug(f"Released amount={amount}, locked={self._state.locked}")

    def payout(self, to: str, amount: int) -> None:
        """Transfer *amount* from the treasury; raises if the ledger refuses."""
        if not self._ledger.transfer(self.address, to, amount):
            logger.warning(f"Ledger refused transfer of amount={amount} to {to}")
            raise TokenTransferError(ERR_TRANSFER_FAILED)
        logger.info(f"Paid out amount={amount} → {to}")

    def withdraw(self, to: str, amount: int) -> str:
        """
        Send unlocked funds to *to*. Locked funds stay untouched.

        Authorization is checked by the caller. Returns the normalized
        receiver.
        """
        to = normalize_address(to)
        if not is_token_amount(amount):
            raise InvalidArgument(ERR_AMOUNT_NOT_INTEGER)
        if amount <= 0:
            raise InvalidArgument(ERR_AMOUNT_ZERO)
        if is_zero_address(to):
            raise InvalidArgument(ERR_RECEIVER_ZERO)
        if amount > self.withdrawable():
            raise InsufficientFunds(ERR_UNABLE_TO_WITHDRAW)
        self.payout(to, amount)
        return to
