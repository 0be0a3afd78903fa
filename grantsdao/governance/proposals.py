"""
Grant Proposals

Defines the proposal lifecycle states, the vote decision resolved from a
member's boolean vote, and the Proposal dataclass that tracks a single
disbursement request from creation to its terminal transition.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List

from ..constants import ZERO_ADDRESS
from ..exceptions import InvalidState
from ..logger import get_logger

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  ENUMS
# ══════════════════════════════════════════════════════════════════════

class ProposalStatus(IntEnum):
    """Stored lifecycle status."""
    NONE = 0        # Id never allocated
    ACTIVE = 1      # Funds locked; in submission or voting phase, or expired
    EXECUTED = 2    # Paid out to the receiver
    DELETED = 3     # Vetoed by a team member or deleted after expiry


class ProposalPhase(IntEnum):
    """Observed phase, derived from status and the clock."""
    NONE = 0
    SUBMISSION = 1  # Created, voting delay not yet elapsed
    VOTING = 2      # Open for votes
    EXPIRED = 3     # Voting closed; creator may delete
    EXECUTED = 4
    DELETED = 5


class VoteDecision(Enum):
    """What a member's boolean vote means once their role is known."""
    APPROVE = "approve"  # yes vote, any member
    VETO = "veto"        # no vote by a team member: deletes the proposal
    REJECT = "reject"    # no vote by a community member: recorded, non-binding

    @classmethod
    def resolve(cls, approve: bool, is_team: bool) -> "VoteDecision":
        if approve:
            return cls.APPROVE
        return cls.VETO if is_team else cls.REJECT


_TERMINAL = {ProposalStatus.EXECUTED, ProposalStatus.DELETED}


# ══════════════════════════════════════════════════════════════════════
#  PROPOSAL
# ══════════════════════════════════════════════════════════════════════

@dataclass
class Proposal:
    """
    A request to pay ``amount`` tokens from the treasury to ``receiver``.

    Fields:
        id:             Proposal number (first is 1, never reused)
        proposer:       Member who created it
        receiver:       Destination of the funds
        amount:         Tokens locked for this proposal
        created_at:     Creation timestamp (seconds)
        approvals:      Yes votes so far, the creator's included
        team_approval:  True once any team member has voted yes
        status:         Stored lifecycle status

    After a terminal transition every field except ``id`` and ``status``
    reads as its zero value.
    """
    id: int
    proposer: str = ZERO_ADDRESS
    receiver: str = ZERO_ADDRESS
    amount: int = 0
    created_at: int = 0
    approvals: int = 0
    team_approval: bool = False
    status: ProposalStatus = ProposalStatus.NONE
    _history: List[Dict[str, Any]] = field(default_factory=list, repr=False)

    # ── Properties ────────────────────────────────────────────────────

    @property
    def is_active(self) -> bool:
        return self.status == ProposalStatus.ACTIVE

    @property
    def is_terminal(self) -> bool:
        return self.status in _TERMINAL

    @property
    def history(self) -> List[Dict[str, Any]]:
        return list(self._history)

    def phase(self, now: int, voting_delay: int, proposal_expiry: int) -> ProposalPhase:
        """Phase of the proposal as seen at *now*."""
        if self.status == ProposalStatus.EXECUTED:
            return ProposalPhase.EXECUTED
        if self.status == ProposalStatus.DELETED:
            return ProposalPhase.DELETED
        if self.status == ProposalStatus.NONE:
            return ProposalPhase.NONE
        if now <= self.created_at + voting_delay:
            return ProposalPhase.SUBMISSION
        if now <= self.created_at + proposal_expiry:
            return ProposalPhase.VOTING
        return ProposalPhase.EXPIRED

    # ── State transitions ─────────────────────────────────────────────

    def _record_transition(self, new_status: ProposalStatus, reason: str, now: int):
        self._history.append({
            "from": self.status.name,
            "to": new_status.name,
            "reason": reason,
            "timestamp": now,
        })

    def open(self, now: int):
        """NONE → ACTIVE."""
        if self.status != ProposalStatus.NONE:
            raise InvalidState(f"Proposal #{self.id} already exists")
        self._record_transition(ProposalStatus.ACTIVE, "created", now)
        self.status = ProposalStatus.ACTIVE

    def terminate(self, new_status: ProposalStatus, reason: str, now: int) -> int:
        """
        ACTIVE → EXECUTED / DELETED.

        Clears the funds-bearing fields and returns the amount that was
        locked, so the caller releases it exactly once.
        """
        if new_status not in _TERMINAL:
            raise ValueError(f"{new_status.name} is not a terminal status")
        if not self.is_active:
            raise InvalidState(
                f"Cannot move proposal #{self.id} from {self.status.name} to {new_status.name}"
            )
        amount = self.amount
        self._record_transition(new_status, reason, now)
        self.status = new_status
        self.proposer = ZERO_ADDRESS
        self.receiver = ZERO_ADDRESS
        self.amount = 0
        self.created_at = 0
        self.approvals = 0
        self.team_approval = False
        logger.info(f"Proposal #{self.id}: ACTIVE → {new_status.name} | {reason}")
        return amount

    # ── Serialization ─────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "proposer": self.proposer,
            "receiver": self.receiver,
            "amount": self.amount,
            "createdAt": self.created_at,
            "approvals": self.approvals,
            "teamApproval": self.team_approval,
            "status": self.status.name,
            "historyLength": len(self._history),
        }

    def __repr__(self) -> str:
        return (
            f"<Proposal #{self.id} amount={self.amount} "
            f"approvals={self.approvals} status={self.status.name}>"
        )
