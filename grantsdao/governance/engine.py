"""
Proposal Engine

Implements the grant proposal state machine:
  - creation locks the requested amount and counts the creator's yes vote
  - voting opens VOTING_DELAY after creation and closes at PROPOSAL_EXPIRY
  - a team member's no vote vetoes (deletes) the proposal
  - execution needs approvals ≥ toPass AND at least one team approval
  - the creator may delete a proposal once it has expired

Phases are evaluated lazily against the clock on each call; there is no
background timer. Every terminal transition clears the proposal and releases
its lock before any token leaves the treasury.
"""

from typing import Callable, List

from ..address import is_zero_address, normalize_address
from ..constants import (
    ERR_ALREADY_VOTED,
    ERR_AMOUNT_NOT_INTEGER,
    ERR_AMOUNT_ZERO,
    ERR_INVALID_FUNDS,
    ERR_NOT_EXPIRED,
    ERR_NOT_PROPOSER,
    ERR_NOT_VOTING_PHASE,
    ERR_RECEIVER_ZERO,
    PROPOSAL_EXPIRY_SECONDS,
    VOTING_DELAY_SECONDS,
)
from ..exceptions import (
    InsufficientFunds,
    InvalidArgument,
    InvalidConfig,
    InvalidState,
    Unauthorized,
)
from ..logger import get_logger
from .events import (
    DeleteProposal,
    ExecuteProposal,
    GovernanceEvent,
    NewProposal,
    VoteProposal,
)
from .membership import MembershipRegistry
from .proposals import Proposal, ProposalPhase, ProposalStatus, VoteDecision
from .state import DAOState
from .treasury import TreasuryAccounting, is_token_amount

logger = get_logger(__name__)


class ProposalEngine:
    """
    Proposal lifecycle over a shared DAOState.

    Args:
        state:           Owned governance state
        membership:      Role lookups
        treasury:        Lock bookkeeping and payouts
        clock:           Callable() → int, current timestamp in seconds
        emit:            Callable(event), buffers an event for publication
        voting_delay:    Seconds after creation before voting opens
        proposal_expiry: Seconds after creation when voting closes
    """

    def __init__(
        self,
        state: DAOState,
        membership: MembershipRegistry,
        treasury: TreasuryAccounting,
        clock: Callable[[], int],
        emit: Callable[[GovernanceEvent], None],
        voting_delay: int = VOTING_DELAY_SECONDS,
        proposal_expiry: int = PROPOSAL_EXPIRY_SECONDS,
    ):
        if voting_delay < 0 or proposal_expiry <= voting_delay:
            raise InvalidConfig(
                f"Voting window is empty (delay={voting_delay}, expiry={proposal_expiry})"
            )
        self._state = state
        self._membership = membership
        self._treasury = treasury
        self._clock = clock
        self._emit = emit
        self.voting_delay = voting_delay
        self.proposal_expiry = proposal_expiry

    # ── Queries ───────────────────────────────────────────────────────

    def now(self) -> int:
        return int(self._clock())

    def get(self, proposal_id: int) -> Proposal:
        """The stored proposal, or a zeroed record for an unallocated id."""
        proposal = self._state.proposals.get(proposal_id)
        if proposal is None:
            return Proposal(id=proposal_id)
        return proposal

    def phase(self, proposal_id: int) -> ProposalPhase:
        return self.get(proposal_id).phase(self.now(), self.voting_delay, self.proposal_expiry)

    def in_voting_phase(self, proposal_id: int) -> bool:
        return self.phase(proposal_id) == ProposalPhase.VOTING

    def is_expired(self, proposal_id: int) -> bool:
        return self.phase(proposal_id) == ProposalPhase.EXPIRED

    def has_voted(self, member: str, proposal_id: int) -> bool:
        return (normalize_address(member), proposal_id) in self._state.votes

    def active_proposals(self) -> List[Proposal]:
        return [p for p in self._state.proposals.values() if p.is_active]

    # ── Commands ──────────────────────────────────────────────────────

    def create(self, caller: str, receiver: str, amount: int) -> Proposal:
        """
        Create a proposal paying *amount* to *receiver*.

        The creator's vote counts as the first approval, and as the team
        approval when the creator is a team member.
        """
        caller = normalize_address(caller)
        if not self._membership.is_member(caller):
            raise Unauthorized(ERR_NOT_PROPOSER)
        if not is_token_amount(amount):
            raise InvalidArgument(ERR_AMOUNT_NOT_INTEGER)
        if amount <= 0:
            raise InvalidArgument(ERR_AMOUNT_ZERO)
        receiver = normalize_address(receiver)
        if is_zero_address(receiver):
            raise InvalidArgument(ERR_RECEIVER_ZERO)
        if self._treasury.withdrawable() < amount:
            raise InsufficientFunds(ERR_INVALID_FUNDS)

        now = self.now()
        self._state.proposal_count += 1
        proposal = Proposal(
            id=self._state.proposal_count,
            proposer=caller,
            receiver=receiver,
            amount=amount,
            created_at=now,
            approvals=1,
            team_approval=self._membership.is_team(caller),
        )
        proposal.open(now)
        self._state.put_proposal(proposal)
        self._state.add_vote(caller, proposal.id)
        self._treasury.reserve(amount)

        self._emit(NewProposal(receiver=receiver, amount=amount, proposal_number=proposal.id))
        logger.info(
            f"Proposal #{proposal.id} created by {caller}: amount={amount} → {receiver}"
        )
        return proposal

    def vote(self, caller: str, proposal_id: int, approve: bool) -> VoteDecision:
        """
        Record *caller*'s vote on a proposal in its voting phase.

        Returns the decision the vote resolved to.
        """
        caller = normalize_address(caller)
        if not self._membership.is_member(caller):
            raise Unauthorized(ERR_NOT_PROPOSER)
        if not self.in_voting_phase(proposal_id):
            raise InvalidState(ERR_NOT_VOTING_PHASE)
        if (caller, proposal_id) in self._state.votes:
            raise InvalidState(ERR_ALREADY_VOTED)

        proposal = self._state.touch(proposal_id)
        is_team = self._membership.is_team(caller)
        decision = VoteDecision.resolve(approve, is_team)
        self._state.add_vote(caller, proposal_id)

        if decision is VoteDecision.VETO:
            self._delete(proposal, f"Vetoed by team member {caller}")
            return decision

        if decision is VoteDecision.REJECT:
            self._emit(VoteProposal(proposal=proposal_id, member=caller, vote=False))
            logger.info(f"Proposal #{proposal_id}: {caller} voted against (non-binding)")
            return decision

        proposal.approvals += 1
        if is_team:
            proposal.team_approval = True
        self._emit(VoteProposal(proposal=proposal_id, member=caller, vote=True))
        logger.info(
            f"Proposal #{proposal_id}: {caller} approved "
            f"({proposal.approvals}/{self._state.to_pass}, team={proposal.team_approval})"
        )

        if proposal.approvals >= self._state.to_pass and proposal.team_approval:
            self._execute(proposal)
        return decision

    def delete(self, caller: str, proposal_id: int) -> None:
        """Delete an expired proposal. Only its creator may do this."""
        caller = normalize_address(caller)
        proposal = self.get(proposal_id)
        if not proposal.is_active or proposal.proposer != caller:
            raise Unauthorized(ERR_NOT_PROPOSER)
        if not self.is_expired(proposal_id):
            raise InvalidState(ERR_NOT_EXPIRED)
        proposal = self._state.touch(proposal_id)
        self._delete(proposal, f"Expired, deleted by proposer {caller}")

    # ── Terminal transitions ──────────────────────────────────────────

    def _delete(self, proposal: Proposal, reason: str) -> None:
        amount = proposal.terminate(ProposalStatus.DELETED, reason, self.now())
        self._treasury.release(amount)
        self._emit(DeleteProposal(proposal_number=proposal.id))

    def _execute(self, proposal: Proposal) -> None:
        receiver = proposal.receiver
        amount = proposal.terminate(ProposalStatus.EXECUTED, "Quorum and team approval met", self.now())
        self._treasury.release(amount)
        # Terminal and unlocked before the ledger call.
        self._treasury.payout(receiver, amount)
        self._emit(ExecuteProposal(receiver=receiver, amount=amount))
