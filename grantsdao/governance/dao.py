"""
GrantsDAO: the governance surface

Entry points external callers invoke. Each command:
  1. checks the caller's role against the Membership Registry
  2. delegates to the Proposal Engine or Treasury Accounting
  3. runs inside a transaction: a state checkpoint is opened first and
     rolled back if anything raises, and events are only published once the
     call commits

Commands do not nest. A command issued while another is in flight (for
example from inside a token transfer) is rejected with InvalidState.
"""

import copy
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..constants import (
    DEFAULT_DAO_ADDRESS,
    ERR_REENTRANT_CALL,
    PROPOSAL_EXPIRY_SECONDS,
    VOTING_DELAY_SECONDS,
)
from ..exceptions import GrantsDAOError, InvalidState, TokenTransferError
from ..logger import get_logger
from ..tokens import TokenLedger
from .engine import ProposalEngine
from .events import AddCommunityMember, EventBus, GovernanceEvent, Observer, Withdraw
from .membership import MembershipRegistry
from .proposals import Proposal, ProposalPhase, VoteDecision
from .state import DAOState
from .treasury import TreasuryAccounting

logger = get_logger(__name__)


def _wall_clock() -> int:
    return int(time.time())


class GrantsDAO:
    """
    Treasury governance over a fungible token balance.

    Args:
        token:             Ledger of the governed token
        team_members:      Initial privileged members (at least one)
        community_members: Initial ordinary members
        to_pass:           Approvals required to execute a proposal
        address:           Account the treasury is held under on the ledger
        clock:             Callable() → int seconds; defaults to wall time
        voting_delay:      Seconds before a new proposal becomes votable
        proposal_expiry:   Seconds after creation when voting closes

    Raises InvalidConfig if the member sets or ``to_pass`` violate the
    membership rules; no DAO is created in that case.
    """

    def __init__(
        self,
        token: TokenLedger,
        team_members: Iterable[str],
        community_members: Iterable[str],
        to_pass: int,
        *,
        address: str = DEFAULT_DAO_ADDRESS,
        clock: Optional[Callable[[], int]] = None,
        voting_delay: int = VOTING_DELAY_SECONDS,
        proposal_expiry: int = PROPOSAL_EXPIRY_SECONDS,
    ):
        self._state = DAOState()
        self._membership = MembershipRegistry.bootstrap(
            self._state, team_members, community_members, to_pass
        )
        self._treasury = TreasuryAccounting(self._state, token, address)
        self._events = EventBus()
        self._pending: Optional[List[GovernanceEvent]] = None
        self._engine = ProposalEngine(
            self._state,
            self._membership,
            self._treasury,
            clock or _wall_clock,
            self._emit,
            voting_delay=voting_delay,
            proposal_expiry=proposal_expiry,
        )
        logger.info(
            f"GrantsDAO deployed at {self._treasury.address} "
            f"(members={self.members()}, toPass={self.to_pass()})"
        )

    @classmethod
    def from_config(cls, config, token: TokenLedger, clock: Optional[Callable[[], int]] = None) -> "GrantsDAO":
        """Build a DAO from a GrantsDAOConfig."""
        return cls(
            token,
            config.dao.team_members,
            config.dao.community_members,
            config.dao.to_pass,
            address=config.dao.address,
            clock=clock,
            voting_delay=config.timing.voting_delay,
            proposal_expiry=config.timing.proposal_expiry,
        )

    # ── Transactions ──────────────────────────────────────────────────

    def _emit(self, event: GovernanceEvent) -> None:
        if self._pending is None:
            raise RuntimeError("Event emitted outside of a transaction")
        self._pending.append(event)

    @contextmanager
    def _transaction(self, operation: str):
        if self._pending is not None:
            logger.warning(f"{operation} rejected: issued while another call is in flight")
            raise InvalidState(ERR_REENTRANT_CALL)
        self._pending = []
        checkpoint = self._state.checkpoint()
        try:
            yield
        except Exception as e:
            self._state.rollback(checkpoint)
            self._pending = None
            if isinstance(e, GrantsDAOError) and not isinstance(e, TokenTransferError):
                logger.debug(f"{operation} rejected: {e}")
            else:
                logger.warning(f"{operation} rolled back: {e}")
            raise
        self._state.commit()
        events, self._pending = self._pending, None
        self._events.publish(events)

    # ── Commands ──────────────────────────────────────────────────────

    def create_proposal(self, caller: str, receiver: str, amount: int) -> int:
        """Propose paying *amount* to *receiver*. Returns the proposal number."""
        with self._transaction("createProposal"):
            proposal = self._engine.create(caller, receiver, amount)
        return proposal.id

    def vote_proposal(self, caller: str, proposal_id: int, approve: bool) -> VoteDecision:
        with self._transaction("voteProposal"):
            decision = self._engine.vote(caller, proposal_id, approve)
        return decision

    def delete_proposal(self, caller: str, proposal_id: int) -> None:
        with self._transaction("deleteProposal"):
            self._engine.delete(caller, proposal_id)

    def withdraw(self, caller: str, to: str, amount: int) -> None:
        """Send unlocked treasury funds to *to*. Team members only."""
        with self._transaction("withdraw"):
            self._membership.require_team(caller)
            to = self._treasury.withdraw(to, amount)
            self._emit(Withdraw(to=to, amount=amount))

    def add_community_member(self, caller: str, member: str) -> None:
        """Add a community member and raise toPass by one. Team members only."""
        with self._transaction("addCommunityMember"):
            member = self._membership.add_community_member(caller, member)
            self._emit(AddCommunityMember(member=member, to_pass=self._state.to_pass))

    # ── Queries ───────────────────────────────────────────────────────

    @property
    def token(self) -> TokenLedger:
        return self._treasury.ledger

    @property
    def address(self) -> str:
        return self._treasury.address

    @property
    def proposal_count(self) -> int:
        return self._state.proposal_count

    def members(self) -> int:
        """Total number of members."""
        return self._membership.member_count

    def team_members(self) -> List[str]:
        return self._membership.team_members()

    def community_members(self) -> List[str]:
        return self._membership.community_members()

    def is_team_member(self, address: str) -> bool:
        return self._membership.is_team(address)

    def is_community_member(self, address: str) -> bool:
        return self._membership.is_community(address)

    def to_pass(self) -> int:
        return self._membership.to_pass

    def locked(self) -> int:
        return self._treasury.locked

    def withdrawable(self) -> int:
        return self._treasury.withdrawable()

    def proposal(self, proposal_id: int) -> Proposal:
        """A copy of the proposal; zeroed if terminal or never created."""
        return copy.deepcopy(self._engine.get(proposal_id))

    def proposal_phase(self, proposal_id: int) -> ProposalPhase:
        return self._engine.phase(proposal_id)

    def has_voted(self, member: str, proposal_id: int) -> bool:
        return self._engine.has_voted(member, proposal_id)

    def is_in_voting_phase(self, proposal_id: int) -> bool:
        return self._engine.in_voting_phase(proposal_id)

    def is_expired(self, proposal_id: int) -> bool:
        return self._engine.is_expired(proposal_id)

    # ── Events ────────────────────────────────────────────────────────

    @property
    def events(self) -> List[GovernanceEvent]:
        return self._events.history

    def subscribe(self, observer: Observer) -> None:
        self._events.subscribe(observer)

    def unsubscribe(self, observer: Observer) -> None:
        self._events.unsubscribe(observer)

    # ── Serialization ─────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "members": self.members(),
            "teamMembers": self.team_members(),
            "communityMembers": self.community_members(),
            "toPass": self.to_pass(),
            "locked": self.locked(),
            "withdrawable": self.withdrawable(),
            "proposalCount": self.proposal_count,
            "activeProposals": [p.to_dict() for p in self._engine.active_proposals()],
            "votingDelay": self._engine.voting_delay,
            "proposalExpiry": self._engine.proposal_expiry,
        }

    def __repr__(self) -> str:
        return f"<GrantsDAO {self.address} members={self.members()} toPass={self.to_pass()}>"
