"""
GrantsDAO Governance

Provides:
  - GrantsDAO                                 (dao.py)
  - ProposalEngine                            (engine.py)
  - Proposal / ProposalStatus / ProposalPhase / VoteDecision  (proposals.py)
  - MembershipRegistry / MemberRole           (membership.py, state.py)
  - TreasuryAccounting                        (treasury.py)
  - NewProposal / VoteProposal / ExecuteProposal / DeleteProposal  (events.py)
"""

from .state import DAOState, MemberRole
from .proposals import (
    Proposal,
    ProposalPhase,
    ProposalStatus,
    VoteDecision,
)
from .events import (
    AddCommunityMember,
    DeleteProposal,
    EventBus,
    ExecuteProposal,
    NewProposal,
    VoteProposal,
    Withdraw,
)
from .membership import MembershipRegistry, validate_initial_members
from .treasury import TreasuryAccounting
from .engine import ProposalEngine
from .dao import GrantsDAO

__all__ = [
    # State
    "DAOState",
    "MemberRole",
    # Proposals
    "Proposal",
    "ProposalPhase",
    "ProposalStatus",
    "VoteDecision",
    # Events
    "AddCommunityMember",
    "DeleteProposal",
    "EventBus",
    "ExecuteProposal",
    "NewProposal",
    "VoteProposal",
    "Withdraw",
    # Components
    "MembershipRegistry",
    "validate_initial_members",
    "TreasuryAccounting",
    "ProposalEngine",
    "GrantsDAO",
]
