"""
DAO State: the aggregate every governance component reads and mutates

One DAOState is owned by one GrantsDAO. Components receive it by reference;
nothing else holds governance data.

All-or-nothing calls use an undo journal rather than a full copy:
``checkpoint()`` saves the scalar fields and opens the journal, the
mutators below record what they change, and ``rollback()`` replays the
journal backwards. The cost of a call is proportional to what it touches,
not to the DAO's history.
"""

import copy
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Set, Tuple

from .proposals import Proposal


class MemberRole(IntEnum):
    """Membership role. Roles are disjoint."""
    TEAM = 1
    COMMUNITY = 2


@dataclass(frozen=True)
class Checkpoint:
    """Scalar fields at the start of a call."""
    to_pass: int
    locked: int
    proposal_count: int


@dataclass
class DAOState:
    """
    Mutable governance state.

    Fields:
        members:         address → MemberRole (append-only)
        to_pass:         approvals required to execute (quorum threshold)
        locked:          sum of amounts reserved by active proposals
        proposal_count:  last allocated proposal id (0 = none yet)
        proposals:       id → Proposal (terminal proposals stay, zeroed)
        votes:           (member, proposal id) pairs that have voted (append-only)

    Scalars may be assigned directly. ``members``, ``proposals`` and
    ``votes`` must be changed through the mutators so a rollback can undo
    them.
    """
    members: Dict[str, MemberRole] = field(default_factory=dict)
    to_pass: int = 0
    locked: int = 0
    proposal_count: int = 0
    proposals: Dict[int, Proposal] = field(default_factory=dict)
    votes: Set[Tuple[str, int]] = field(default_factory=set)
    _journal: Optional[List[Tuple[Any, ...]]] = field(default=None, repr=False, compare=False)

    # ── Mutators ──────────────────────────────────────────────────────

    def _record(self, *entry) -> None:
        if self._journal is not None:
            self._journal.append(entry)

    def add_member(self, address: str, role: MemberRole) -> None:
        if address in self.members:
            raise ValueError(f"{address} is already a member")
        self._record("member", address)
        self.members[address] = role

    def add_vote(self, member: str, proposal_id: int) -> None:
        key = (member, proposal_id)
        if key in self.votes:
            return
        self._record("vote", key)
        self.votes.add(key)

    def put_proposal(self, proposal: Proposal) -> None:
        """Store a newly created proposal."""
        self._record("proposal", proposal.id, self.proposals.get(proposal.id))
        self.proposals[proposal.id] = proposal

    def touch(self, proposal_id: int) -> Proposal:
        """
        Journal the stored proposal before it is mutated in place, and
        return it.
        """
        proposal = self.proposals[proposal_id]
        if self._journal is not None:
            saved = copy.copy(proposal)
            saved._history = list(proposal._history)
            self._journal.append(("proposal", proposal_id, saved))
        return proposal

    # ── Checkpoints ───────────────────────────────────────────────────

    @property
    def in_checkpoint(self) -> bool:
        return self._journal is not None

    def checkpoint(self) -> Checkpoint:
        if self._journal is not None:
            raise RuntimeError("A checkpoint is already open")
        self._journal = []
        return Checkpoint(self.to_pass, self.locked, self.proposal_count)

    def commit(self) -> None:
        self._journal = None

    def rollback(self, checkpoint: Checkpoint) -> None:
        """Undo everything recorded since *checkpoint* and close the journal."""
        journal, self._journal = self._journal or [], None
        for entry in reversed(journal):
            kind = entry[0]
            if kind == "member":
                del self.members[entry[1]]
            elif kind == "vote":
                self.votes.discard(entry[1])
            else:
                _, proposal_id, saved = entry
                if saved is None:
                    del self.proposals[proposal_id]
                else:
                    self.proposals[proposal_id] = saved
        self.to_pass = checkpoint.to_pass
        self.locked = checkpoint.locked
        self.proposal_count = checkpoint.proposal_count
