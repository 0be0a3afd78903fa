"""
Governance Events

Domain events exposed to external observers and indexers, and the EventBus
that records and fans them out.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Union

from ..logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class NewProposal:
    """A proposal was created and its amount locked."""
    receiver: str
    amount: int
    proposal_number: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "NewProposal",
            "receiver": self.receiver,
            "amount": self.amount,
            "proposalNumber": self.proposal_number,
        }


@dataclass(frozen=True)
class VoteProposal:
    """A member's vote was recorded."""
    proposal: int
    member: str
    vote: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "VoteProposal",
            "proposal": self.proposal,
            "member": self.member,
            "vote": self.vote,
        }


@dataclass(frozen=True)
class ExecuteProposal:
    """A proposal reached quorum with team approval and was paid out."""
    receiver: str
    amount: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "ExecuteProposal",
            "receiver": self.receiver,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class DeleteProposal:
    """A proposal was vetoed or deleted after expiry; its amount is unlocked."""
    proposal_number: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "DeleteProposal",
            "proposalNumber": self.proposal_number,
        }


@dataclass(frozen=True)
class Withdraw:
    """A team member withdrew unlocked funds."""
    to: str
    amount: int

    def to_dict(self) -> Dict[str, Any]:
        return {"event": "Withdraw", "to": self.to, "amount": self.amount}


@dataclass(frozen=True)
class AddCommunityMember:
    member: str
    to_pass: int

    def to_dict(self) -> Dict[str, Any]:
        return {"event": "AddCommunityMember", "member": self.member, "toPass": self.to_pass}


GovernanceEvent = Union[
    NewProposal, VoteProposal, ExecuteProposal, DeleteProposal, Withdraw, AddCommunityMember
]

Observer = Callable[[GovernanceEvent], None]


class EventBus:
    """
    Ordered event history plus subscriber fan-out.

    Observers are called synchronously, in subscription order, after the
    call that produced the event has committed. The whole batch is recorded
    before any observer runs, and an observer that raises is logged and
    skipped: the call it observes has already taken effect.
    """

    def __init__(self):
        self._history: List[GovernanceEvent] = []
        self._observers: List[Observer] = []

    def subscribe(self, observer: Observer) -> None:
        self._observers.append(observer)

    def unsubscribe(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def publish(self, events: List[GovernanceEvent]) -> None:
        self._history.extend(events)
        observers = list(self._observers)
        for event in events:
            logger.debug(f"Event: {event.to_dict()}")
            for observer in observers:
                try:
                    observer(event)
                except Exception:
                    logger.exception(f"Observer {observer!r} failed on {type(event).__name__}")

    @property
    def history(self) -> List[GovernanceEvent]:
        return list(self._history)

    def __len__(self) -> int:
        return len(self._history)
