"""
Membership Registry

Two disjoint roles share proposal and voting rights:
  - Team members additionally hold veto and treasury-withdrawal rights
  - Community members can only propose and vote

The quorum threshold ``to_pass`` must always exceed the community size, so
community votes alone never reach it, and can never exceed the member count.
"""

from typing import Iterable, List, Sequence

from ..address import is_zero_address, normalize_address, normalize_addresses
from ..constants import (
    ERR_ALREADY_MEMBER,
    ERR_DUPLICATE_MEMBER,
    ERR_MEMBER_ZERO,
    ERR_NEED_HIGHER_TO_PASS,
    ERR_NEED_TEAM_MEMBER,
    ERR_NOT_ENOUGH_MEMBERS,
    ERR_NOT_TEAM_MEMBER,
)
from ..exceptions import InvalidArgument, InvalidConfig, Unauthorized
from ..logger import get_logger
from .state import DAOState, MemberRole

logger = get_logger(__name__)


def validate_initial_members(
    team_members: Sequence[str],
    community_members: Sequence[str],
    to_pass: int,
) -> None:
    """
    Check construction parameters against the membership/quorum rules.

    Raises InvalidConfig on the first violated rule. Addresses must already
    be normalized.
    """
    if len(team_members) == 0:
        raise InvalidConfig(ERR_NEED_TEAM_MEMBER)

    everyone = list(team_members) + list(community_members)
    if len(set(everyone)) != len(everyone):
        raise InvalidConfig(ERR_DUPLICATE_MEMBER)
    if any(is_zero_address(a) for a in everyone):
        raise InvalidConfig(ERR_MEMBER_ZERO)

    if to_pass <= len(community_members):
        raise InvalidConfig(ERR_NEED_HIGHER_TO_PASS)
    if to_pass > len(everyone):
        raise InvalidConfig(ERR_NOT_ENOUGH_MEMBERS)


class MembershipRegistry:
    """Role lookups and membership growth over a DAOState."""

    def __init__(self, state: DAOState):
        self._state = state

    @classmethod
    def bootstrap(
        cls,
        state: DAOState,
        team_members: Iterable[str],
        community_members: Iterable[str],
        to_pass: int,
    ) -> "MembershipRegistry":
        """Validate and install the initial member sets into an empty state."""
        team = normalize_addresses(team_members)
        community = normalize_addresses(community_members)
        validate_initial_members(team, community, to_pass)

        for address in team:
            state.add_member(address, MemberRole.TEAM)
        for address in community:
            state.add_member(address, MemberRole.COMMUNITY)
        state.to_pass = to_pass

        logger.info(
            f"Membership: {len(team)} team, {len(community)} community, toPass={to_pass}"
        )
        return cls(state)

    # ── Lookups ───────────────────────────────────────────────────────

    def role_of(self, address: str):
        return self._state.members.get(normalize_address(address))

    def is_member(self, address: str) -> bool:
        return self.role_of(address) is not None

    def is_team(self, address: str) -> bool:
        return self.role_of(address) == MemberRole.TEAM

    def is_community(self, address: str) -> bool:
        return self.role_of(address) == MemberRole.COMMUNITY

    @property
    def member_count(self) -> int:
        return len(self._state.members)

    @property
    def to_pass(self) -> int:
        return self._state.to_pass

    def team_members(self) -> List[str]:
        return [a for a, r in self._state.members.items() if r == MemberRole.TEAM]

    def community_members(self) -> List[str]:
        return [a for a, r in self._state.members.items() if r == MemberRole.COMMUNITY]

    # ── Guards ────────────────────────────────────────────────────────

    def require_team(self, caller: str) -> None:
        if not self.is_team(caller):
            raise Unauthorized(ERR_NOT_TEAM_MEMBER)

    # ── Growth ────────────────────────────────────────────────────────

    def add_community_member(self, caller: str, member: str) -> str:
        """
        Add *member* to the community set. Team members only.

        Raises the quorum threshold by one along with the member count.
        Returns the normalized address.
        """
        self.require_team(caller)
        member = normalize_address(member)
        if is_zero_address(member):
            raise InvalidArgument(ERR_MEMBER_ZERO)
        if member in self._state.members:
            raise InvalidArgument(ERR_ALREADY_MEMBER)

        self._state.add_member(member, MemberRole.COMMUNITY)
        self._state.to_pass += 1
        logger.info(
            f"Community member added: {member} by {normalize_address(caller)} "
            f"(members={self.member_count}, toPass={self._state.to_pass})"
        )
        return member
