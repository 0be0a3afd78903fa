"""
GrantsDAO Address Helpers

Members, receivers and the DAO itself are identified by Ethereum-style
addresses. Every address entering the engine is normalized to its EIP-55
checksum form so lookups do not depend on the caller's hex casing.
"""

from typing import Iterable, List

from eth_utils import is_address, to_checksum_address

from .constants import ERR_INVALID_ADDRESS, ZERO_ADDRESS
from .exceptions import InvalidArgument


def normalize_address(address: str) -> str:
    """
    Return the checksum form of *address*.

    Raises InvalidArgument if *address* is not a 20-byte hex address.
    """
    if not isinstance(address, str) or not is_address(address):
        raise InvalidArgument(ERR_INVALID_ADDRESS)
    return to_checksum_address(address)


def normalize_addresses(addresses: Iterable[str]) -> List[str]:
    return [normalize_address(a) for a in addresses]


def is_zero_address(address: str) -> bool:
    """True for the null identity (0x000…000)."""
    return address.lower() == ZERO_ADDRESS
