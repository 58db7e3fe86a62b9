from typing import Hashable, Optional, Sequence, Tuple

from balloting_contract.errors import Unauthorized

# Identities are opaque account handles, the contract only compares them
Identity = Hashable

ONLY_ADMIN = "Only the admin can perform this action"
ONLY_MEMBERS = "Only registered members can perform this action"


def check_signed_by_admin(admin: Identity, signer: Identity) -> None:
    """
    Check that the call was made by the admin of the contract
    """
    if signer != admin:
        raise Unauthorized(ONLY_ADMIN)


def check_signed_by_member(members: Sequence[Identity], signer: Identity) -> None:
    """
    Check that the call was made by a registered member
    """
    if signer not in members:
        raise Unauthorized(ONLY_MEMBERS)


def append_unique(items: Tuple[Identity, ...], item: Identity) -> Tuple[Identity, ...]:
    assert item not in items, "Duplicate entry"
    return items + (item,)


def add_votes_to_index(votes: Tuple[int, ...], index: int, weight: int) -> Tuple[int, ...]:
    assert 0 <= index < len(votes), "Invalid index"
    assert weight >= 0, "Weight must be positive"
    return votes[:index] + (votes[index] + weight,) + votes[index + 1 :]


def index_of(items: Sequence[Identity], item: Identity) -> Optional[int]:
    """
    Returns the position of item in items or None if it is not contained
    """
    for i, candidate in enumerate(items):
        if candidate == item:
            return i
    return None
