"""
The ballot contract.

This contract holds the complete state of a single election. The admin that deployed the contract
registers members, registered members nominate other members, and every member casts exactly one vote
while the admin keeps the voting session open. Closing the session determines the winner.

Actions that may be applied to the contract state:
- RegisterMember: admin only, adds a member
- NominateMember: members only, puts another member forward as a candidate
- CastVote: members only, while voting is active, once per member
- StartVoting: admin only, opens the voting session (once)
- EndVoting: admin only, closes the voting session and fixes the winner

The state is never mutated in place. Each action produces a new state, an action that violates a
precondition raises a BallotError and produces nothing.

There is no way to reset the contract, an election is held exactly once.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple, Union

from balloting_contract.errors import (
    AlreadyActive,
    AlreadyNominated,
    AlreadyRegistered,
    AlreadyVoted,
    NotActive,
    NotAMember,
    NotNominated,
    SelfNomination,
    VotingClosed,
    VotingNotActive,
)
from balloting_contract.onchain.util import (
    Identity,
    add_votes_to_index,
    append_unique,
    check_signed_by_admin,
    check_signed_by_member,
    index_of,
)


class SessionState(Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"


@dataclass(frozen=True)
class BallotParams:
    """
    Non-updatable parameters of the ballot, fixed at deployment
    """

    admin: Identity


@dataclass(frozen=True)
class BallotState:
    """
    Tracks members, nominees and the tally of the election

    votes[i] holds the tally of nominees[i].
    """

    params: BallotParams
    members: Tuple[Identity, ...] = ()
    nominees: Tuple[Identity, ...] = ()
    votes: Tuple[int, ...] = ()
    voters: Tuple[Identity, ...] = ()
    session: SessionState = SessionState.INACTIVE
    voting_ended: bool = False
    winner: Optional[Identity] = None

    @property
    def voting_active(self) -> bool:
        return self.session == SessionState.ACTIVE


@dataclass(frozen=True)
class RegisterMember:
    """
    Register a new member
    """

    member: Identity


@dataclass(frozen=True)
class NominateMember:
    """
    Nominate a registered member as candidate
    """

    nominee: Identity


@dataclass(frozen=True)
class CastVote:
    """
    Add the vote of the signer to the tally of a nominee
    """

    nominee: Identity


@dataclass(frozen=True)
class StartVoting:
    pass


@dataclass(frozen=True)
class EndVoting:
    pass


BallotAction = Union[RegisterMember, NominateMember, CastVote, StartVoting, EndVoting]


def initial_ballot_state(admin: Identity) -> BallotState:
    return BallotState(BallotParams(admin))


def compute_winner(
    nominees: Tuple[Identity, ...], votes: Tuple[int, ...]
) -> Optional[Identity]:
    """
    Returns the nominee with the highest tally.
    Nominees are scanned in nomination order and only a strictly higher tally replaces the
    current leader, so ties go to the earliest nomination. No nominees means no winner.
    """
    winner = None
    highest = -1
    for nominee, tally in zip(nominees, votes):
        if tally > highest:
            highest = tally
            winner = nominee
    return winner


def register_member(
    state: BallotState, redeemer: RegisterMember, signer: Identity
) -> BallotState:
    check_signed_by_admin(state.params.admin, signer)
    if redeemer.member in state.members:
        raise AlreadyRegistered()
    return replace(state, members=append_unique(state.members, redeemer.member))


def nominate_member(
    state: BallotState, redeemer: NominateMember, signer: Identity
) -> BallotState:
    nominee = redeemer.nominee
    # the nominee check comes first so that unknown nominees are rejected for any caller
    if nominee not in state.members:
        raise NotAMember()
    check_signed_by_member(state.members, signer)
    if nominee == signer:
        raise SelfNomination()
    if nominee in state.nominees:
        raise AlreadyNominated()
    return replace(
        state,
        nominees=append_unique(state.nominees, nominee),
        votes=state.votes + (0,),
    )


def cast_vote(state: BallotState, redeemer: CastVote, signer: Identity) -> BallotState:
    if not state.voting_active:
        raise VotingNotActive()
    check_signed_by_member(state.members, signer)
    if signer in state.voters:
        raise AlreadyVoted()
    nominee_index = index_of(state.nominees, redeemer.nominee)
    if nominee_index is None:
        raise NotNominated()
    # tally and voter flag are updated in the same new state
    return replace(
        state,
        votes=add_votes_to_index(state.votes, nominee_index, 1),
        voters=append_unique(state.voters, signer),
    )


def start_voting(
    state: BallotState, redeemer: StartVoting, signer: Identity
) -> BallotState:
    check_signed_by_admin(state.params.admin, signer)
    if state.voting_active:
        raise AlreadyActive()
    if state.voting_ended:
        raise VotingClosed()
    return replace(state, session=SessionState.ACTIVE)


def end_voting(state: BallotState, redeemer: EndVoting, signer: Identity) -> BallotState:
    check_signed_by_admin(state.params.admin, signer)
    if not state.voting_active:
        raise NotActive()
    return replace(
        state,
        session=SessionState.INACTIVE,
        voting_ended=True,
        winner=compute_winner(state.nominees, state.votes),
    )


def construct_new_ballot_state(
    previous_state: BallotState, redeemer: BallotAction, signer: Identity
) -> BallotState:
    """
    Construct the new ballot state based on the previous state, the action and the signer of the call.
    Raises a BallotError if the action is not allowed, previous_state is never modified.
    """
    if isinstance(redeemer, RegisterMember):
        return register_member(previous_state, redeemer, signer)
    elif isinstance(redeemer, NominateMember):
        return nominate_member(previous_state, redeemer, signer)
    elif isinstance(redeemer, CastVote):
        return cast_vote(previous_state, redeemer, signer)
    elif isinstance(redeemer, StartVoting):
        return start_voting(previous_state, redeemer, signer)
    elif isinstance(redeemer, EndVoting):
        return end_voting(previous_state, redeemer, signer)
    raise TypeError(f"Invalid redeemer {redeemer!r}")
