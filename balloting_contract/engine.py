"""
The balloting engine.

Holds the state of one deployed ballot contract and applies calls to it one at a time,
the way a ledger executes transactions against a contract. Every mutating call runs under a
single lock and either replaces the state with the next state or raises a BallotError and
leaves it untouched.
"""
import logging
import threading
from typing import Callable, Dict, Optional, Tuple

from balloting_contract.errors import BallotError
from balloting_contract.onchain.ballot.ballot import (
    BallotAction,
    BallotState,
    CastVote,
    EndVoting,
    NominateMember,
    RegisterMember,
    StartVoting,
    construct_new_ballot_state,
    initial_ballot_state,
)
from balloting_contract.onchain.util import Identity, index_of

_LOGGER = logging.getLogger(__name__)


# action name -> (needs a target, redeemer factory)
ACTIONS: Dict[str, Tuple[bool, Callable[..., BallotAction]]] = {
    "register_member": (True, RegisterMember),
    "nominate_member": (True, NominateMember),
    "vote": (True, CastVote),
    "start_voting": (False, StartVoting),
    "end_voting": (False, EndVoting),
}


class BallotingEngine:
    def __init__(self, admin: Identity):
        self._lock = threading.RLock()
        self._state = initial_ballot_state(admin)
        _LOGGER.info(f"Ballot deployed with admin {admin}")

    def apply(self, redeemer: BallotAction, signer: Identity) -> BallotState:
        """
        Apply an action signed by signer and return the new state.
        """
        with self._lock:
            try:
                next_state = construct_new_ballot_state(self._state, redeemer, signer)
            except BallotError as e:
                _LOGGER.info(f"Rejected {redeemer} from {signer}: {e.kind} ({e.reason})")
                raise
            self._state = next_state
        _LOGGER.debug(f"Applied {redeemer} from {signer}")
        return next_state

    def execute(
        self, action: str, caller: Identity, target: Optional[Identity] = None
    ) -> BallotState:
        """
        Apply an action given by its name, as used by the CLI and the HTTP API.
        """
        try:
            needs_target, redeemer_cls = ACTIONS[action]
        except KeyError:
            raise ValueError(f"Unknown action {action!r}") from None
        if needs_target and target is None:
            raise ValueError(f"Action {action!r} requires a target")
        redeemer = redeemer_cls(target) if needs_target else redeemer_cls()
        return self.apply(redeemer, caller)

    # member registry

    def register_member(self, caller: Identity, identity: Identity) -> None:
        self.apply(RegisterMember(identity), caller)

    def get_members(self) -> Tuple[Identity, ...]:
        return self._state.members

    def is_member(self, identity: Identity) -> bool:
        return identity in self._state.members

    # nomination registry

    def nominate_member(self, nominator: Identity, nominee: Identity) -> None:
        self.apply(NominateMember(nominee), nominator)

    def get_nominees(self) -> Tuple[Identity, ...]:
        return self._state.nominees

    # vote tally

    def vote(self, voter: Identity, nominee: Identity) -> None:
        self.apply(CastVote(nominee), voter)

    def get_votes(self, nominee: Identity) -> int:
        state = self._state
        index = index_of(state.nominees, nominee)
        if index is None:
            return 0
        return state.votes[index]

    def has_voted(self, identity: Identity) -> bool:
        return identity in self._state.voters

    # session controller

    def start_voting(self, caller: Identity) -> None:
        self.apply(StartVoting(), caller)
        _LOGGER.info("Voting started")

    def end_voting(self, caller: Identity) -> Optional[Identity]:
        state = self.apply(EndVoting(), caller)
        if state.winner is None:
            _LOGGER.warning("Voting ended without nominees, no winner")
        else:
            _LOGGER.info(f"Voting ended, winner is {state.winner}")
        return state.winner

    @property
    def voting_active(self) -> bool:
        return self._state.voting_active

    @property
    def winner(self) -> Optional[Identity]:
        return self._state.winner

    @property
    def admin(self) -> Identity:
        return self._state.params.admin

    @property
    def state(self) -> BallotState:
        """
        Immutable snapshot of the complete contract state
        """
        return self._state
