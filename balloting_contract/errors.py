"""
Rejections raised by the ballot contract.

Every rejection aborts the whole call, the contract state is left as it was before the call.
The reason strings are the revert messages of the deployed contract.
"""
from typing import Dict, Optional, Type


class BallotError(Exception):
    """
    Base class of all rejected ballot operations
    """

    reason = "Operation rejected"

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason or type(self).reason
        super().__init__(self.reason)

    @property
    def kind(self) -> str:
        return type(self).__name__


class Unauthorized(BallotError):
    reason = "Only the admin can perform this action"


class AlreadyRegistered(BallotError):
    reason = "Member is already registered"


class NotAMember(BallotError):
    reason = "Nominee must be a registered member"


class SelfNomination(BallotError):
    reason = "You cannot nominate yourself"


class AlreadyNominated(BallotError):
    reason = "Nominee is already nominated"


class VotingNotActive(BallotError):
    reason = "Voting is not active"


class AlreadyVoted(BallotError):
    reason = "You have already voted"


class NotNominated(BallotError):
    reason = "You can only vote for nominated members"


class AlreadyActive(BallotError):
    reason = "Voting is already active"


class NotActive(BallotError):
    reason = "Voting is not active"


class VotingClosed(BallotError):
    reason = "Voting has already ended"


ERRORS_BY_KIND: Dict[str, Type[BallotError]] = {
    cls.__name__: cls
    for cls in (
        Unauthorized,
        AlreadyRegistered,
        NotAMember,
        SelfNomination,
        AlreadyNominated,
        VotingNotActive,
        AlreadyVoted,
        NotNominated,
        AlreadyActive,
        NotActive,
        VotingClosed,
    )
}
