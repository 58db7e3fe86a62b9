from typing import Optional

from eth_account import Account
from eth_account.messages import encode_defunct

from ..engine import ACTIONS
from ..offchain.util import identity_from_string
from ..onchain.util import Identity


class InvalidSignature(Exception):
    pass


class InvalidRequest(Exception):
    pass


def parse_identity(address: str) -> Identity:
    try:
        return identity_from_string(address)
    except ValueError as e:
        raise InvalidRequest(str(e)) from e


def parse_optional_identity(address: Optional[str]) -> Optional[Identity]:
    if address is None:
        return None
    return parse_identity(address)


def check_action(action: str, target: Optional[Identity]) -> None:
    """
    Check that action is known and has a target exactly when it needs one
    """
    if action not in ACTIONS:
        raise InvalidRequest(f"Unknown action {action!r}")
    needs_target, _ = ACTIONS[action]
    if needs_target and target is None:
        raise InvalidRequest(f"Action {action!r} requires a target")
    if not needs_target and target is not None:
        raise InvalidRequest(f"Action {action!r} takes no target")


def action_message(admin: Identity, action: str, target: Optional[Identity]) -> str:
    """
    The text a caller signs to submit an action.
    It binds the action to the ballot (by its admin) so signatures can not be reused for another ballot.
    """
    return f"{admin}:{action}:{target or ''}"


def recover_signer(message: str, signature: str) -> Identity:
    """
    Recover the address that signed message as an EIP-191 personal message
    """
    try:
        signer = Account.recover_message(encode_defunct(text=message), signature=signature)
    except Exception as e:
        raise InvalidSignature(f"Invalid signature: {e}") from e
    return identity_from_string(signer)
