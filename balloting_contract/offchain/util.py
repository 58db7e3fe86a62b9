from typing import Optional

from eth_utils import is_address, to_checksum_address

from balloting_contract.onchain.util import Identity


def identity_from_string(address: str) -> Identity:
    """
    Normalise an account address to its checksummed form so that
    differently cased spellings of the same account compare equal
    """
    if not isinstance(address, str) or not is_address(address):
        raise ValueError(f"Invalid account address {address!r}")
    return to_checksum_address(address)


def optional_identity_from_string(address: Optional[str]) -> Optional[Identity]:
    if address is None:
        return None
    return identity_from_string(address)


def ipfs_uri(cid: str) -> str:
    return f"ipfs://{cid}"
