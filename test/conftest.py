import pytest
from eth_account import Account

from balloting_contract.engine import BallotingEngine


def account(i: int):
    return Account.from_key(i.to_bytes(32, "big"))


@pytest.fixture
def accounts():
    # deterministic keys 1..5: admin, member1, member2, member3, outsider
    return [account(i) for i in range(1, 6)]


@pytest.fixture
def admin(accounts):
    return accounts[0].address


@pytest.fixture
def members(accounts):
    return [a.address for a in accounts[1:4]]


@pytest.fixture
def outsider(accounts):
    return accounts[4].address


@pytest.fixture
def engine(admin):
    return BallotingEngine(admin)


@pytest.fixture
def registered_engine(engine, admin, members):
    for m in members:
        engine.register_member(admin, m)
    return engine
