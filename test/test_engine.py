import threading

import pytest

from balloting_contract.engine import BallotingEngine
from balloting_contract.errors import (
    AlreadyActive,
    AlreadyNominated,
    AlreadyRegistered,
    AlreadyVoted,
    BallotError,
    NotActive,
    NotAMember,
    NotNominated,
    SelfNomination,
    Unauthorized,
    VotingClosed,
    VotingNotActive,
)


def test_deployment(engine, admin):
    assert engine.admin == admin
    assert engine.get_members() == ()
    assert engine.get_nominees() == ()
    assert not engine.voting_active
    assert engine.winner is None


def test_admin_registers_members(engine, admin, members):
    assert not engine.is_member(members[0])
    engine.register_member(admin, members[0])
    assert engine.is_member(members[0])
    assert engine.get_members() == (members[0],)


def test_members_keep_registration_order(registered_engine, members):
    assert registered_engine.get_members() == tuple(members)


def test_non_admin_cannot_register(engine, admin, members):
    engine.register_member(admin, members[0])
    with pytest.raises(Unauthorized):
        engine.register_member(members[0], members[1])
    assert engine.get_members() == (members[0],)


def test_register_twice(engine, admin, members):
    engine.register_member(admin, members[0])
    before = engine.state
    with pytest.raises(AlreadyRegistered) as exc_info:
        engine.register_member(admin, members[0])
    assert exc_info.value.reason == "Member is already registered"
    assert engine.state == before


def test_nomination(registered_engine, members):
    m1, m2, m3 = members
    registered_engine.nominate_member(m1, m2)
    assert registered_engine.get_nominees() == (m2,)
    assert registered_engine.get_votes(m2) == 0


def test_cannot_nominate_oneself(registered_engine, members):
    with pytest.raises(SelfNomination):
        registered_engine.nominate_member(members[0], members[0])


def test_cannot_nominate_non_member(registered_engine, members, outsider):
    with pytest.raises(NotAMember):
        registered_engine.nominate_member(members[0], outsider)
    # also when the nominator is not registered
    with pytest.raises(NotAMember):
        registered_engine.nominate_member(outsider, outsider)


def test_non_member_cannot_nominate(registered_engine, members, outsider):
    with pytest.raises(Unauthorized):
        registered_engine.nominate_member(outsider, members[0])
    assert registered_engine.get_nominees() == ()


def test_cannot_nominate_twice(registered_engine, members):
    m1, m2, m3 = members
    registered_engine.nominate_member(m1, m2)
    with pytest.raises(AlreadyNominated):
        registered_engine.nominate_member(m3, m2)
    assert registered_engine.get_nominees() == (m2,)


@pytest.fixture
def voting_engine(registered_engine, admin, members):
    m1, m2, m3 = members
    registered_engine.nominate_member(m1, m2)
    registered_engine.nominate_member(m3, m1)
    registered_engine.start_voting(admin)
    return registered_engine


def test_admin_can_start_voting(voting_engine):
    assert voting_engine.voting_active


def test_member_votes(voting_engine, members):
    m1, m2, m3 = members
    voting_engine.vote(m1, m2)
    assert voting_engine.get_votes(m2) == 1
    assert voting_engine.has_voted(m1)
    assert not voting_engine.has_voted(m2)


def test_cannot_vote_when_inactive(registered_engine, members):
    m1, m2, m3 = members
    registered_engine.nominate_member(m1, m2)
    with pytest.raises(VotingNotActive):
        registered_engine.vote(m1, m2)


def test_cannot_vote_after_end(voting_engine, admin, members):
    voting_engine.end_voting(admin)
    with pytest.raises(VotingNotActive):
        voting_engine.vote(members[0], members[1])


def test_cannot_vote_twice(voting_engine, members):
    m1, m2, m3 = members
    voting_engine.vote(m1, m2)
    with pytest.raises(AlreadyVoted):
        voting_engine.vote(m1, m2)
    with pytest.raises(AlreadyVoted):
        voting_engine.vote(m1, m1)
    assert voting_engine.get_votes(m2) == 1
    assert voting_engine.get_votes(m1) == 0


def test_cannot_vote_for_non_nominee(voting_engine, members):
    m1, m2, m3 = members
    with pytest.raises(NotNominated):
        voting_engine.vote(m1, m3)
    assert not voting_engine.has_voted(m1)


def test_non_member_cannot_vote(voting_engine, members, outsider):
    with pytest.raises(Unauthorized):
        voting_engine.vote(outsider, members[1])


def test_nominee_may_vote_for_other_nominee(voting_engine, members):
    m1, m2, m3 = members
    voting_engine.vote(m2, m1)
    assert voting_engine.get_votes(m1) == 1


def test_votes_of_unknown_identity(voting_engine, outsider):
    assert voting_engine.get_votes(outsider) == 0


def test_session_is_admin_only(voting_engine, members):
    with pytest.raises(Unauthorized):
        voting_engine.end_voting(members[0])
    assert voting_engine.voting_active


def test_only_admin_starts_voting(registered_engine, members, outsider):
    for caller in (members[0], outsider):
        with pytest.raises(Unauthorized):
            registered_engine.start_voting(caller)
    assert not registered_engine.voting_active


def test_cannot_start_twice(voting_engine, admin):
    with pytest.raises(AlreadyActive):
        voting_engine.start_voting(admin)


def test_cannot_end_inactive(registered_engine, admin):
    with pytest.raises(NotActive):
        registered_engine.end_voting(admin)


def test_election_is_held_once(voting_engine, admin):
    voting_engine.end_voting(admin)
    with pytest.raises(VotingClosed):
        voting_engine.start_voting(admin)
    assert not voting_engine.voting_active


def test_scenario_winner_with_most_votes(voting_engine, admin, members):
    m1, m2, m3 = members
    voting_engine.vote(m1, m2)
    voting_engine.vote(m2, m1)
    voting_engine.vote(m3, m2)
    assert voting_engine.end_voting(admin) == m2
    assert voting_engine.winner == m2
    assert voting_engine.get_votes(m2) == 2
    assert voting_engine.get_votes(m1) == 1
    assert not voting_engine.voting_active


def test_scenario_tie_goes_to_first_nominee(engine, admin, members):
    m1, m2, _ = members
    engine.register_member(admin, m1)
    engine.register_member(admin, m2)
    engine.nominate_member(m1, m2)
    engine.nominate_member(m2, m1)
    engine.start_voting(admin)
    engine.vote(m1, m2)
    engine.vote(m2, m1)
    engine.end_voting(admin)
    assert engine.winner == m2


def test_first_nominee_wins_without_votes(voting_engine, admin, members):
    # nominees are m2 then m1, nobody voted
    assert voting_engine.end_voting(admin) == members[1]
    assert voting_engine.get_votes(members[1]) == 0


def test_no_nominees_no_winner(engine, admin):
    engine.start_voting(admin)
    assert engine.end_voting(admin) is None
    assert engine.winner is None


def test_scenario_non_admin_registration(engine, admin, members, outsider):
    engine.register_member(admin, members[0])
    for caller in (members[0], outsider):
        with pytest.raises(Unauthorized):
            engine.register_member(caller, members[1])
    assert len(engine.get_members()) == 1


def test_execute_by_name(engine, admin, members):
    engine.execute("register_member", admin, members[0])
    engine.execute("start_voting", admin)
    assert engine.is_member(members[0])
    assert engine.voting_active
    with pytest.raises(ValueError):
        engine.execute("reset", admin)
    with pytest.raises(ValueError):
        engine.execute("vote", members[0])


def test_identities_are_opaque():
    engine = BallotingEngine("admin")
    engine.register_member("admin", "alice")
    engine.register_member("admin", "bob")
    engine.nominate_member("alice", "bob")
    engine.start_voting("admin")
    engine.vote("alice", "bob")
    engine.end_voting("admin")
    assert engine.winner == "bob"


def test_concurrent_votes_are_serialised(admin):
    engine = BallotingEngine(admin)
    voters = [f"voter{i}" for i in range(50)]
    engine.register_member(admin, "candidate")
    for v in voters:
        engine.register_member(admin, v)
    engine.nominate_member(voters[0], "candidate")
    engine.start_voting(admin)
    errors = []

    def cast(voter):
        # every voter tries twice, only one of the two calls may count
        for _ in range(2):
            try:
                engine.vote(voter, "candidate")
            except BallotError as e:
                errors.append(e)

    threads = [threading.Thread(target=cast, args=(v,)) for v in voters]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert engine.get_votes("candidate") == len(voters)
    assert len(errors) == len(voters)
    assert all(isinstance(e, AlreadyVoted) for e in errors)
