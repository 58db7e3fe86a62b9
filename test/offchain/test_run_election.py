import json

from balloting_contract.offchain.ballot.run_election import main, summary


def test_replay_election(tmp_path, admin, members, outsider):
    m1, m2, m3 = members
    calls = [{"caller": admin, "action": "register_member", "target": m} for m in members]
    calls += [
        # rejected, the replay goes on
        {"caller": outsider, "action": "register_member", "target": outsider},
        {"caller": m1, "action": "nominate_member", "target": m2},
        {"caller": m3, "action": "nominate_member", "target": m1},
        {"caller": admin, "action": "start_voting"},
        {"caller": m1, "action": "vote", "target": m2},
        {"caller": m2, "action": "vote", "target": m1},
        {"caller": m3, "action": "vote", "target": m2.lower()},
        {"caller": m3, "action": "vote", "target": m1},
        {"caller": admin, "action": "end_voting"},
    ]
    election_file = tmp_path / "election.json"
    election_file.write_text(json.dumps({"admin": admin.lower(), "calls": calls}))

    engine = main(election_file)

    res = summary(engine)
    assert res["admin"] == admin
    assert res["members"] == members
    assert res["nominees"] == [
        {"nominee": m2, "votes": 2},
        {"nominee": m1, "votes": 1},
    ]
    assert res["voting_active"] is False
    assert res["winner"] == m2


def test_malformed_calls_are_skipped(tmp_path, admin, members):
    m1, m2, m3 = members
    calls = [
        {"caller": admin, "action": "regster_member", "target": m1},
        {"caller": "not-an-address", "action": "register_member", "target": m1},
        {"caller": admin, "action": "register_member"},
        {"caller": admin, "action": "register_member", "target": m2},
    ]
    election_file = tmp_path / "election.json"
    election_file.write_text(json.dumps({"admin": admin, "calls": calls}))

    engine = main(election_file)

    assert engine.get_members() == (m2,)
