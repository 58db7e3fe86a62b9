"""
Replay an election against a freshly deployed ballot.

The election is described by a JSON document:

    {
      "admin": "0x...",
      "calls": [
        {"caller": "0x...", "action": "register_member", "target": "0x..."},
        {"caller": "0x...", "action": "start_voting"},
        ...
      ]
    }

Rejected calls are logged and the replay continues with the next call.
"""
import argparse
import json
import logging
from pathlib import Path

from balloting_contract.engine import BallotingEngine
from balloting_contract.errors import BallotError
from balloting_contract.offchain.util import (
    identity_from_string,
    optional_identity_from_string,
)
from balloting_contract.utils import setup_logging

_LOGGER = logging.getLogger(__name__)


def summary(engine: BallotingEngine) -> dict:
    return {
        "admin": engine.admin,
        "members": list(engine.get_members()),
        "nominees": [
            {"nominee": n, "votes": engine.get_votes(n)} for n in engine.get_nominees()
        ],
        "voting_active": engine.voting_active,
        "winner": engine.winner,
    }


def main(election_file: Path) -> BallotingEngine:
    election = json.loads(Path(election_file).read_text(encoding="utf-8"))
    engine = BallotingEngine(identity_from_string(election["admin"]))
    for i, call in enumerate(election.get("calls", [])):
        action = call.get("action")
        try:
            engine.execute(
                action,
                identity_from_string(call.get("caller")),
                optional_identity_from_string(call.get("target")),
            )
        except BallotError as e:
            _LOGGER.warning(f"Call {i} ({action}) rejected: {e.kind}: {e.reason}")
        except ValueError as e:
            # unknown action, invalid address or missing target
            _LOGGER.warning(f"Call {i} ({action}) is malformed: {e}")
    return engine


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Replay an election from a JSON file")
    parser.add_argument("election_file", type=Path)
    args = parser.parse_args()
    setup_logging()
    print(json.dumps(summary(main(args.election_file)), indent=2))
