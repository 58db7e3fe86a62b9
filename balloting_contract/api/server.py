import logging
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Path, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, Field

from balloting_contract.api import config
from balloting_contract.api.util import (
    InvalidRequest,
    InvalidSignature,
    action_message,
    check_action,
    parse_identity,
    parse_optional_identity,
    recover_signer,
)
from balloting_contract.engine import ACTIONS, BallotingEngine
from balloting_contract.errors import BallotError, Unauthorized
from balloting_contract.offchain.util import identity_from_string
from balloting_contract.utils import setup_logging

# logger setup
_LOGGER = logging.getLogger(__name__)


app = FastAPI(
    default_response_class=ORJSONResponse,
    title="Balloting API.",
    description="The Balloting API exposes a membership ballot: registration, nomination, voting and the election result.",
    version="0.0.1",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_ENGINE: Optional[BallotingEngine] = None


def get_engine() -> BallotingEngine:
    """
    The ballot served by this process, deployed on first use by the configured admin
    """
    global _ENGINE
    if _ENGINE is None:
        if not config.ballot_admin:
            raise RuntimeError("No ballot admin configured (set BALLOT_ADMIN)")
        _ENGINE = BallotingEngine(identity_from_string(config.ballot_admin))
    return _ENGINE


def add_cachecontrol(response: ORJSONResponse, max_age: int, directive: str = "public"):
    # see https://developer.mozilla.org/en-US/docs/Web/HTTP/Headers/Cache-Control
    response.headers["Cache-Control"] = f"{directive}, max-age={max_age}"
    return response


@app.exception_handler(BallotError)
def ballot_error_handler(request: Request, exc: BallotError):
    status_code = 403 if isinstance(exc, Unauthorized) else 409
    return ORJSONResponse(
        {"error": exc.kind, "detail": exc.reason}, status_code=status_code
    )


@app.exception_handler(InvalidSignature)
def invalid_signature_handler(request: Request, exc: InvalidSignature):
    return ORJSONResponse({"error": "InvalidSignature", "detail": str(exc)}, status_code=400)


@app.exception_handler(InvalidRequest)
def invalid_request_handler(request: Request, exc: InvalidRequest):
    return ORJSONResponse({"error": "InvalidRequest", "detail": str(exc)}, status_code=400)


#################################################################################################
#                                            Endpoints                                          #
#################################################################################################

IdentityPath = Path(
    description="Account address",
    examples=["0x5B38Da6a701c568545dCfcB03FcB875f56beddC4"],
)


class ActionRequest(BaseModel):
    action: str = Field(description="One of " + ", ".join(ACTIONS))
    target: Optional[str] = Field(
        default=None, description="Account the action refers to, if any"
    )
    signature: str = Field(
        description="Signature of '<admin>:<action>:<target>' by the caller"
    )


@app.get("/api/v1/health")
def health():
    return ORJSONResponse({"status": "ok"})


@app.get("/api/v1/ballot/admin")
def ballot_admin(engine: BallotingEngine = Depends(get_engine)):
    """
    Get the admin of the ballot
    """
    return add_cachecontrol(ORJSONResponse({"admin": engine.admin}), 3600)


@app.get("/api/v1/ballot/members")
def members(engine: BallotingEngine = Depends(get_engine)):
    """
    Get all registered members in order of registration
    """
    return ORJSONResponse(list(engine.get_members()))


@app.get("/api/v1/ballot/members/{identity}")
def member(identity: str = IdentityPath, engine: BallotingEngine = Depends(get_engine)):
    """
    Get the registration and voting status of an account
    """
    identity = parse_identity(identity)
    return ORJSONResponse(
        {
            "identity": identity,
            "registered": engine.is_member(identity),
            "voted": engine.has_voted(identity),
        }
    )


@app.get("/api/v1/ballot/nominees")
def nominees(engine: BallotingEngine = Depends(get_engine)):
    """
    Get all nominees in order of nomination
    """
    return ORJSONResponse(list(engine.get_nominees()))


@app.get("/api/v1/ballot/votes/{identity}")
def votes(identity: str = IdentityPath, engine: BallotingEngine = Depends(get_engine)):
    """
    Get the number of votes of a nominee
    """
    identity = parse_identity(identity)
    return ORJSONResponse({"nominee": identity, "votes": engine.get_votes(identity)})


@app.get("/api/v1/ballot/session")
def session(engine: BallotingEngine = Depends(get_engine)):
    """
    Get whether voting is active and the winner of the election, if determined
    """
    return ORJSONResponse(
        {
            "voting_active": engine.voting_active,
            "voting_ended": engine.state.voting_ended,
            "winner": engine.winner,
        }
    )


@app.post("/api/v1/ballot/actions")
def submit_action(
    request: ActionRequest, engine: BallotingEngine = Depends(get_engine)
):
    """
    Submit a signed action. The caller is the account that signed the request.
    """
    target = parse_optional_identity(request.target)
    check_action(request.action, target)
    caller = recover_signer(
        action_message(engine.admin, request.action, target), request.signature
    )
    _LOGGER.info(f"Action {request.action} from {caller}")
    engine.execute(request.action, caller, target)
    return session(engine)


if __name__ == "__main__":
    setup_logging()
    uvicorn.run(app, host=config.api_host, port=config.api_port)
