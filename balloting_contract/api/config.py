import os

from ..utils import BALLOT_ADMIN

api_host = os.environ.get("API_HOST", "127.0.0.1")
api_port = int(os.environ.get("API_PORT", "8000"))
cors_origins = [
    o.strip() for o in os.environ.get("API_CORS_ORIGINS", "*").split(",") if o.strip()
]

# the admin of the served ballot, the deployer of the contract
ballot_admin = BALLOT_ADMIN
