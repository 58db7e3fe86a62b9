import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# pinning service
PINATA_JWT = os.environ.get("PINATA_JWT", "")
PINATA_API_URL = os.environ.get("PINATA_API_URL", "https://api.pinata.cloud")
PINATA_TIMEOUT = float(os.environ.get("PINATA_TIMEOUT", "60"))

# metadata generation
METADATA_FILE = Path(os.environ.get("METADATA_FILE", "metadata/metadata.json"))
IMAGES_FOLDER = Path(os.environ.get("IMAGES_FOLDER", "metadata-images"))

# address of the deployer, becomes the admin of the ballot served by the api
BALLOT_ADMIN = os.environ.get("BALLOT_ADMIN")


def setup_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
