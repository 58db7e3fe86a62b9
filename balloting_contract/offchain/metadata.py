"""
Generation of NFT metadata.

All records are kept in one JSON array on disk, a record is identified by its name.
"""
import json
import logging
from pathlib import Path
from typing import List, Union

from balloting_contract.offchain.util import ipfs_uri
from balloting_contract.utils import METADATA_FILE

_LOGGER = logging.getLogger(__name__)


class MetadataError(Exception):
    pass


def load_metadata(metadata_file: Path = METADATA_FILE) -> List[dict]:
    """
    Load the metadata collection, a missing file is an empty collection
    """
    metadata_file = Path(metadata_file)
    if not metadata_file.exists():
        return []
    try:
        metadata = json.loads(metadata_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise MetadataError(f"Error reading metadata file {metadata_file}: {e}") from e
    if not isinstance(metadata, list):
        raise MetadataError(f"Metadata file {metadata_file} does not hold a list")
    return metadata


def save_metadata(metadata: List[dict], metadata_file: Path = METADATA_FILE) -> None:
    metadata_file = Path(metadata_file)
    metadata_file.parent.mkdir(parents=True, exist_ok=True)
    metadata_file.write_text(json.dumps(metadata, indent=2), encoding="utf-8")
    _LOGGER.info(f"Metadata saved to {metadata_file}")


def build_metadata(
    name: str,
    description: str,
    image_cid: str,
    trait_type: str,
    value: Union[str, int, float],
) -> dict:
    return {
        "name": name,
        "description": description,
        "image": ipfs_uri(image_cid),
        "attributes": [
            {
                "trait_type": trait_type,
                "value": value,
            }
        ],
    }


def generate_metadata(
    name: str,
    description: str,
    image_cid: str,
    trait_type: str,
    value: Union[str, int, float],
    metadata_file: Path = METADATA_FILE,
) -> Path:
    """
    Add a metadata record to the collection unless one with the same name exists.
    :return: the path of the metadata collection
    """
    metadata_file = Path(metadata_file)
    metadata = load_metadata(metadata_file)
    if any(m.get("name") == name for m in metadata):
        _LOGGER.info(f'Metadata with name "{name}" already exists. Skipping addition.')
        return metadata_file
    metadata.append(build_metadata(name, description, image_cid, trait_type, value))
    save_metadata(metadata, metadata_file)
    return metadata_file
