"""
Upload all images of a folder to Pinata together with their generated metadata.

For each image the image is pinned, a metadata record pointing to the image CID is added to the
metadata collection, and the updated collection is pinned. A failing image is logged and skipped.
"""
import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from balloting_contract.offchain.metadata import MetadataError, generate_metadata
from balloting_contract.offchain.pinata import PinataClient, PinningError
from balloting_contract.offchain.util import ipfs_uri
from balloting_contract.utils import IMAGES_FOLDER, METADATA_FILE, setup_logging

_LOGGER = logging.getLogger(__name__)


@dataclass
class UploadResult:
    image: Path
    image_cid: str
    metadata_cid: str

    @property
    def token_uri(self) -> str:
        return ipfs_uri(self.metadata_cid)


def upload_image(
    client: PinataClient,
    image_path: Path,
    metadata_file: Path,
    trait_type: str,
    value: str,
) -> UploadResult:
    image_name = image_path.stem
    image_cid = client.pin_file(image_path)
    metadata_path = generate_metadata(
        image_name,
        f"{image_name} description",
        image_cid,
        trait_type,
        value,
        metadata_file,
    )
    metadata_cid = client.pin_file(metadata_path)
    return UploadResult(image_path, image_cid, metadata_cid)


def main(
    images_folder: Path = IMAGES_FOLDER,
    metadata_file: Path = METADATA_FILE,
    trait_type: str = "traitTypeExample",
    value: str = "valueExample",
    client: Optional[PinataClient] = None,
) -> List[UploadResult]:
    images_folder = Path(images_folder)
    image_files = sorted(p for p in images_folder.iterdir() if p.is_file())
    own_client = client is None
    if own_client:
        client = PinataClient()

    results = []
    try:
        for image_path in image_files:
            try:
                result = upload_image(
                    client, image_path, Path(metadata_file), trait_type, value
                )
            except (PinningError, MetadataError, OSError) as e:
                _LOGGER.error(f"Failed to upload {image_path.name}: {e}")
                continue
            _LOGGER.info(f"Metadata IPFS Hash (CID): {result.metadata_cid}")
            _LOGGER.info(f"IPFS Hash (CID): {result.image_cid}")
            _LOGGER.info(f"Token URI: {result.token_uri}")
            results.append(result)
    finally:
        if own_client:
            client.close()
    _LOGGER.info(f"Uploaded {len(results)} of {len(image_files)} images")
    return results


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--images-folder", type=Path, default=IMAGES_FOLDER)
    parser.add_argument("--metadata-file", type=Path, default=METADATA_FILE)
    parser.add_argument("--trait-type", default="traitTypeExample")
    parser.add_argument("--value", default="valueExample")
    args = parser.parse_args()
    setup_logging()
    main(args.images_folder, args.metadata_file, args.trait_type, args.value)
