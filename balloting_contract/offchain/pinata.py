"""
Client for the Pinata pinning service.
"""
import json
import logging
from pathlib import Path
from typing import Optional

import httpx

from balloting_contract.utils import PINATA_API_URL, PINATA_JWT, PINATA_TIMEOUT

_LOGGER = logging.getLogger(__name__)

PIN_FILE_ENDPOINT = "/pinning/pinFileToIPFS"


class PinningError(Exception):
    pass


class PinataClient:
    """
    Uploads files to Pinata and returns their content identifiers
    """

    def __init__(
        self,
        jwt: str = PINATA_JWT,
        api_url: str = PINATA_API_URL,
        timeout: float = PINATA_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not jwt:
            raise PinningError("No Pinata JWT configured (set PINATA_JWT)")
        self._client = httpx.Client(
            base_url=api_url,
            headers={"Authorization": f"Bearer {jwt}"},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "PinataClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def pin_file(self, path: Path, name: Optional[str] = None) -> str:
        """
        Upload a file and pin it.
        :return: the CID of the pinned file
        """
        path = Path(path)
        pin_name = name or path.name
        try:
            with path.open("rb") as fp:
                resp = self._client.post(
                    PIN_FILE_ENDPOINT,
                    files={"file": (path.name, fp)},
                    data={"pinataMetadata": json.dumps({"name": pin_name})},
                )
            resp.raise_for_status()
            cid = resp.json()["IpfsHash"]
        except OSError as e:
            raise PinningError(f"Could not read {path}: {e}") from e
        except httpx.HTTPStatusError as e:
            raise PinningError(
                f"Pinata rejected {path.name} with status {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise PinningError(f"Request to Pinata failed for {path.name}: {e}") from e
        except (ValueError, KeyError) as e:
            raise PinningError(f"Unexpected Pinata response for {path.name}") from e
        _LOGGER.debug(f"Pinned {path} as {cid}")
        return cid
