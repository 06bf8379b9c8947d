"""
Credential Service - finds and parses the nearest credentials file.

Uses the same upward walk as descriptor resolution, over the credentials
filename instead of the descriptor filename.
"""
import json
import logging
from pathlib import Path
from typing import Optional

from ..exceptions import CredentialError, FilesystemError
from ..models import CREDENTIALS_FILENAME, Credentials
from ..protocols import IFilesystem
from ..walker import search_upward
from .filesystem import LocalFilesystem

logger = logging.getLogger(__name__)


class FileCredentialResolver:
    """
    Implements ICredentialResolver over a JSON credentials file.

    Expected document:
        {"username": "...", "api_key": "...", "region": "DFW", "endpoint": "https://..."}
    """

    def __init__(self, fs: Optional[IFilesystem] = None, filename: str = CREDENTIALS_FILENAME):
        self._fs = fs or LocalFilesystem()
        self._filename = filename

    async def resolve(self, start: Path) -> Credentials:
        try:
            hit = await search_upward(self._fs, start, self._filename)
            if hit is None:
                raise CredentialError(f"no {self._filename} found at or above {start}")
            _, file = hit
            text = await self._fs.read_text(file)
        except FilesystemError as e:
            raise CredentialError(f"could not look up credentials from {start}: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CredentialError(f"could not parse {file}: {e}") from e
        if not isinstance(data, dict):
            raise CredentialError(f"{file}: credentials must be an object")

        missing = [k for k in ("username", "api_key") if not data.get(k)]
        if missing:
            raise CredentialError(f"{file}: missing {', '.join(missing)}")

        logger.debug(f"Using credentials from {file}")
        return Credentials(
            username=data["username"],
            api_key=data["api_key"],
            region=data.get("region"),
            endpoint=data.get("endpoint"),
            source=file,
        )
