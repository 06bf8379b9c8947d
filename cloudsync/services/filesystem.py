"""
Filesystem Service - local disk implementation of IFilesystem.

Blocking calls run in the default thread pool so the event loop never stalls.
"""
import asyncio
import logging
import os
from pathlib import Path
from typing import List

from ..exceptions import FilesystemError

logger = logging.getLogger(__name__)


class LocalFilesystem:
    """
    pathlib-backed filesystem abstraction.

    Every OSError is re-raised as FilesystemError carrying the offending path.
    """

    def __init__(self, encoding: str = "utf-8"):
        self._encoding = encoding

    async def list_entries(self, directory: Path) -> List[Path]:
        def _scan():
            with os.scandir(directory) as it:
                return [Path(entry.path) for entry in it]

        try:
            return await asyncio.to_thread(_scan)
        except OSError as e:
            raise FilesystemError(Path(directory), e) from e

    async def is_file(self, path: Path) -> bool:
        return await asyncio.to_thread(Path(path).is_file)

    async def is_dir(self, path: Path) -> bool:
        return await asyncio.to_thread(Path(path).is_dir)

    async def real_path(self, path: Path) -> Path:
        try:
            return await asyncio.to_thread(Path(path).resolve, True)
        except (OSError, RuntimeError) as e:
            # RuntimeError: symlink loop on older interpreters
            raise FilesystemError(Path(path), e) from e

    async def read_text(self, path: Path) -> str:
        try:
            return await asyncio.to_thread(Path(path).read_text, encoding=self._encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise FilesystemError(Path(path), e) from e
