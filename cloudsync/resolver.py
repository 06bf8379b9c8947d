"""Descriptor Resolver - nearest governing descriptor for a path."""
import logging
from pathlib import Path
from typing import Optional

from .descriptor import parse_descriptor
from .models import DESCRIPTOR_FILENAME, Descriptor
from .protocols import IFilesystem
from .services.filesystem import LocalFilesystem
from .walker import search_upward

logger = logging.getLogger(__name__)


class DescriptorResolver:
    """
    Resolves the closest descriptor at or above a directory.

    Never searches siblings and never ascends past the filesystem root.
    Absence of a descriptor is a normal outcome and yields None.
    """

    def __init__(self, fs: Optional[IFilesystem] = None):
        self._fs = fs or LocalFilesystem()

    async def nearest_to(self, directory: Path) -> Optional[Descriptor]:
        hit = await search_upward(self._fs, directory, DESCRIPTOR_FILENAME)
        if hit is None:
            logger.debug(f"No descriptor governs {directory}")
            return None
        root, file = hit
        return await parse_descriptor(self._fs, file, root)

    async def nearest_to_file(self, file: Path) -> Optional[Descriptor]:
        real = await self._fs.real_path(file)
        return await self.nearest_to(real.parent)
