"""Descriptor Discoverer - every descriptor nested under a root."""
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Union

from .descriptor import parse_descriptor
from .exceptions import CloudSyncError, FilesystemError
from .models import DESCRIPTOR_FILENAME, DiscoveryResult
from .protocols import IFilesystem
from .services.filesystem import LocalFilesystem
from .walker import DEFAULT_WALK_PARALLEL, invoke_callback, search_downward

logger = logging.getLogger(__name__)

DiscoveryVisitor = Callable[[DiscoveryResult], Union[Awaitable[Any], Any]]


def is_descriptor_file(path: Path) -> bool:
    return path.name == DESCRIPTOR_FILENAME


class DescriptorDiscoverer:
    """
    Finds descriptors at every depth, including ones nested inside another
    descriptor's scope. A descriptor that fails to load is reported as a
    failed DiscoveryResult and does not stop discovery of the others.
    """

    def __init__(self, fs: Optional[IFilesystem] = None, max_parallel: int = DEFAULT_WALK_PARALLEL):
        self._fs = fs or LocalFilesystem()
        self._max_parallel = max_parallel

    async def discover_all(
        self,
        root: Path,
        visit: Optional[DiscoveryVisitor] = None,
    ) -> List[DiscoveryResult]:
        """
        Walk root and report each descriptor file.

        Args:
            root: Project root to search
            visit: Optional callback awaited once per descriptor file

        Returns:
            All results sorted by descriptor path.
        """
        results: List[DiscoveryResult] = []

        async def _emit(result: DiscoveryResult) -> None:
            results.append(result)
            if visit is not None:
                await invoke_callback(visit, result)

        async def _handle(file: Path) -> None:
            try:
                descriptor = await parse_descriptor(self._fs, file, file.parent)
            except CloudSyncError as e:
                logger.warning(f"Failed to load descriptor {file}: {e}")
                await _emit(DiscoveryResult(path=file, error=e))
                return
            await _emit(DiscoveryResult(path=file, descriptor=descriptor))

        async def _on_error(directory: Path, error: FilesystemError) -> None:
            logger.warning(f"Could not search {directory}: {error}")
            await _emit(DiscoveryResult(path=directory, error=error))

        await search_downward(
            self._fs,
            root,
            is_descriptor_file,
            _handle,
            on_error=_on_error,
            max_parallel=self._max_parallel,
        )

        logger.info(f"Discovered {len(results)} descriptor(s) under {root}")
        return sorted(results, key=lambda r: str(r.path))
