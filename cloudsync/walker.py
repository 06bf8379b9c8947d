"""
Filesystem Walker - generic upward and downward search.

Upward search is strictly sequential, one level at a time, first hit wins.
Downward search fans out over sibling subdirectories with a bounded number
of in-flight directory listings and skips directories already entered
(by real path), so symlink cycles terminate.
"""
import asyncio
import inspect
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Set, Tuple, Union

from .exceptions import FilesystemError
from .protocols import IFilesystem

logger = logging.getLogger(__name__)

Predicate = Callable[[Path], bool]
Visitor = Callable[[Path], Union[Awaitable[Any], Any]]
ErrorHandler = Callable[[Path, FilesystemError], Union[Awaitable[Any], Any]]

DEFAULT_WALK_PARALLEL = 8


async def invoke_callback(callback: Callable, *args) -> Any:
    """Invoke a sync or async callback."""
    result = callback(*args)
    if inspect.isawaitable(result):
        return await result
    return result


async def search_upward(
    fs: IFilesystem,
    start: Path,
    target: str,
) -> Optional[Tuple[Path, Path]]:
    """
    Find the nearest file named target in start or one of its ancestors.

    Args:
        fs: Filesystem abstraction
        start: Directory to start from
        target: Base name to look for

    Returns:
        (directory, file) for the closest match, or None once the
        filesystem root has been checked without a hit.

    Raises:
        FilesystemError: listing failed at any level; the search stops there.
    """
    current = await fs.real_path(start)
    while True:
        logger.debug(f"Looking for {target} in {current}")
        for entry in await fs.list_entries(current):
            if entry.name == target and await fs.is_file(entry):
                return current, entry
        parent = current.parent
        if parent == current:
            return None
        current = parent


async def search_downward(
    fs: IFilesystem,
    start: Path,
    predicate: Predicate,
    visit: Visitor,
    on_error: Optional[ErrorHandler] = None,
    max_parallel: int = DEFAULT_WALK_PARALLEL,
) -> None:
    """
    Visit every file under start for which predicate returns True.

    Files are passed to visit with their parent directory resolved.
    Entry order is whatever the filesystem reports; callers must not rely
    on visit order.

    A FilesystemError aborts only the subtree it occurred in. It goes to
    on_error(directory, error) when given; otherwise the first one is
    raised once every sibling subtree has finished. Exceptions raised by
    visit are re-raised the same way.
    """
    semaphore = asyncio.Semaphore(max_parallel)
    visited: Set[Path] = set()
    errors: List[BaseException] = []

    async def _report(directory: Path, error: FilesystemError) -> None:
        if on_error is None:
            errors.append(error)
            return
        await invoke_callback(on_error, directory, error)

    async def _walk(directory: Path) -> None:
        try:
            real = await fs.real_path(directory)
            if real in visited:
                logger.debug(f"Skipping already visited directory {directory} -> {real}")
                return
            visited.add(real)

            async with semaphore:
                entries = await fs.list_entries(real)

            subdirs = []
            for entry in entries:
                if await fs.is_file(entry):
                    if predicate(entry):
                        await invoke_callback(visit, entry)
                elif await fs.is_dir(entry):
                    subdirs.append(entry)
        except FilesystemError as e:
            logger.debug(f"Walk aborted under {directory}: {e}")
            await _report(directory, e)
            return

        results = await asyncio.gather(*(_walk(d) for d in subdirs), return_exceptions=True)
        errors.extend(r for r in results if isinstance(r, BaseException))

    await _walk(Path(start))

    if errors:
        raise errors[0]
