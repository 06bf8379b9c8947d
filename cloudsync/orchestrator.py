"""
Upload Orchestrator - turns a descriptor's files into upload calls.

Two key policies coexist on purpose:
- upload_all flattens every file to prefix/<base name>
- upload_one keeps the path relative to the descriptor root
"""
import asyncio
import logging
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Callable, List, Optional

from .exceptions import FilesystemError, NoDescriptorError, ScopeError, UploadError
from .models import RESERVED_FILENAMES, Credentials, Descriptor, SyncConfig, SyncResult, UploadResult, join_key
from .protocols import ICredentialResolver, IFilesystem, IStorageClient
from .resolver import DescriptorResolver
from .services.credentials import FileCredentialResolver
from .services.filesystem import LocalFilesystem
from .services.storage import HTTPStorageClient
from .walker import search_downward

logger = logging.getLogger(__name__)

StorageFactory = Callable[[Credentials], IStorageClient]


def is_uploadable(path: Path) -> bool:
    """Walker predicate: any file that is not a reserved control file."""
    return path.name not in RESERVED_FILENAMES


class SyncOrchestrator:
    """
    Orchestrates descriptor uploads using injected collaborators.

    Usage:
        orchestrator = SyncOrchestrator()
        descriptor = await orchestrator.resolver.nearest_to(Path("site"))
        result = await orchestrator.upload_all(descriptor)

        # single file, descriptor resolved automatically
        await orchestrator.resolve_and_upload(Path("site/css/main.css"))
    """

    def __init__(
        self,
        fs: Optional[IFilesystem] = None,
        credentials: Optional[ICredentialResolver] = None,
        storage_factory: Optional[StorageFactory] = None,
        config: Optional[SyncConfig] = None,
    ):
        """
        Args:
            fs: Filesystem abstraction (default: local disk)
            credentials: Credential resolver (default: nearest credentials file)
            storage_factory: Builds a storage client from credentials
                (default: HTTPStorageClient)
            config: Sync configuration
        """
        self._fs = fs or LocalFilesystem()
        self._config = config or SyncConfig.from_env()
        self._credentials = credentials or FileCredentialResolver(self._fs)
        self._storage_factory = storage_factory or (lambda c: HTTPStorageClient(c, self._config))
        self.resolver = DescriptorResolver(self._fs)

    async def _open_client(self, stack: AsyncExitStack, descriptor: Descriptor) -> IStorageClient:
        credentials = await self._credentials.resolve(descriptor.root)
        client = self._storage_factory(credentials)
        if hasattr(client, "__aenter__"):
            client = await stack.enter_async_context(client)
        return client

    async def upload_all(self, descriptor: Descriptor) -> SyncResult:
        """
        Upload every non-reserved file under the descriptor root.

        Remote keys are prefix/<base name>; subdirectories are flattened.
        Per-file failures and unreadable subtrees are recorded in the result.

        Raises:
            CredentialError: credentials could not be resolved; nothing is uploaded
        """
        result = SyncResult(descriptor=descriptor)
        semaphore = asyncio.Semaphore(self._config.max_parallel)
        tasks: List[asyncio.Task] = []

        async with AsyncExitStack() as stack:
            client = await self._open_client(stack, descriptor)

            async def _dispatch(file: Path, key: str) -> UploadResult:
                async with semaphore:
                    try:
                        await self._upload(client, descriptor, file, key)
                    except UploadError as e:
                        logger.warning(f"Upload failed: {e}")
                        return UploadResult.fail(file, key, e)
                return UploadResult.ok(file, key)

            def _visit(file: Path) -> None:
                key = join_key(descriptor.prefix, file.name)
                tasks.append(asyncio.create_task(_dispatch(file, key)))

            def _on_error(directory: Path, error: FilesystemError) -> None:
                logger.warning(f"Skipping unreadable subtree {directory}: {error}")
                result.walk_errors.append((directory, error))

            try:
                await search_downward(
                    self._fs,
                    descriptor.root,
                    is_uploadable,
                    _visit,
                    on_error=_on_error,
                    max_parallel=self._config.max_walk_parallel,
                )
            finally:
                # dispatched uploads always run to completion
                outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
            result.results.append(outcome)

        logger.info(
            f"Synced {descriptor.root} -> {descriptor.container}: "
            f"{result.uploaded} uploaded, {result.failed} failed, "
            f"{len(result.walk_errors)} unreadable subtree(s)"
        )
        return result

    async def upload_one(self, descriptor: Descriptor, file: Path) -> UploadResult:
        """
        Upload a single file governed by descriptor.

        The remote key is prefix/<path relative to the descriptor root>.

        Raises:
            ScopeError: file is not under the descriptor root
            CredentialError: credentials could not be resolved
            UploadError: the storage client failed
        """
        real_file = await self._fs.real_path(file)
        real_root = await self._fs.real_path(descriptor.root)
        if real_root not in real_file.parents:
            raise ScopeError(real_file, real_root)

        key = join_key(descriptor.prefix, real_file.relative_to(real_root).as_posix())
        async with AsyncExitStack() as stack:
            client = await self._open_client(stack, descriptor)
            await self._upload(client, descriptor, real_file, key)
        return UploadResult.ok(real_file, key)

    async def resolve_and_upload(self, file: Path) -> UploadResult:
        """
        Upload file using the nearest descriptor above it.

        Raises:
            NoDescriptorError: no descriptor governs file
        """
        descriptor = await self.resolver.nearest_to_file(file)
        if descriptor is None:
            raise NoDescriptorError(Path(file))
        return await self.upload_one(descriptor, file)

    async def _upload(self, client: IStorageClient, descriptor: Descriptor, file: Path, key: str) -> None:
        logger.debug(f"Uploading {file} -> {descriptor.container}/{key}")
        try:
            await client.upload(file, descriptor.container, key, descriptor.public)
        except UploadError:
            raise
        except Exception as e:
            raise UploadError(file, key, e) from e
