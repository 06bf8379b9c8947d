"""
Protocols (Interfaces) for the collaborators cloudsync consumes.

Small, focused interfaces; the defaults live in ``cloudsync.services``.
"""
from pathlib import Path
from typing import Any, List, Protocol, runtime_checkable

from .models import Credentials


@runtime_checkable
class IFilesystem(Protocol):
    """Interface for the filesystem abstraction."""

    async def list_entries(self, directory: Path) -> List[Path]:
        """Direct entries of directory, in the order the filesystem reports them."""
        ...

    async def is_file(self, path: Path) -> bool:
        ...

    async def is_dir(self, path: Path) -> bool:
        ...

    async def real_path(self, path: Path) -> Path:
        """Absolute, symlink-resolved path."""
        ...

    async def read_text(self, path: Path) -> str:
        """Whole-file read."""
        ...


@runtime_checkable
class ICredentialResolver(Protocol):
    """Interface for credential lookup starting at a directory."""

    async def resolve(self, start: Path) -> Credentials:
        """Return credentials or raise CredentialError."""
        ...


@runtime_checkable
class IStorageClient(Protocol):
    """Interface for cloud storage uploads."""

    async def upload(
        self,
        local_path: Path,
        container: str,
        remote_key: str,
        public: bool,
    ) -> Any:
        """Upload file to container under remote_key. Raises on failure."""
        ...
