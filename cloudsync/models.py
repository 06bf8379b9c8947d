"""
Models for cloudsync.

Immutable dataclasses; reserved filenames are process-wide constants.
"""
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import ConfigurationError

DESCRIPTOR_FILENAME = ".cloud-sync.json"
CREDENTIALS_FILENAME = ".cloud-sync-credentials.json"
RESERVED_FILENAMES = frozenset({DESCRIPTOR_FILENAME, CREDENTIALS_FILENAME})


def join_key(prefix: str, path: str) -> str:
    """Join a pseudo-prefix and a relative path into a remote key."""
    if not prefix:
        return str(PurePosixPath(path))
    return str(PurePosixPath(prefix) / path)


@dataclass(frozen=True)
class Descriptor:
    """
    Parsed sync descriptor binding a local directory to a remote container.

    Attributes:
        root: Directory governed by this descriptor (absolute)
        container: Remote container name (never empty)
        prefix: Pseudo-directory prepended to every remote key
        public: Whether the container is CDN-exposed
    """
    root: Path
    container: str
    prefix: str = ""
    public: bool = False

    @classmethod
    def from_settings(cls, root: Path, settings: Dict[str, Any]) -> "Descriptor":
        """
        Build a descriptor from a parsed settings object.

        Unknown keys are ignored.

        Raises:
            ConfigurationError: container missing/empty or a field has the wrong type
        """
        path = Path(root) / DESCRIPTOR_FILENAME
        if not isinstance(settings, dict):
            raise ConfigurationError(path, "settings must be an object")

        container = settings.get("container")
        if container is None or container == "":
            raise ConfigurationError(path, "missing container")
        if not isinstance(container, str):
            raise ConfigurationError(path, "container must be a string")

        prefix = settings.get("directory", "")
        if prefix is None:
            prefix = ""
        if not isinstance(prefix, str):
            raise ConfigurationError(path, "directory must be a string")

        public = settings.get("public", False)
        if not isinstance(public, bool):
            raise ConfigurationError(path, "public must be a boolean")

        return cls(root=Path(os.path.abspath(root)), container=container, prefix=prefix, public=public)

    def config_path(self) -> str:
        """Path of this descriptor's file under the absolute root. No I/O."""
        return os.path.join(str(self.root), DESCRIPTOR_FILENAME)


@dataclass(frozen=True)
class Credentials:
    """Credentials handed to the storage client factory."""
    username: str
    api_key: str
    region: Optional[str] = None
    endpoint: Optional[str] = None
    source: Optional[Path] = None


class UploadStatus(Enum):
    """Upload operation status."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadResult:
    """Immutable result of a single file upload."""
    local_path: Path
    remote_key: str
    status: UploadStatus = UploadStatus.SUCCESS
    error: Optional[BaseException] = None

    @property
    def success(self) -> bool:
        return self.status == UploadStatus.SUCCESS

    @classmethod
    def ok(cls, local_path: Path, remote_key: str):
        return cls(local_path=local_path, remote_key=remote_key)

    @classmethod
    def fail(cls, local_path: Path, remote_key: str, error: BaseException):
        return cls(
            local_path=local_path,
            remote_key=remote_key,
            status=UploadStatus.FAILED,
            error=error,
        )


@dataclass
class SyncResult:
    """Result of uploading a descriptor's whole tree."""
    descriptor: Descriptor
    results: List[UploadResult] = field(default_factory=list)
    walk_errors: List[Tuple[Path, BaseException]] = field(default_factory=list)

    @property
    def uploaded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def all_success(self) -> bool:
        return self.failed == 0 and not self.walk_errors


@dataclass(frozen=True)
class DiscoveryResult:
    """One descriptor file found during discovery, parsed or not."""
    path: Path
    descriptor: Optional[Descriptor] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(None, f"{name} must be an integer, got {raw!r}")
    if value < 1:
        raise ConfigurationError(None, f"{name} must be >= 1, got {value}")
    return value


@dataclass(frozen=True)
class SyncConfig:
    """Immutable configuration for sync operations."""
    max_parallel: int = 4        # concurrent uploads per upload_all
    max_walk_parallel: int = 8   # concurrent directory listings per walk
    request_timeout: int = 60
    max_retries: int = 3

    @classmethod
    def from_env(cls) -> "SyncConfig":
        """Build config from CLOUDSYNC_* environment variables."""
        defaults = cls()
        return cls(
            max_parallel=_env_int("CLOUDSYNC_MAX_PARALLEL", defaults.max_parallel),
            max_walk_parallel=_env_int("CLOUDSYNC_MAX_WALK_PARALLEL", defaults.max_walk_parallel),
            request_timeout=_env_int("CLOUDSYNC_TIMEOUT", defaults.request_timeout),
            max_retries=_env_int("CLOUDSYNC_MAX_RETRIES", defaults.max_retries),
        )
