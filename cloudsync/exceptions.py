"""Error taxonomy for cloudsync. Every failure is raised, never returned."""
from pathlib import Path
from typing import Optional


class CloudSyncError(Exception):
    """Base class for all cloudsync errors."""


class FilesystemError(CloudSyncError):
    """Listing, reading or resolving a path failed."""

    def __init__(self, path: Path, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"filesystem error at {path}: {cause}")


class ConfigurationError(CloudSyncError):
    """Descriptor (or environment config) is malformed or incomplete."""

    def __init__(self, path: Optional[Path], message: str):
        self.path = path
        self.message = message
        where = f"{path}: " if path is not None else ""
        super().__init__(f"{where}{message}")


class DescriptorParseError(ConfigurationError):
    """Descriptor file is not valid JSON."""

    def __init__(self, path: Path, cause: BaseException):
        self.cause = cause
        super().__init__(path, f"could not parse descriptor: {cause}")


class ScopeError(CloudSyncError):
    """File lies outside the descriptor's root."""

    def __init__(self, path: Path, root: Path):
        self.path = path
        self.root = root
        super().__init__(f"{path} is outside descriptor root {root}")


class NoDescriptorError(CloudSyncError):
    """No descriptor governs the given path."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"no descriptor found for {path}")


class CredentialError(CloudSyncError):
    """Credentials could not be found or are invalid."""


class UploadError(CloudSyncError):
    """Storage client failed to upload a file."""

    def __init__(self, path: Path, remote_key: str, cause: Optional[BaseException] = None):
        self.path = path
        self.remote_key = remote_key
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"upload of {path} as {remote_key!r} failed{detail}")
