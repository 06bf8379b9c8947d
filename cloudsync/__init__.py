"""
cloudsync - bind local directory trees to remote storage containers.

A directory is governed by the nearest ``.cloud-sync.json`` at or above it:

    {"container": "bucket1", "directory": "assets", "public": true}

Usage:
    from cloudsync import SyncOrchestrator, DescriptorDiscoverer

    orchestrator = SyncOrchestrator()

    # Whole tree of the nearest descriptor (keys flattened to base names)
    descriptor = await orchestrator.resolver.nearest_to(Path("site"))
    result = await orchestrator.upload_all(descriptor)

    # Single file (key keeps the path relative to the descriptor root)
    await orchestrator.resolve_and_upload(Path("site/css/main.css"))

    # Every descriptor in a project
    for found in await DescriptorDiscoverer().discover_all(Path(".")):
        print(found.path, found.descriptor or found.error)

    # Rich console logging for the embedding application
    setup_logging(log_level="INFO")
"""
from .discovery import DescriptorDiscoverer
from .exceptions import (
    CloudSyncError,
    ConfigurationError,
    CredentialError,
    DescriptorParseError,
    FilesystemError,
    NoDescriptorError,
    ScopeError,
    UploadError,
)
from .models import (
    CREDENTIALS_FILENAME,
    DESCRIPTOR_FILENAME,
    Credentials,
    Descriptor,
    DiscoveryResult,
    SyncConfig,
    SyncResult,
    UploadResult,
    UploadStatus,
)
from .log import setup_logging
from .orchestrator import SyncOrchestrator
from .resolver import DescriptorResolver
from .walker import search_downward, search_upward

__version__ = "0.1.0"
__all__ = [
    # Main
    "SyncOrchestrator",
    "DescriptorResolver",
    "DescriptorDiscoverer",
    "search_upward",
    "search_downward",
    "setup_logging",
    # Models
    "Descriptor",
    "Credentials",
    "DiscoveryResult",
    "SyncConfig",
    "SyncResult",
    "UploadResult",
    "UploadStatus",
    "DESCRIPTOR_FILENAME",
    "CREDENTIALS_FILENAME",
    # Errors
    "CloudSyncError",
    "ConfigurationError",
    "CredentialError",
    "DescriptorParseError",
    "FilesystemError",
    "NoDescriptorError",
    "ScopeError",
    "UploadError",
]
