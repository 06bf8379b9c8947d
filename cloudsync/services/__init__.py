"""Default collaborators for cloudsync."""
from .credentials import FileCredentialResolver
from .filesystem import LocalFilesystem
from .storage import HTTPStorageClient

__all__ = [
    "FileCredentialResolver",
    "LocalFilesystem",
    "HTTPStorageClient",
]
