"""Shared fixtures for cloudsync tests."""
import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from cloudsync.exceptions import FilesystemError
from cloudsync.models import CREDENTIALS_FILENAME, DESCRIPTOR_FILENAME, Credentials
from cloudsync.services.filesystem import LocalFilesystem


class FakeStorage:
    """Records upload calls; fails for keys listed in fail_on."""

    def __init__(self, fail_on=(), delay: float = 0.0):
        self.calls = []
        self.fail_on = set(fail_on)
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0

    async def upload(self, local_path, container, remote_key, public):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            self.calls.append((Path(local_path), container, remote_key, public))
            if remote_key in self.fail_on:
                raise RuntimeError(f"boom: {remote_key}")
            return remote_key
        finally:
            self.in_flight -= 1


class FailingFilesystem(LocalFilesystem):
    """Local filesystem whose listing fails for directories with the given names."""

    def __init__(self, failing_names):
        super().__init__()
        self.failing_names = set(failing_names)

    async def list_entries(self, directory):
        if Path(directory).name in self.failing_names:
            raise FilesystemError(Path(directory), PermissionError("denied"))
        return await super().list_entries(directory)


def write_descriptor(directory: Path, /, **settings) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / DESCRIPTOR_FILENAME
    path.write_text(json.dumps(settings))
    return path


def write_credentials(directory: Path, **values) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / CREDENTIALS_FILENAME
    path.write_text(json.dumps(values))
    return path


def write_file(path: Path, content: str = "data") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def credentials():
    resolver = AsyncMock()
    resolver.resolve.return_value = Credentials(username="user", api_key="key")
    return resolver


@pytest.fixture
def project(tmp_path):
    """/proj with {"container": "bucket1"}, a.txt and sub/b.txt."""
    root = tmp_path / "proj"
    write_descriptor(root, container="bucket1")
    write_file(root / "a.txt")
    write_file(root / "sub" / "b.txt")
    return root.resolve()
