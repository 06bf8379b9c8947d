"""
Storage Service - HTTP adapter for object storage uploads.

Implements IStorageClient against a Swift-style object API:
    PUT /{container}            create container (public via X-Container-Read)
    PUT /{container}/{key}      store object
"""
from __future__ import annotations

import asyncio
import logging
import mimetypes
from pathlib import Path
from typing import Optional, Set
from urllib.parse import quote

import httpx

from ..exceptions import CredentialError, UploadError
from ..models import Credentials, SyncConfig

logger = logging.getLogger(__name__)

PUBLIC_READ_ACL = ".r:*"


class HTTPStorageClient:
    """
    HTTP storage client.

    Usage:
        async with HTTPStorageClient(credentials) as client:
            await client.upload(path, "bucket", "docs/a.txt", public=False)
    """

    def __init__(self, credentials: Credentials, config: Optional[SyncConfig] = None, transport=None):
        if not credentials.endpoint:
            raise CredentialError("credentials have no storage endpoint")
        self._credentials = credentials
        self._config = config or SyncConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._containers: Set[str] = set()
        self._container_lock = asyncio.Lock()

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self._credentials.endpoint,
            timeout=self._config.request_timeout,
            headers={
                "X-Auth-User": self._credentials.username,
                "X-Auth-Token": self._credentials.api_key,
            },
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    async def upload(self, local_path: Path, container: str, remote_key: str, public: bool) -> str:
        """
        Upload local_path as container/remote_key.

        Returns:
            The object URL path

        Raises:
            UploadError: container creation or object PUT failed
        """
        try:
            await self._ensure_container(container, public)
            body = await asyncio.to_thread(Path(local_path).read_bytes)
            content_type = mimetypes.guess_type(str(local_path))[0] or "application/octet-stream"
            endpoint = f"/{quote(container)}/{quote(remote_key)}"
            await self._put(endpoint, content=body, headers={"Content-Type": content_type})
        except UploadError:
            raise
        except (OSError, httpx.HTTPError, RuntimeError) as e:
            raise UploadError(Path(local_path), remote_key, e) from e

        logger.debug(f"Uploaded {local_path} -> {container}/{remote_key}")
        return endpoint

    async def _ensure_container(self, container: str, public: bool) -> None:
        async with self._container_lock:
            if container in self._containers:
                return
            headers = {"X-Container-Read": PUBLIC_READ_ACL} if public else {}
            logger.info(f"Ensuring container {container} (public={public})")
            await self._put(f"/{quote(container)}", headers=headers)
            self._containers.add(container)

    async def _put(self, endpoint: str, content: Optional[bytes] = None, headers=None) -> httpx.Response:
        if not self._client:
            raise RuntimeError("HTTPStorageClient not initialized. Use 'async with' context.")

        max_retries = self._config.max_retries
        for attempt in range(max_retries):
            try:
                response = await self._client.put(endpoint, content=content, headers=headers)

                if response.status_code >= 500 and attempt < max_retries - 1:
                    await asyncio.sleep(0.5 * (attempt + 1))
                    continue

                if response.status_code >= 400:
                    raise RuntimeError(
                        f"Storage error {response.status_code} on PUT {endpoint}: {response.text}"
                    )

                return response
            except (httpx.RequestError, httpx.TimeoutException):
                if attempt < max_retries - 1:
                    await asyncio.sleep(0.5 * (attempt + 1))
                    continue
                raise

        raise RuntimeError(f"Failed to PUT {endpoint} after {max_retries} attempts")
