# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Artifact Transfer

Single responsibility: move bytes between a repo and the local disk.

Keys are repo-relative ('{bin}/{target}/{stream}/...'); each backend maps
them onto its own location:
- LocalRepo: {root_path}/{key}, plain file copies
- S3Repo:    s3://{bucket}/{base}/{key}, streamed GET/PUT
- HttpRepo:  {base_url}/{key}, streamed GET only
"""

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Callable, Optional

import aiofiles
import httpx

from binst.core.errors import NotFoundError, TransportError, UnsupportedOperationError

from .locator import HttpRepo, LocalRepo, RepoDescriptor, S3Repo
from .s3 import DEFAULT_CHUNK_SIZE, S3Bucket

logger = logging.getLogger(__name__)

DEFAULT_HTTP_TIMEOUT = 30.0


def _unknown_descriptor(descriptor: object) -> TypeError:
    return TypeError(f"Unknown repo descriptor: {descriptor!r}")


class ArtifactTransfer:
    """Download and upload repo artifacts for all three backends"""

    def __init__(
        self,
        http_timeout: float = DEFAULT_HTTP_TIMEOUT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        http_client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
        bucket_factory: Optional[Callable[[S3Repo], S3Bucket]] = None,
    ):
        """
        Initialize artifact transfer.

        Args:
            http_timeout: Timeout for HTTP requests (seconds)
            chunk_size: Chunk size for streamed downloads
            http_client_factory: Builds the httpx client (tests inject a MockTransport)
            bucket_factory: Builds the S3 bucket wrapper (tests inject a fake client)
        """
        self.http_timeout = http_timeout
        self.chunk_size = chunk_size
        self._http_client_factory = http_client_factory
        self._bucket_factory = bucket_factory

    # ------------------------------------------------------------------
    # Backend plumbing
    # ------------------------------------------------------------------

    def _http_client(self) -> httpx.AsyncClient:
        if self._http_client_factory:
            return self._http_client_factory()
        return httpx.AsyncClient(timeout=self.http_timeout, follow_redirects=True)

    def _bucket(self, repo: S3Repo) -> S3Bucket:
        if self._bucket_factory:
            return self._bucket_factory(repo)
        return S3Bucket.connect(repo, chunk_size=self.chunk_size)

    @staticmethod
    def _check_http_status(response: httpx.Response, url: str) -> None:
        if response.status_code == 404:
            raise NotFoundError("HTTP resource", url)
        if not response.is_success:
            raise TransportError(
                f"HTTP GET {url} failed with status {response.status_code}",
                code=str(response.status_code),
            )

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------

    def resolve_url(self, descriptor: RepoDescriptor, key: str) -> str:
        """Where `key` lives in the repo (path, s3:// URL or http URL)"""
        if isinstance(descriptor, LocalRepo):
            return str(Path(descriptor.root_path) / key)
        if isinstance(descriptor, S3Repo):
            return descriptor.s3_url(key)
        if isinstance(descriptor, HttpRepo):
            return descriptor.key_url(key)
        raise _unknown_descriptor(descriptor)

    # ------------------------------------------------------------------
    # Downloads
    # ------------------------------------------------------------------

    async def read_bytes(self, descriptor: RepoDescriptor, key: str) -> bytes:
        """
        Read a small document (e.g. latest.toml) as raw bytes.

        Decoding is left to the caller, so bad encodings surface as
        document errors rather than transport errors.

        Raises:
            NotFoundError: If the document does not exist
            TransportError: On network/provider failures
        """
        if isinstance(descriptor, LocalRepo):
            path = Path(descriptor.root_path) / key
            if not path.is_file():
                raise NotFoundError(path.name, str(path))
            async with aiofiles.open(path, "rb") as f:
                return await f.read()

        if isinstance(descriptor, S3Repo):
            return await self._bucket(descriptor).download_bytes(key)

        if isinstance(descriptor, HttpRepo):
            url = descriptor.key_url(key)
            try:
                async with self._http_client() as client:
                    response = await client.get(url)
            except httpx.HTTPError as e:
                raise TransportError(f"HTTP GET {url} failed: {e}") from e
            self._check_http_status(response, url)
            return response.content

        raise _unknown_descriptor(descriptor)

    async def download(self, descriptor: RepoDescriptor, key: str, dest_path: Path) -> str:
        """
        Download an artifact to a local file.

        Args:
            descriptor: Source repo
            key: Repo-relative key
            dest_path: Local destination file

        Returns:
            The resolved source URL

        Raises:
            NotFoundError: If the artifact does not exist
            TransportError: On network/provider failures
        """
        if isinstance(descriptor, LocalRepo):
            source = Path(descriptor.root_path) / key
            if not source.is_file():
                raise NotFoundError("Package .tar.gz file", str(source))
            await asyncio.to_thread(shutil.copyfile, source, dest_path)
            logger.info(f"Copied {source} to {dest_path}")
            return str(source)

        if isinstance(descriptor, S3Repo):
            return await self._bucket(descriptor).download_to_file(key, dest_path)

        if isinstance(descriptor, HttpRepo):
            url = descriptor.key_url(key)
            try:
                async with self._http_client() as client:
                    async with client.stream("GET", url) as response:
                        self._check_http_status(response, url)
                        async with aiofiles.open(dest_path, "wb") as f:
                            async for chunk in response.aiter_bytes(self.chunk_size):
                                await f.write(chunk)
            except httpx.HTTPError as e:
                raise TransportError(f"HTTP GET {url} failed: {e}") from e
            logger.info(f"Downloaded {url} to {dest_path}")
            return url

        raise _unknown_descriptor(descriptor)

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    async def upload_file(self, descriptor: RepoDescriptor, key: str, local_path: Path) -> str:
        """
        Upload a local file (archive) under `key`.

        Returns:
            The resolved destination URL

        Raises:
            UnsupportedOperationError: For HTTP repos
        """
        if isinstance(descriptor, LocalRepo):
            dest = Path(descriptor.root_path) / key
            await asyncio.to_thread(dest.parent.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(shutil.copyfile, local_path, dest)
            return str(dest)

        if isinstance(descriptor, S3Repo):
            return await self._bucket(descriptor).upload_file(key, local_path)

        if isinstance(descriptor, HttpRepo):
            raise UnsupportedOperationError("http protocols not supported for publish", backend="http")

        raise _unknown_descriptor(descriptor)

    async def upload_text(self, descriptor: RepoDescriptor, key: str, content: str) -> str:
        """
        Upload a small text document under `key`.

        Returns:
            The resolved destination URL

        Raises:
            UnsupportedOperationError: For HTTP repos
        """
        if isinstance(descriptor, LocalRepo):
            dest = Path(descriptor.root_path) / key
            await asyncio.to_thread(dest.parent.mkdir, parents=True, exist_ok=True)
            async with aiofiles.open(dest, "w") as f:
                await f.write(content)
            return str(dest)

        if isinstance(descriptor, S3Repo):
            return await self._bucket(descriptor).upload_text(key, content)

        if isinstance(descriptor, HttpRepo):
            raise UnsupportedOperationError("http protocols not supported for publish", backend="http")

        raise _unknown_descriptor(descriptor)
