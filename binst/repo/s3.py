# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
S3 Bucket Wrapper

Single responsibility: GET/PUT objects under an S3 repo's base prefix.

boto3 is synchronous; every call runs in a worker thread so the install
and publish flows stay awaitable end to end.
"""

import asyncio
import logging
import mimetypes
from pathlib import Path
from typing import Any, Callable, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from binst.core.errors import NotFoundError, TransportError

from .credentials import AwsCredentials, resolve_credentials
from .locator import S3Repo

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"NoSuchKey", "NoSuchBucket", "404", "NotFound"}
DEFAULT_CHUNK_SIZE = 64 * 1024

# Used when only an endpoint is configured (S3-compatible stores)
ENDPOINT_REGION = "us-east-1"


def new_s3_client(credentials: AwsCredentials) -> Any:
    """Build a boto3 S3 client from resolved credentials"""
    kwargs = {
        "aws_access_key_id": credentials.key_id,
        "aws_secret_access_key": credentials.key_secret,
        "region_name": credentials.region or ENDPOINT_REGION,
    }
    if credentials.endpoint:
        kwargs["endpoint_url"] = credentials.endpoint
    return boto3.client("s3", **kwargs)


def _translate_error(error: Exception, bucket: str, key: str) -> Exception:
    """Map botocore failures onto the binst error taxonomy"""
    if isinstance(error, ClientError):
        code = str(error.response.get("Error", {}).get("Code", ""))
        status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        if code in NOT_FOUND_CODES or status == 404:
            return NotFoundError("S3 object", f"s3://{bucket}/{key}")
        return TransportError(f"AWS Error. Code: {code}", code=code, details={"key": key})

    return TransportError(f"AWS Error: {error}", details={"key": key})


class S3Bucket:
    """Object access for one S3 repo"""

    def __init__(self, client: Any, repo: S3Repo, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize bucket wrapper.

        Args:
            client: boto3 S3 client
            repo: The S3 repo descriptor (bucket + base prefix)
            chunk_size: Read size when streaming downloads to disk
        """
        self.client = client
        self.repo = repo
        self.chunk_size = chunk_size

    @classmethod
    def connect(
        cls,
        repo: S3Repo,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        client_factory: Optional[Callable[[AwsCredentials], Any]] = None,
    ) -> "S3Bucket":
        """
        Resolve credentials and build a bucket wrapper.

        Raises:
            CredentialError: If no usable credentials are configured
        """
        credentials = resolve_credentials(repo.profile)
        client = (client_factory or new_s3_client)(credentials)
        return cls(client, repo, chunk_size)

    async def download_bytes(self, key: str) -> bytes:
        """
        Get a (small) object body.

        Raises:
            NotFoundError: If the key does not exist
            TransportError: On any other AWS failure
        """
        full_key = self.repo.full_key(key)

        def _get() -> bytes:
            try:
                response = self.client.get_object(Bucket=self.repo.bucket, Key=full_key)
                return response["Body"].read()
            except (ClientError, BotoCoreError) as e:
                raise _translate_error(e, self.repo.bucket, full_key) from e

        return await asyncio.to_thread(_get)

    async def download_to_file(self, key: str, file_path: Path) -> str:
        """
        Stream an object to a local file.

        Returns:
            The resolved s3:// URL
        """
        full_key = self.repo.full_key(key)

        def _download() -> None:
            try:
                response = self.client.get_object(Bucket=self.repo.bucket, Key=full_key)
                body = response["Body"]
                with open(file_path, "wb") as f:
                    for chunk in body.iter_chunks(chunk_size=self.chunk_size):
                        f.write(chunk)
            except (ClientError, BotoCoreError) as e:
                raise _translate_error(e, self.repo.bucket, full_key) from e

        await asyncio.to_thread(_download)
        s3_url = self.repo.s3_url(key)
        logger.info(f"Downloaded {s3_url} to {file_path}")
        return s3_url

    async def upload_text(self, key: str, content: str, content_type: str = "text/plain") -> str:
        """
        Put a text object.

        Returns:
            The resolved s3:// URL
        """
        full_key = self.repo.full_key(key)

        def _put() -> None:
            try:
                self.client.put_object(
                    Bucket=self.repo.bucket,
                    Key=full_key,
                    Body=content.encode("utf-8"),
                    ContentType=content_type,
                )
            except (ClientError, BotoCoreError) as e:
                raise _translate_error(e, self.repo.bucket, full_key) from e

        await asyncio.to_thread(_put)
        return self.repo.s3_url(key)

    async def upload_file(self, key: str, file_path: Path) -> str:
        """
        Put a file object, streamed from disk.

        Returns:
            The resolved s3:// URL
        """
        full_key = self.repo.full_key(key)
        mime_type = mimetypes.guess_type(str(file_path))[0] or "application/octet-stream"

        def _put() -> None:
            try:
                with open(file_path, "rb") as f:
                    self.client.put_object(
                        Bucket=self.repo.bucket,
                        Key=full_key,
                        Body=f,
                        ContentType=mime_type,
                    )
            except (ClientError, BotoCoreError) as e:
                raise _translate_error(e, self.repo.bucket, full_key) from e

        await asyncio.to_thread(_put)
        return self.repo.s3_url(key)
