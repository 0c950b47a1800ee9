# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Version Resolver

Single responsibility: find the latest published version of a package stream.
"""

import logging

from semver import Version

from binst.core.errors import NotFoundError

from .locator import RepoDescriptor
from .paths import archive_key, latest_key
from .transfer import ArtifactTransfer
from .versioning import parse_latest_document

logger = logging.getLogger(__name__)


class VersionResolver:
    """Reads {bin}/{target}/{stream}/latest.toml from any repo backend"""

    def __init__(self, transfer: ArtifactTransfer):
        self.transfer = transfer

    async def latest_metadata_document(
        self,
        descriptor: RepoDescriptor,
        bin_name: str,
        target: str,
        stream: str,
    ) -> bytes:
        """
        Fetch the raw latest.toml bytes.

        Raises:
            NotFoundError: If the document is missing (wrong stream or package name)
            TransportError: If the repo could not be reached
        """
        key = latest_key(bin_name, target, stream)
        try:
            return await self.transfer.read_bytes(descriptor, key)
        except NotFoundError as e:
            raise NotFoundError(
                "Origin latest.toml (might be wrong stream or package name)",
                self.transfer.resolve_url(descriptor, key),
            ) from e

    async def latest_version(
        self,
        descriptor: RepoDescriptor,
        bin_name: str,
        target: str,
        stream: str,
    ) -> Version:
        """
        Latest published version for the stream.

        Raises:
            NotFoundError: If latest.toml is missing
            InvalidVersionError: If latest.toml is present but malformed
            TransportError: If the repo could not be reached
        """
        content = await self.latest_metadata_document(descriptor, bin_name, target, stream)
        source = self.transfer.resolve_url(descriptor, latest_key(bin_name, target, stream))
        version = parse_latest_document(content, source)
        logger.info(f"Latest {bin_name} on stream {stream}: {version}")
        return version

    def origin_url(
        self,
        descriptor: RepoDescriptor,
        bin_name: str,
        target: str,
        stream: str,
        version: Version,
    ) -> str:
        """Resolved location of the versioned archive"""
        return self.transfer.resolve_url(descriptor, archive_key(bin_name, target, stream, version))
