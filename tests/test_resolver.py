# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit Tests for VersionResolver
"""

from unittest.mock import MagicMock

import pytest
from semver import Version

from binst.core.errors import InvalidVersionError, NotFoundError
from binst.repo.locator import S3Repo
from binst.repo.resolver import VersionResolver
from binst.repo.s3 import S3Bucket
from binst.repo.transfer import ArtifactTransfer

from conftest import TEST_TARGET, FakeBody, publish_to_local_repo

NOT_UTF8_LATEST = b'[latest]\nversion = "\xff\xfe1.0.0"\n'


@pytest.fixture
def resolver(transfer):
    return VersionResolver(transfer)


class TestLatestVersion:
    """Test suite for latest version lookup"""

    @pytest.mark.asyncio
    async def test_latest_version(self, resolver, local_repo, repo_root):
        publish_to_local_repo(repo_root, "hello", "1.4.0")

        version = await resolver.latest_version(local_repo, "hello", TEST_TARGET, "main")

        assert version == Version(1, 4, 0)

    @pytest.mark.asyncio
    async def test_missing_document_is_not_found(self, resolver, local_repo, repo_root):
        """Test a wrong stream is reported as not found, with a hint"""
        publish_to_local_repo(repo_root, "hello", "1.4.0")

        with pytest.raises(NotFoundError) as exc_info:
            await resolver.latest_version(local_repo, "hello", TEST_TARGET, "beta")

        assert "might be wrong stream" in exc_info.value.message
        assert exc_info.value.identifier.endswith("hello/x86_64-unknown-linux-gnu/beta/latest.toml")

    @pytest.mark.asyncio
    async def test_malformed_document_is_invalid_version(self, resolver, local_repo, repo_root):
        latest = repo_root / "hello" / TEST_TARGET / "main" / "latest.toml"
        latest.parent.mkdir(parents=True)
        latest.write_text('[latest]\nversion = "not-a-version"\n')

        with pytest.raises(InvalidVersionError):
            await resolver.latest_version(local_repo, "hello", TEST_TARGET, "main")

    @pytest.mark.asyncio
    async def test_local_document_not_utf8(self, resolver, local_repo, repo_root):
        latest = repo_root / "hello" / TEST_TARGET / "main" / "latest.toml"
        latest.parent.mkdir(parents=True)
        latest.write_bytes(NOT_UTF8_LATEST)

        with pytest.raises(InvalidVersionError, match="not valid UTF-8"):
            await resolver.latest_version(local_repo, "hello", TEST_TARGET, "main")

    @pytest.mark.asyncio
    async def test_s3_document_not_utf8(self):
        """Test a non UTF-8 S3 object is a document error, not a decode crash"""
        client = MagicMock()
        client.get_object.return_value = {"Body": FakeBody(NOT_UTF8_LATEST)}
        transfer = ArtifactTransfer(bucket_factory=lambda repo: S3Bucket(client, repo))
        repo = S3Repo(url="s3://bucket/base", bucket="bucket", base="base")

        with pytest.raises(InvalidVersionError) as exc_info:
            await VersionResolver(transfer).latest_version(repo, "hello", TEST_TARGET, "main")

        assert exc_info.value.source == f"s3://bucket/base/hello/{TEST_TARGET}/main/latest.toml"


class TestOriginUrl:
    """Test suite for archive URL resolution"""

    def test_local(self, resolver, local_repo, repo_root):
        url = resolver.origin_url(local_repo, "hello", TEST_TARGET, "main", Version(1, 0, 0))
        assert url == str(repo_root / "hello" / TEST_TARGET / "main" / "v1.0.0" / "hello.tar.gz")
