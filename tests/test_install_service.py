# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit Tests for InstallService

End-to-end installs from a local repository into an isolated binst root.
"""

import os
import tomllib
from unittest.mock import AsyncMock

import pytest

from binst.core.errors import ArchiveError, NotFoundError
from binst.models import InstallResult, InstallState
from binst.repo.locator import BinRepo
from binst.services.install_service import InstallService

from conftest import TEST_TARGET, fixed_target, publish_to_local_repo


@pytest.fixture
def installer(paths, transfer):
    return InstallService(paths, transfer, target_resolver=fixed_target)


@pytest.fixture
def bin_repo(repo_root):
    return BinRepo.from_args("hello", repo=str(repo_root))


class TestInstall:
    """Test suite for a successful install"""

    @pytest.mark.asyncio
    async def test_installs_symlink_and_record(self, installer, bin_repo, paths, repo_root):
        publish_to_local_repo(repo_root, "hello", "1.2.0", content=b"binary-v1")

        result = await installer.install(bin_repo)

        package_dir = paths.packages_dir / "hello" / "v1.2.0"
        symlink = paths.bin_dir / "hello"
        assert result.version == "1.2.0"
        assert result.symlink_path == symlink
        assert symlink.is_symlink()
        assert symlink.read_bytes() == b"binary-v1"
        assert os.readlink(symlink) == str(package_dir / "unpacked" / "hello")
        assert (package_dir / "hello.tar.gz").is_file()
        assert not (package_dir / "hello.tar").exists()

        record = tomllib.loads((package_dir / "install.toml").read_text())
        assert record["install"] == {"repo": str(repo_root), "stream": "main", "version": "1.2.0"}
        assert installer.state == InstallState.DONE

    @pytest.mark.asyncio
    async def test_temp_dir_is_removed(self, installer, bin_repo, paths, repo_root):
        publish_to_local_repo(repo_root, "hello", "1.2.0")

        await installer.install(bin_repo)

        assert list(paths.tmp_root.iterdir()) == []

    @pytest.mark.asyncio
    async def test_stream_install(self, installer, bin_repo, paths, repo_root):
        publish_to_local_repo(repo_root, "hello", "2.0.0-beta.1", stream="beta")

        result = await installer.install(bin_repo, stream="beta")

        assert result.stream == "beta"
        assert (paths.packages_dir / "hello" / "v2.0.0-beta.1" / "unpacked" / "hello").is_file()

    @pytest.mark.asyncio
    async def test_reinstall_switches_symlink(self, installer, bin_repo, paths, repo_root):
        publish_to_local_repo(repo_root, "hello", "1.0.0", content=b"one")
        await installer.install(bin_repo)
        publish_to_local_repo(repo_root, "hello", "1.1.0", content=b"two")
        await installer.install(bin_repo)

        assert (paths.bin_dir / "hello").read_bytes() == b"two"
        assert (paths.packages_dir / "hello" / "v1.0.0").is_dir()

    def test_summary(self, tmp_path):
        """Test the printed summary names every location"""
        result = InstallResult(
            bin_name="hello",
            version="1.0.0",
            stream="main",
            download_url="s3://bucket/hello.tar.gz",
            archive_path=tmp_path / "a",
            unpacked_dir=tmp_path / "b",
            symlink_path=tmp_path / "c",
        )

        summary = result.summary()
        assert summary.startswith("Install Complete - package: hello - version: 1.0.0")
        assert "s3://bucket/hello.tar.gz" in summary


class TestInstallFailures:
    """Test suite for failing installs"""

    @pytest.mark.asyncio
    async def test_unknown_stream(self, installer, bin_repo, paths, repo_root):
        publish_to_local_repo(repo_root, "hello", "1.0.0")

        with pytest.raises(NotFoundError):
            await installer.install(bin_repo, stream="nightly")

        assert installer.state == InstallState.FAILED
        assert not paths.bin_dir.exists()

    @pytest.mark.asyncio
    async def test_missing_archive(self, installer, bin_repo, paths, repo_root):
        publish_to_local_repo(repo_root, "hello", "1.0.0")
        (repo_root / "hello" / TEST_TARGET / "main" / "v1.0.0" / "hello.tar.gz").unlink()

        with pytest.raises(NotFoundError, match="Package .tar.gz file"):
            await installer.install(bin_repo)

        assert list(paths.tmp_root.iterdir()) == []

    @pytest.mark.asyncio
    async def test_corrupt_archive(self, installer, bin_repo, paths, repo_root):
        publish_to_local_repo(repo_root, "hello", "1.0.0")
        (repo_root / "hello" / TEST_TARGET / "main" / "v1.0.0" / "hello.tar.gz").write_bytes(b"garbage")

        with pytest.raises(ArchiveError):
            await installer.install(bin_repo)

        assert not (paths.bin_dir / "hello").exists()
        assert not (paths.packages_dir / "hello" / "v1.0.0" / "install.toml").exists()

    @pytest.mark.asyncio
    async def test_archive_without_binary(self, installer, bin_repo, paths, repo_root):
        """Test a package whose archive holds another name is not linked"""
        publish_to_local_repo(repo_root, "hello", "1.0.0")
        other = repo_root / "other"
        publish_to_local_repo(other, "other", "1.0.0")
        archive = repo_root / "hello" / TEST_TARGET / "main" / "v1.0.0" / "hello.tar.gz"
        archive.write_bytes((other / "other" / TEST_TARGET / "main" / "v1.0.0" / "other.tar.gz").read_bytes())

        with pytest.raises(NotFoundError, match="Unpacked binary file"):
            await installer.install(bin_repo)

        # install.toml is written before the symlink step
        assert (paths.packages_dir / "hello" / "v1.0.0" / "install.toml").is_file()
        assert not (paths.bin_dir / "hello").exists()

    @pytest.mark.asyncio
    async def test_resolver_failure_creates_nothing(self, paths, transfer, bin_repo):
        resolver = AsyncMock()
        resolver.latest_version.side_effect = NotFoundError("latest.toml", "x")
        installer = InstallService(paths, transfer, resolver=resolver, target_resolver=fixed_target)

        with pytest.raises(NotFoundError):
            await installer.install(bin_repo)

        assert not paths.tmp_root.exists()
