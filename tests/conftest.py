# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Shared fixtures: an isolated binst root and a local repository populated
the same way `binst publish` lays it out.
"""

import gzip
import io
import tarfile
from pathlib import Path

import pytest

from binst.repo.locator import LocalRepo
from binst.repo.paths import BinstPaths, archive_key, latest_key
from binst.repo.transfer import ArtifactTransfer

TEST_TARGET = "x86_64-unknown-linux-gnu"


def fixed_target() -> str:
    return TEST_TARGET


class FakeBody:
    """Stands in for botocore's StreamingBody"""

    def __init__(self, data: bytes):
        self._data = data

    def read(self) -> bytes:
        return self._data

    def iter_chunks(self, chunk_size: int = 1024):
        for start in range(0, len(self._data), chunk_size):
            yield self._data[start:start + chunk_size]


def make_archive(bin_name: str, content: bytes) -> bytes:
    """A .tar.gz holding one file named `bin_name`"""
    tar_buffer = io.BytesIO()
    with tarfile.open(fileobj=tar_buffer, mode="w") as tar:
        info = tarfile.TarInfo(name=bin_name)
        info.size = len(content)
        info.mode = 0o755
        tar.addfile(info, io.BytesIO(content))
    return gzip.compress(tar_buffer.getvalue())


def publish_to_local_repo(
    repo_root: Path,
    bin_name: str,
    version: str,
    stream: str = "main",
    content: bytes = b"#!/bin/sh\necho hello\n",
    target: str = TEST_TARGET,
) -> None:
    """Lay out latest.toml and the versioned archive in a local repo dir"""
    latest = repo_root / latest_key(bin_name, target, stream)
    latest.parent.mkdir(parents=True, exist_ok=True)
    latest.write_text(f'[latest]\nversion = "{version}"\n')

    archive = repo_root / archive_key(bin_name, target, stream, version)
    archive.parent.mkdir(parents=True, exist_ok=True)
    archive.write_bytes(make_archive(bin_name, content))


@pytest.fixture
def binst_root(tmp_path):
    """Binst root; the path contains 'binst' so safe deletion accepts its tmp dirs"""
    root = tmp_path / "binst-home"
    root.mkdir()
    return root


@pytest.fixture
def paths(binst_root):
    return BinstPaths(binst_root)


@pytest.fixture
def repo_root(tmp_path):
    root = tmp_path / "repo"
    root.mkdir()
    return root


@pytest.fixture
def local_repo(repo_root):
    return LocalRepo(root_path=str(repo_root))


@pytest.fixture
def transfer():
    return ArtifactTransfer()
