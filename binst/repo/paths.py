# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Path Layout

Single responsibility: derive local cache paths and remote keys.

Remote layout (same shape for local, S3 and HTTP repos):
    {bin_name}/{target}/{stream}/latest.toml
    {bin_name}/{target}/{stream}/v{version}/{bin_name}.tar.gz
    {bin_name}/{target}/{stream}/v{version}/{bin_name}.toml

Local layout (under the binst root):
    bin/{bin_name}                        -> symlink to unpacked binary
    packages/{bin_name}/v{version}/       archive, unpacked/, install.toml
    tmp/{bin_name}-{unix_millis}/         scratch dir, removed after use
"""

import time
from pathlib import Path
from typing import Optional, Union

from semver import Version

LATEST_TOML = "latest.toml"
INSTALL_TOML = "install.toml"
UNPACKED_DIR = "unpacked"
MAIN_STREAM = "main"

VersionLike = Union[Version, str]


def clean_path(uri: str) -> str:
    """
    Remove redundant '/' as well as leading and trailing '/'.

    The 'scheme://' delimiter, if any, is preserved.

    Examples:
        >>> clean_path("/path/")
        'path'
        >>> clean_path("https://example.net/foo/bar/")
        'https://example.net/foo/bar'
    """
    def cleaner(s: str) -> str:
        return "/".join(p for p in s.split("/") if p)

    return "://".join(cleaner(part) for part in uri.split("://", 1))


def version_part(version: VersionLike) -> str:
    """Version directory name, e.g. 'v1.2.0'"""
    return f"v{version}"


def archive_name(bin_name: str) -> str:
    return f"{bin_name}.tar.gz"


def bin_target_uri(bin_name: str, target: str, stream_or_path: str) -> str:
    """Base key for a package stream (or pinned path) on a given target"""
    return clean_path(f"{bin_name}/{target}/{stream_or_path}")


def latest_key(bin_name: str, target: str, stream: str) -> str:
    return f"{bin_target_uri(bin_name, target, stream)}/{LATEST_TOML}"


def package_key(bin_name: str, target: str, stream_or_path: str, version: Optional[VersionLike] = None) -> str:
    """
    Key of the directory holding the archive.

    Args:
        bin_name: Package binary name
        target: Platform target triple
        stream_or_path: Stream name, or pinned path
        version: Version for stream layouts; None for pinned paths

    Returns:
        '{bin}/{target}/{stream}/v{version}' or '{bin}/{target}/{path}'
    """
    base = bin_target_uri(bin_name, target, stream_or_path)
    if version is None:
        return base
    return f"{base}/{version_part(version)}"


def archive_key(bin_name: str, target: str, stream_or_path: str, version: Optional[VersionLike] = None) -> str:
    return f"{package_key(bin_name, target, stream_or_path, version)}/{archive_name(bin_name)}"


def package_doc_key(bin_name: str, target: str, stream_or_path: str, version: Optional[VersionLike] = None) -> str:
    return f"{package_key(bin_name, target, stream_or_path, version)}/{bin_name}.toml"


class BinstPaths:
    """Local filesystem layout rooted at the binst home (~/.binst)"""

    def __init__(self, root: Path):
        """
        Initialize path layout.

        Args:
            root: Binst root directory; tests pass an isolated tmp dir
        """
        self.root = Path(root)

    @property
    def bin_dir(self) -> Path:
        return self.root / "bin"

    @property
    def packages_dir(self) -> Path:
        return self.root / "packages"

    @property
    def tmp_root(self) -> Path:
        return self.root / "tmp"

    @property
    def env_file(self) -> Path:
        return self.root / "env"

    def bin_symlink(self, bin_name: str) -> Path:
        return self.bin_dir / bin_name

    def package_dir(self, bin_name: str, version: VersionLike) -> Path:
        return self.packages_dir / bin_name / version_part(version)

    def ensure_package_dir(self, bin_name: str, version: VersionLike) -> Path:
        """Create the package version dir if absent (idempotent)"""
        package_dir = self.package_dir(bin_name, version)
        package_dir.mkdir(parents=True, exist_ok=True)
        return package_dir

    def make_temp_dir(self, bin_name: str) -> Path:
        """
        Create a fresh scratch dir 'tmp/{bin_name}-{unix_millis}'.

        Returns:
            Path to the created directory
        """
        millis = time.time_ns() // 1_000_000
        tmp_dir = self.tmp_root / f"{bin_name}-{millis}"
        tmp_dir.mkdir(parents=True, exist_ok=False)
        return tmp_dir
