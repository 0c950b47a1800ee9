# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit Tests for local and remote path layout
"""

import re

import pytest
from semver import Version

from binst.repo.paths import (
    BinstPaths,
    archive_key,
    clean_path,
    latest_key,
    package_doc_key,
    package_key,
)


class TestCleanPath:
    """Test suite for clean_path"""

    @pytest.mark.parametrize("raw, expected", [
        ("/path/", "path"),
        ("path/", "path"),
        ("/path", "path"),
        ("path//to///file", "path/to/file"),
        ("https://example.net/foo/bar/", "https://example.net/foo/bar"),
        ("https://example.net//foo//bar", "https://example.net/foo/bar"),
        ("s3://bucket//base/", "s3://bucket/base"),
        ("", ""),
    ])
    def test_examples(self, raw, expected):
        """Test redundant and surrounding slashes are removed"""
        assert clean_path(raw) == expected

    def test_idempotent(self):
        """Test cleaning twice changes nothing"""
        for raw in ["//a//b//", "https://host//x/", "plain"]:
            once = clean_path(raw)
            assert clean_path(once) == once


class TestRemoteKeys:
    """Test suite for repository key derivation"""

    def test_latest_key(self):
        assert latest_key("hello", "x86_64-apple-darwin", "main") == "hello/x86_64-apple-darwin/main/latest.toml"

    def test_versioned_archive_key(self):
        key = archive_key("hello", "x86_64-apple-darwin", "rc", Version.parse("1.0.0-rc.1"))
        assert key == "hello/x86_64-apple-darwin/rc/v1.0.0-rc.1/hello.tar.gz"

    def test_pinned_path_has_no_version_dir(self):
        assert package_key("hello", "t", "nightly") == "hello/t/nightly"
        assert archive_key("hello", "t", "nightly") == "hello/t/nightly/hello.tar.gz"
        assert package_doc_key("hello", "t", "nightly") == "hello/t/nightly/hello.toml"

    def test_pinned_path_is_cleaned(self):
        assert package_key("hello", "t", "/some//path/") == "hello/t/some/path"


class TestBinstPaths:
    """Test suite for the local layout"""

    def test_layout(self, binst_root):
        paths = BinstPaths(binst_root)

        assert paths.bin_symlink("hello") == binst_root / "bin" / "hello"
        assert paths.package_dir("hello", "1.2.0") == binst_root / "packages" / "hello" / "v1.2.0"
        assert paths.env_file == binst_root / "env"

    def test_ensure_package_dir_is_idempotent(self, paths):
        first = paths.ensure_package_dir("hello", "1.2.0")
        second = paths.ensure_package_dir("hello", "1.2.0")

        assert first == second
        assert first.is_dir()

    def test_make_temp_dir(self, paths):
        tmp_dir = paths.make_temp_dir("hello")

        assert tmp_dir.is_dir()
        assert tmp_dir.parent == paths.tmp_root
        assert re.fullmatch(r"hello-\d+", tmp_dir.name)
