# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit Tests for filesystem and process helpers
"""

import os
import sys

import pytest

from binst.core.errors import BuildError, NotFoundError, UnsafeDeletionError
from binst.utils import (
    create_bin_symlink,
    get_toml_value,
    get_toml_value_as_string,
    run_command,
    safer_remove_dir,
    sym_link,
)


class TestSaferRemoveDir:
    """Test suite for safer_remove_dir"""

    def test_removes_binst_path(self, binst_root):
        target = binst_root / "tmp" / "hello-1"
        (target / "nested").mkdir(parents=True)
        (target / "nested" / "file").write_text("x")

        safer_remove_dir(target)

        assert not target.exists()

    def test_refuses_path_without_marker(self, tmp_path):
        target = tmp_path / "scratch"
        target.mkdir()

        if "binst" in str(target):
            pytest.skip("pytest tmp path already contains the marker")

        with pytest.raises(UnsafeDeletionError):
            safer_remove_dir(target)

        assert target.exists()


class TestSymlinks:
    """Test suite for symlink creation"""

    def test_sym_link_replaces_existing(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.write_text("1")
        second.write_text("2")
        link = tmp_path / "bin" / "hello"

        sym_link(first, link)
        sym_link(second, link)

        assert link.is_symlink()
        assert os.readlink(link) == str(second)
        assert link.read_text() == "2"
        assert sorted(p.name for p in link.parent.iterdir()) == ["hello"]

    def test_create_bin_symlink_requires_binary(self, tmp_path):
        with pytest.raises(NotFoundError, match="Unpacked binary file"):
            create_bin_symlink(tmp_path / "bin", "hello", tmp_path / "missing")


class TestRunCommand:
    """Test suite for run_command"""

    def test_success(self):
        run_command([sys.executable, "-c", "pass"])

    def test_non_zero_exit(self):
        with pytest.raises(BuildError, match="exit status: 3"):
            run_command([sys.executable, "-c", "raise SystemExit(3)"])

    def test_missing_program(self):
        with pytest.raises(BuildError):
            run_command(["binst-no-such-program-xyz"])


class TestTomlValues:
    """Test suite for TOML navigation helpers"""

    def test_nested_value(self):
        doc = {"package": {"name": "hello", "version": "1.0.0"}}
        assert get_toml_value(doc, ["package", "name"]) == "hello"

    def test_missing_key(self):
        with pytest.raises(KeyError):
            get_toml_value({"package": {}}, ["package", "name"])

    def test_not_a_string(self):
        with pytest.raises(KeyError):
            get_toml_value_as_string({"package": {"version": 1}}, ["package", "version"])
