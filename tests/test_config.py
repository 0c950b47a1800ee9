# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit Tests for configuration loading
"""

import pytest

from binst.core.config import BINST_REPO_URL, load_config
from binst.core.errors import ConfigurationError


class TestLoadConfig:
    """Test suite for load_config"""

    def test_defaults_without_file(self, binst_root, monkeypatch):
        monkeypatch.delenv("BINST_LOG_LEVEL", raising=False)
        config = load_config(root=binst_root)

        assert config.root == binst_root
        assert config.default_install_repo == BINST_REPO_URL
        assert config.build_command == ["cargo", "build", "--release"]
        assert config.log_level == "WARNING"

    def test_values_from_yaml(self, binst_root, monkeypatch):
        monkeypatch.delenv("BINST_LOG_LEVEL", raising=False)
        (binst_root / "config.yaml").write_text(
            "repos:\n"
            "  install: https://mirror.example.net\n"
            "http:\n"
            "  timeout: 5\n"
            "publish:\n"
            "  build_command: [make, release]\n"
            "logging:\n"
            "  level: DEBUG\n"
        )

        config = load_config(root=binst_root)

        assert config.default_install_repo == "https://mirror.example.net"
        assert config.http_timeout == 5.0
        assert config.build_command == ["make", "release"]
        assert config.log_level == "DEBUG"

    def test_env_overrides_log_level(self, binst_root, monkeypatch):
        monkeypatch.setenv("BINST_LOG_LEVEL", "ERROR")
        assert load_config(root=binst_root).log_level == "ERROR"

    def test_invalid_yaml(self, binst_root):
        (binst_root / "config.yaml").write_text("repos: [unclosed\n")

        with pytest.raises(ConfigurationError):
            load_config(root=binst_root)

    def test_non_mapping(self, binst_root):
        (binst_root / "config.yaml").write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(root=binst_root)
