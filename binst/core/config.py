# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
binst Configuration - Single source of truth.
YAML for tool settings. Env vars ONLY for the root location, log level and secrets.

Everything lives under the binst root (~/.binst by default):
- config.yaml   optional tool settings
- bin/          symlinks to installed binaries
- packages/     unpacked package versions
- tmp/          per-operation scratch dirs
"""

import os
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List

from binst.core.errors import ConfigurationError


BINST_DIR = ".binst"
BINST_CONFIG_FILE = "config.yaml"

BINST_REPO_URL = "https://repo.binst.io/"
BINST_REPO_BUCKET = "binst-repo"
BINST_REPO_AWS_PROFILE = "binst-repo-user"


def default_root() -> Path:
    """Binst root from BINST_HOME, else ~/.binst"""
    env_root = os.getenv("BINST_HOME")
    if env_root:
        return Path(env_root).expanduser()
    return Path.home() / BINST_DIR


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Immutable tool configuration.
    All values from YAML. No hidden state.
    """

    # -- Paths --
    root: Path = field(default_factory=default_root)

    # -- Repositories --
    default_install_repo: str = BINST_REPO_URL
    default_publish_repo: str = f"s3://{BINST_REPO_BUCKET}"
    default_publish_profile: Optional[str] = BINST_REPO_AWS_PROFILE

    # -- Transfer --
    http_timeout: float = 30.0
    download_chunk_size: int = 64 * 1024

    # -- Publish --
    manifest_path: str = "Cargo.toml"
    build_command: List[str] = field(default_factory=lambda: ["cargo", "build", "--release"])

    # -- Runtime --
    log_level: str = "WARNING"
    log_format: str = "text"

    @property
    def config_file(self) -> Path:
        return self.root / BINST_CONFIG_FILE


# =============================================================================
# LOADER
# =============================================================================

def load_config(path: Optional[Path] = None, root: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML.
    Returns defaults if file doesn't exist.

    Args:
        path: Explicit config file (defaults to {root}/config.yaml)
        root: Binst root (defaults to BINST_HOME or ~/.binst)

    Raises:
        ConfigurationError: If the file exists but is not valid YAML
    """
    root = root or default_root()
    path = path or root / BINST_CONFIG_FILE

    y = {}
    if path.exists():
        try:
            with open(path) as f:
                y = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid config file: {e}", config_file=str(path)) from e

    if not isinstance(y, dict):
        raise ConfigurationError("Config file must be a YAML mapping", config_file=str(path))

    # Helper to safely navigate nested dicts
    def get(d: dict, *keys, default=None):
        for k in keys:
            if not isinstance(d, dict):
                return default
            d = d.get(k, {})
        return d if d != {} else default

    defaults = Config(root=root)

    return Config(
        root=root,

        # Repositories
        default_install_repo=get(y, "repos", "install") or defaults.default_install_repo,
        default_publish_repo=get(y, "repos", "publish") or defaults.default_publish_repo,
        default_publish_profile=get(y, "repos", "publish_profile") or defaults.default_publish_profile,

        # Transfer
        http_timeout=float(get(y, "http", "timeout") or defaults.http_timeout),
        download_chunk_size=int(get(y, "transfer", "chunk_size") or defaults.download_chunk_size),

        # Publish
        manifest_path=get(y, "publish", "manifest") or defaults.manifest_path,
        build_command=get(y, "publish", "build_command") or defaults.build_command,

        # Runtime
        log_level=os.getenv("BINST_LOG_LEVEL") or get(y, "logging", "level") or defaults.log_level,
        log_format=get(y, "logging", "format") or defaults.log_format,
    )


