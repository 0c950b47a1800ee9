# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Core utilities and shared modules for binst.

This package contains:
- config: Configuration management
- errors: Custom exceptions
- logging: Logger setup
"""

from binst.core.config import load_config, Config
from binst.core.errors import (
    BinstError,
    ParseError,
    NotFoundError,
    InvalidVersionError,
    TransportError,
    CredentialError,
    UnsupportedOperationError,
    UnsafeDeletionError,
    BuildError,
    ArchiveError,
    ConfigurationError,
)
from binst.core.logging import get_logger

__all__ = [
    "load_config",
    "Config",
    "BinstError",
    "ParseError",
    "NotFoundError",
    "InvalidVersionError",
    "TransportError",
    "CredentialError",
    "UnsupportedOperationError",
    "UnsafeDeletionError",
    "BuildError",
    "ArchiveError",
    "ConfigurationError",
    "get_logger",
]
