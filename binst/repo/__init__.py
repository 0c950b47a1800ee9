# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Repository Module

Each module does one thing:
- paths: local cache layout and remote key layout
- locator: repo location string -> Local/S3/Http descriptor
- versioning: semver parsing and stream derivation
- credentials: AWS credential resolution chain
- s3: S3 object access
- transfer: download/upload across all backends
- resolver: latest version lookup
"""

from .locator import BinRepo, HttpRepo, LocalRepo, RepoDescriptor, S3Repo, parse_repo
from .paths import BinstPaths, clean_path
from .resolver import VersionResolver
from .transfer import ArtifactTransfer
from .versioning import extract_stream, parse_version

__all__ = [
    "BinRepo",
    "HttpRepo",
    "LocalRepo",
    "RepoDescriptor",
    "S3Repo",
    "parse_repo",
    "BinstPaths",
    "clean_path",
    "VersionResolver",
    "ArtifactTransfer",
    "extract_stream",
    "parse_version",
]
