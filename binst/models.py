# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
binst Data Models

TOML documents exchanged with repositories and written into the local
package cache, plus the results returned by the install/publish/update flows.
"""

import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli_w
from pydantic import BaseModel, Field


class InstallState(str, Enum):
    """Install progress, in order"""
    RESOLVING_VERSION = "resolving_version"
    DOWNLOADING = "downloading"
    UNPACKING = "unpacking"
    WRITING_INSTALL_RECORD = "writing_install_record"
    SYMLINKING = "symlinking"
    DONE = "done"
    FAILED = "failed"


class LatestDocument(BaseModel):
    """
    latest.toml, at the root of each stream.

    Example:
        [latest]
        version = "1.2.0"
    """
    version: str

    def to_toml(self) -> str:
        return tomli_w.dumps({"latest": self.model_dump()})


class PackageManifest(BaseModel):
    """{bin_name}.toml, uploaded next to each archive"""
    name: str
    stream: str
    version: str
    path: Optional[str] = None

    def to_toml(self) -> str:
        return tomli_w.dumps({"package": self.model_dump(exclude_none=True)})


class InstallRecord(BaseModel):
    """
    install.toml, written into each package version dir.

    Lets `update` find the origin repo and stream without arguments.
    """
    repo: Optional[str] = None
    stream: str = "main"
    version: Optional[str] = None

    def to_toml(self) -> str:
        return tomli_w.dumps({"install": self.model_dump(exclude_none=True)})

    def write(self, package_dir: Path) -> Path:
        """Write install.toml into the package dir"""
        install_path = package_dir / "install.toml"
        install_path.write_text(self.to_toml())
        return install_path

    @classmethod
    def from_toml(cls, content: str) -> "InstallRecord":
        data: Dict[str, Any] = tomllib.loads(content)
        return cls(**data.get("install", {}))


class InstallResult(BaseModel):
    """Outcome of a completed install"""
    bin_name: str
    version: str
    stream: str
    download_url: str
    archive_path: Path
    unpacked_dir: Path
    symlink_path: Path

    def summary(self) -> str:
        return (
            f"Install Complete - package: {self.bin_name} - version: {self.version}\n"
            f"  Downloaded from:  {self.download_url}\n"
            f"  Downloaded   to:  {self.archive_path}\n"
            f"  Unpacked     at:  {self.unpacked_dir}\n"
            f"  Symlinked    at:  {self.symlink_path}"
        )


class PublishResult(BaseModel):
    """Outcome of a completed publish"""
    bin_name: str
    version: str
    stream: str
    path: Optional[str] = None
    uploaded: List[str] = Field(default_factory=list)


class UpdateResult(BaseModel):
    """Outcome of an update check"""
    bin_name: str
    repo: str
    installed_version: str
    origin_version: str
    updated: bool
    install: Optional[InstallResult] = None
