# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Update Service - Compares an installed binary against its origin repo.

The installed version and provenance come from the filesystem only:
    bin/{bin} -> packages/{bin}/v{version}/unpacked/{bin}
    packages/{bin}/v{version}/install.toml
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from semver import Version

from binst.core.errors import NotFoundError
from binst.models import InstallRecord, UpdateResult
from binst.repo.locator import BinRepo
from binst.repo.paths import INSTALL_TOML, BinstPaths
from binst.repo.versioning import is_newer, parse_version

from .install_service import InstallService

logger = logging.getLogger(__name__)


@dataclass
class InstalledBin:
    """What is currently installed for a binary"""
    bin_name: str
    version: Version
    package_dir: Path
    record: InstallRecord


class UpdateService:
    """Installs the origin's latest version when it is newer than the local one"""

    def __init__(self, paths: BinstPaths, installer: InstallService):
        self.paths = paths
        self.installer = installer

    def installed_bin(self, bin_name: str) -> InstalledBin:
        """
        Locate the installed package behind the bin symlink.

        Args:
            bin_name: Binary name

        Returns:
            Installed version, package dir and install record

        Raises:
            NotFoundError: No symlink, dangling symlink, or no install.toml
            InvalidVersionError: The package dir name is not v{semver}
        """
        symlink = self.paths.bin_symlink(bin_name)
        try:
            unpacked_bin = symlink.resolve(strict=True)
        except (FileNotFoundError, RuntimeError) as e:
            raise NotFoundError("Installed binary", str(symlink)) from e

        # unpacked/{bin} -> unpacked -> v{version}
        package_dir = unpacked_bin.parent.parent
        version = parse_version(package_dir.name.removeprefix("v"), str(package_dir))

        install_toml = package_dir / INSTALL_TOML
        if not install_toml.is_file():
            raise NotFoundError("install.toml", str(install_toml))
        record = InstallRecord.from_toml(install_toml.read_text())

        return InstalledBin(bin_name=bin_name, version=version, package_dir=package_dir, record=record)

    async def update(
        self,
        bin_name: str,
        repo: Optional[str] = None,
        profile: Optional[str] = None,
    ) -> UpdateResult:
        """
        Update a binary if its origin has a newer version on the recorded stream.

        Args:
            bin_name: Binary name
            repo: Repo override; defaults to the repo recorded in install.toml
            profile: AWS profile for S3 repos

        Returns:
            Update result (install details when an install happened)

        Raises:
            NotFoundError: Nothing installed, or no repo known
            BinstError: Any resolver or install failure
        """
        installed = self.installed_bin(bin_name)
        repo_location = repo or installed.record.repo
        if not repo_location:
            raise NotFoundError(
                "Repo in argument or in install.toml",
                str(installed.package_dir / INSTALL_TOML),
            )

        bin_repo = BinRepo.from_args(bin_name, repo=repo_location, profile=profile)
        stream = installed.record.stream
        print(f"Updating {bin_name} from repo {repo_location}")

        target = bin_repo.target or self.installer.target_resolver()
        origin_version = await self.installer.resolver.latest_version(
            bin_repo.install_repo, bin_name, target, stream
        )

        result = UpdateResult(
            bin_name=bin_name,
            repo=repo_location,
            installed_version=str(installed.version),
            origin_version=str(origin_version),
            updated=False,
        )

        if not is_newer(origin_version, installed.version):
            print(
                f"No need to update {bin_name}, local version {installed.version}"
                f" is same or higher than remote version {origin_version}"
            )
            return result

        print(f"Installing remote version {origin_version} ( > local version {installed.version})")
        install = await self.installer.install(bin_repo, stream)
        result.updated = True
        result.install = install
        return result
