# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Install Service - Installs the latest version of a package stream.

Steps, in order (see InstallState):
    resolve version -> download -> unpack -> write install.toml -> symlink

install.toml is written before the symlink, so a symlink never points at
a package without recorded provenance. Failures are not rolled back; a
re-run overwrites the partially populated package dir.
"""

import asyncio
import logging
import shutil
import tarfile
from pathlib import Path
from typing import Callable, Optional

from binst.archive import unpack_archive
from binst.core.errors import ArchiveError
from binst.core.logging import log_event
from binst.models import InstallRecord, InstallResult, InstallState
from binst.repo.locator import BinRepo
from binst.repo.paths import (
    MAIN_STREAM,
    UNPACKED_DIR,
    BinstPaths,
    archive_key,
    archive_name,
)
from binst.repo.resolver import VersionResolver
from binst.repo.transfer import ArtifactTransfer
from binst.target import os_target
from binst.utils import create_bin_symlink, safer_remove_dir

logger = logging.getLogger(__name__)


class InstallService:
    """Downloads, unpacks and links package versions into the binst root"""

    def __init__(
        self,
        paths: BinstPaths,
        transfer: ArtifactTransfer,
        resolver: Optional[VersionResolver] = None,
        target_resolver: Callable[[], str] = os_target,
    ):
        """
        Initialize InstallService.

        Args:
            paths: Local binst layout (root is injectable for tests)
            transfer: Artifact transfer for all repo backends
            resolver: Version resolver (defaults to one over `transfer`)
            target_resolver: Returns the host platform target triple
        """
        self.paths = paths
        self.transfer = transfer
        self.resolver = resolver or VersionResolver(transfer)
        self.target_resolver = target_resolver
        self.state: Optional[InstallState] = None

    def _enter(self, state: InstallState) -> None:
        self.state = state
        logger.debug(f"Install state: {state.value}")

    async def install(self, bin_repo: BinRepo, stream: str = MAIN_STREAM) -> InstallResult:
        """
        Install the latest version of `stream` from the repo's install location.

        Args:
            bin_repo: Package name and repos for this command
            stream: Release stream (default 'main')

        Returns:
            Install result with all resulting paths

        Raises:
            NotFoundError: latest.toml, the archive, or the unpacked binary is missing
            InvalidVersionError: latest.toml is malformed
            TransportError: The repo could not be reached
            ArchiveError: The archive could not be unpacked
            UnsafeDeletionError: The temp dir failed the safe-delete check
        """
        bin_name = bin_repo.bin_name
        repo = bin_repo.install_repo
        target = bin_repo.target or self.target_resolver()
        tmp_dir: Optional[Path] = None

        self._enter(InstallState.RESOLVING_VERSION)
        try:
            version = await self.resolver.latest_version(repo, bin_name, target, stream)

            # -- Download into a scratch dir
            self._enter(InstallState.DOWNLOADING)
            tmp_dir = self.paths.make_temp_dir(bin_name)
            tmp_gz = tmp_dir / archive_name(bin_name)
            download_url = await self.transfer.download(
                repo, archive_key(bin_name, target, stream, version), tmp_gz
            )

            # -- Unpack into the package dir
            self._enter(InstallState.UNPACKING)
            package_dir = self.paths.ensure_package_dir(bin_name, version)
            gz_path = package_dir / archive_name(bin_name)
            await asyncio.to_thread(shutil.copyfile, tmp_gz, gz_path)

            unpacked_dir = package_dir / UNPACKED_DIR
            tar_path = package_dir / f"{bin_name}.tar"
            try:
                await asyncio.to_thread(unpack_archive, gz_path, tar_path, unpacked_dir)
            except (tarfile.TarError, OSError) as e:
                raise ArchiveError(str(gz_path), str(e)) from e

            # -- Record provenance, then expose the binary
            self._enter(InstallState.WRITING_INSTALL_RECORD)
            InstallRecord(repo=repo.url, stream=stream, version=str(version)).write(package_dir)

            self._enter(InstallState.SYMLINKING)
            symlink_path = create_bin_symlink(self.paths.bin_dir, bin_name, unpacked_dir / bin_name)

            self._enter(InstallState.DONE)
        except Exception:
            logger.info(f"Install of {bin_name} failed while {self.state.value}")
            self.state = InstallState.FAILED
            raise
        finally:
            if tmp_dir is not None:
                safer_remove_dir(tmp_dir)

        log_event(logger, "package_installed", bin_name=bin_name, version=str(version), url=download_url)
        return InstallResult(
            bin_name=bin_name,
            version=str(version),
            stream=stream,
            download_url=download_url,
            archive_path=gz_path,
            unpacked_dir=unpacked_dir,
            symlink_path=symlink_path,
        )
