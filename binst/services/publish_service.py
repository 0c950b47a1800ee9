# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Publish Service - Builds, packs and uploads the current project.

Upload order for a stream publish:
    1. {bin}/{target}/{stream}/latest.toml
    2. {bin}/{target}/{stream}/v{version}/{bin}.tar.gz
    3. {bin}/{target}/{stream}/v{version}/{bin}.toml

A pinned publish (--path NAME) skips latest.toml and writes the archive and
package document directly under {bin}/{target}/{NAME}/.
"""

import asyncio
import logging
import shutil
import tomllib
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from semver import Version

from binst.archive import pack_binary
from binst.core.errors import ConfigurationError, NotFoundError, UnsupportedOperationError
from binst.core.logging import log_event
from binst.models import LatestDocument, PackageManifest, PublishResult
from binst.repo.locator import BinRepo, HttpRepo, RepoDescriptor
from binst.repo.paths import (
    LATEST_TOML,
    BinstPaths,
    archive_key,
    clean_path,
    latest_key,
    package_doc_key,
)
from binst.repo.transfer import ArtifactTransfer
from binst.repo.versioning import extract_stream, parse_version
from binst.target import os_target
from binst.utils import get_toml_value_as_string, run_command, safer_remove_dir

logger = logging.getLogger(__name__)

DEFAULT_BUILD_COMMAND = ["cargo", "build", "--release"]


def ensure_publishable(repo: RepoDescriptor) -> None:
    """Raise UnsupportedOperationError for read-only (HTTP) repos"""
    if isinstance(repo, HttpRepo):
        raise UnsupportedOperationError("http protocols not supported for publish", backend="http")


class PublishService:
    """Publishes the project's release binary to a local or S3 repo"""

    def __init__(
        self,
        paths: BinstPaths,
        transfer: ArtifactTransfer,
        project_dir: Path = Path("."),
        manifest_path: str = "Cargo.toml",
        build_command: Optional[Sequence[str]] = None,
        builder: Callable[[Sequence[str]], None] = run_command,
        target_resolver: Callable[[], str] = os_target,
    ):
        """
        Initialize PublishService.

        Args:
            paths: Local binst layout (for the scratch dir)
            transfer: Artifact transfer
            project_dir: Project root holding the manifest and target/
            manifest_path: Manifest file, relative to project_dir
            build_command: Release build command (without --target)
            builder: Runs the build command; tests substitute a fake
            target_resolver: Returns the host platform target triple
        """
        self.paths = paths
        self.transfer = transfer
        self.project_dir = Path(project_dir)
        self.manifest_path = manifest_path
        self.build_command = list(build_command or DEFAULT_BUILD_COMMAND)
        self.builder = builder
        self.target_resolver = target_resolver

    def read_manifest(self) -> Tuple[str, Version]:
        """
        Read `[package] name` and `version` from the project manifest.

        Raises:
            NotFoundError: If the manifest file is missing
            ConfigurationError: If it is not TOML or lacks name/version
            InvalidVersionError: If the version is not semver
        """
        manifest = self.project_dir / self.manifest_path
        if not manifest.is_file():
            raise NotFoundError("Project manifest", str(manifest))

        try:
            toml = tomllib.loads(manifest.read_text())
            name = get_toml_value_as_string(toml, ["package", "name"])
            version = get_toml_value_as_string(toml, ["package", "version"])
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid manifest: {e}", config_file=str(manifest)) from e
        except KeyError as e:
            raise ConfigurationError(
                f"Manifest has no {e.args[0]}", config_file=str(manifest)
            ) from e

        return name, parse_version(version, str(manifest))

    def release_bin(self, bin_name: str, target: Optional[str] = None) -> Path:
        """./target[/T]/release/{bin_name}"""
        target_dir = self.project_dir / "target"
        if target:
            target_dir = target_dir / target
        return target_dir / "release" / bin_name

    def build(self, target: Optional[str] = None) -> None:
        cmd = list(self.build_command)
        if target:
            cmd += ["--target", target]
        self.builder(cmd)

    async def publish(self, bin_repo: BinRepo, at_path: Optional[str] = None) -> PublishResult:
        """
        Build the release binary and upload it to the publish repo.

        Args:
            bin_repo: Package name (from the manifest) and repos
            at_path: Pinned path; publishes outside the stream layout

        Returns:
            Publish result listing every uploaded location

        Raises:
            UnsupportedOperationError: The publish repo is HTTP
            BuildError: The build command failed
            NotFoundError: Manifest or release binary missing
            TransportError: Upload failed
        """
        repo = bin_repo.publish_repo
        ensure_publishable(repo)

        bin_name = bin_repo.bin_name
        _, version = self.read_manifest()
        stream = extract_stream(version)
        path = clean_path(at_path) if at_path else None
        target = bin_repo.target or self.target_resolver()

        print(f"Publishing package: {bin_name} | version: {version} | to: {repo.url}")

        self.build(bin_repo.target)
        bin_file = self.release_bin(bin_name, bin_repo.target)
        if not bin_file.is_file():
            raise NotFoundError("Release binary", str(bin_file))

        uploaded: List[str] = []
        tmp_dir = self.paths.make_temp_dir(bin_name)
        try:
            # -- Pack
            to_pack = tmp_dir / "to_pack"
            to_pack.mkdir()
            staged_bin = to_pack / bin_name
            await asyncio.to_thread(shutil.copy2, bin_file, staged_bin)

            print(f"packing: {staged_bin}")
            gz_path = await asyncio.to_thread(pack_binary, staged_bin, bin_name, tmp_dir)
            print(f"packed: {gz_path}")

            latest_doc = LatestDocument(version=str(version)).to_toml()
            package_doc = PackageManifest(
                name=bin_name, stream=stream, version=str(version), path=path
            ).to_toml()
            (tmp_dir / LATEST_TOML).write_text(latest_doc)
            (tmp_dir / "package.toml").write_text(package_doc)

            # -- Upload
            if path is None:
                stream_or_path, key_version = stream, version
                url = await self.transfer.upload_text(repo, latest_key(bin_name, target, stream), latest_doc)
                uploaded.append(url)
                print(f"uploaded: {url}")
            else:
                stream_or_path, key_version = path, None

            url = await self.transfer.upload_file(
                repo, archive_key(bin_name, target, stream_or_path, key_version), gz_path
            )
            uploaded.append(url)
            print(f"uploaded: {url}")

            url = await self.transfer.upload_text(
                repo, package_doc_key(bin_name, target, stream_or_path, key_version), package_doc
            )
            uploaded.append(url)
            print(f"uploaded: {url}")
        finally:
            safer_remove_dir(tmp_dir)

        log_event(logger, "package_published", bin_name=bin_name, version=str(version), uploaded=uploaded)
        return PublishResult(
            bin_name=bin_name,
            version=str(version),
            stream=stream,
            path=path,
            uploaded=uploaded,
        )
