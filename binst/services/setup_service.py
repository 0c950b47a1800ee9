# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Setup Service - Installs the running binst executable into the binst root.

Layout produced:
    {root}/env                                 PATH snippet (kept if present)
    {root}/packages/binst/v{version}/unpacked/binst
    {root}/packages/binst/v{version}/install.toml
    {root}/bin/binst                           -> the unpacked copy
"""

import logging
import shutil
import sys
from pathlib import Path
from typing import Optional

from binst.core.errors import NotFoundError
from binst.models import InstallRecord
from binst.repo.paths import MAIN_STREAM, UNPACKED_DIR, BinstPaths
from binst.repo.versioning import parse_version
from binst.utils import create_bin_symlink

logger = logging.getLogger(__name__)

SELF_BIN = "binst"
SELF_REPO = "https://binst.io/self"

ENV_TEMPLATE = """#!/bin/sh
# binst shell setup
case ":${{PATH}}:" in
    *:"{bin_dir}":*)
        ;;
    *)
        export PATH="{bin_dir}:$PATH"
        ;;
esac
"""


class SetupService:
    """Bootstraps the binst root with binst itself"""

    def __init__(self, paths: BinstPaths, version: str, executable: Optional[Path] = None):
        """
        Args:
            paths: Local binst layout
            version: Version of the running binst
            executable: File to install (defaults to the running script)
        """
        self.paths = paths
        self.version = version
        self.executable = executable

    def _executable(self) -> Path:
        exe = self.executable or Path(sys.argv[0])
        exe = exe.resolve()
        if not exe.is_file():
            raise NotFoundError("binst executable", str(exe))
        return exe

    def write_env_file(self) -> Path:
        env_file = self.paths.env_file
        if env_file.exists():
            logger.debug(f"Keeping existing {env_file}")
            return env_file
        env_file.write_text(ENV_TEMPLATE.format(bin_dir=self.paths.bin_dir))
        return env_file

    def setup(self) -> Path:
        """
        Create the binst root and link the running executable into it.

        Returns:
            The bin symlink

        Raises:
            NotFoundError: The running executable cannot be located
            InvalidVersionError: `version` is not semver
        """
        version = parse_version(self.version, "binst")
        exe = self._executable()

        self.paths.root.mkdir(parents=True, exist_ok=True)
        self.paths.bin_dir.mkdir(parents=True, exist_ok=True)
        env_file = self.write_env_file()

        package_dir = self.paths.ensure_package_dir(SELF_BIN, version)
        unpacked_dir = package_dir / UNPACKED_DIR
        unpacked_dir.mkdir(exist_ok=True)
        unpacked_bin = unpacked_dir / SELF_BIN
        if not (unpacked_bin.exists() and unpacked_bin.samefile(exe)):
            shutil.copy2(exe, unpacked_bin)

        InstallRecord(repo=SELF_REPO, stream=MAIN_STREAM, version=str(version)).write(package_dir)
        symlink = create_bin_symlink(self.paths.bin_dir, SELF_BIN, unpacked_bin)

        logger.info(f"binst {version} set up in {self.paths.root}")
        print(
            f"binst {version} installed at {symlink}\n"
            f"Add binst to your PATH by adding this line to your shell profile:\n"
            f"  . \"{env_file}\""
        )
        return symlink
