# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Filesystem and process helpers shared by the install and publish flows.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Sequence

from binst.core.errors import BuildError, NotFoundError, UnsafeDeletionError

logger = logging.getLogger(__name__)

SAFE_DELETE_MARKER = "binst"


def safer_remove_dir(path: Path) -> None:
    """
    Recursively delete a binst scratch directory.

    Args:
        path: Directory to delete

    Raises:
        UnsafeDeletionError: If the path does not contain 'binst'
    """
    path_str = str(path)
    if SAFE_DELETE_MARKER not in path_str:
        raise UnsafeDeletionError(path_str)

    shutil.rmtree(path)
    logger.debug(f"Removed directory {path_str}")


def sym_link(original: Path, link: Path) -> Path:
    """
    Point `link` at `original`, replacing whatever is at `link`.

    The new link is created beside the old one and renamed over it, so
    `link` is never observed missing.

    Args:
        original: Link target
        link: Symlink path

    Returns:
        The symlink path
    """
    link.parent.mkdir(parents=True, exist_ok=True)
    staging = link.with_name(f".{link.name}.{os.getpid()}.tmp")
    if staging.is_symlink() or staging.exists():
        staging.unlink()
    os.symlink(original, staging)
    os.replace(staging, link)
    return link


def create_bin_symlink(bin_dir: Path, bin_name: str, unpacked_bin: Path) -> Path:
    """
    Symlink an unpacked binary into the binst bin dir.

    Args:
        bin_dir: The binst bin directory
        bin_name: Binary name (symlink name)
        unpacked_bin: The unpacked binary file

    Returns:
        Path of the symlink

    Raises:
        NotFoundError: If the unpacked binary does not exist
    """
    if not unpacked_bin.is_file():
        raise NotFoundError("Unpacked binary file", str(unpacked_bin))

    return sym_link(unpacked_bin, bin_dir / bin_name)


def run_command(cmd: Sequence[str]) -> None:
    """
    Run an external command, inheriting stdout/stderr.

    Raises:
        BuildError: If the command cannot be started or exits non-zero
    """
    command = " ".join(cmd)
    print(f"> executing: {command}")

    try:
        result = subprocess.run(list(cmd))
    except OSError as e:
        raise BuildError(command, str(e)) from e

    if result.returncode != 0:
        raise BuildError(command, f"exit status: {result.returncode}")


def get_toml_value(root: Dict[str, Any], keys: List[str]) -> Any:
    """
    Navigate a parsed TOML document.

    Raises:
        KeyError: If any key along the path is missing
    """
    value: Any = root
    for name in keys:
        if not isinstance(value, dict) or name not in value:
            raise KeyError(".".join(keys))
        value = value[name]
    return value


def get_toml_value_as_string(root: Dict[str, Any], keys: List[str]) -> str:
    """Same as get_toml_value, but the value must be a string"""
    value = get_toml_value(root, keys)
    if not isinstance(value, str):
        raise KeyError(".".join(keys))
    return value
