# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Package archive codec: a single binary in a gzip-compressed tar.

Packing and unpacking go through an intermediate .tar file so neither
side holds the whole archive in memory.
"""

import gzip
import logging
import shutil
import tarfile
from pathlib import Path

logger = logging.getLogger(__name__)


def pack_binary(bin_file: Path, bin_name: str, work_dir: Path) -> Path:
    """
    Pack a binary into {work_dir}/{bin_name}.tar.gz.

    The binary is stored at the archive root under `bin_name`.

    Args:
        bin_file: The binary to pack
        bin_name: Name of the binary inside the archive
        work_dir: Directory receiving the .tar and .tar.gz

    Returns:
        Path to the .tar.gz file
    """
    tar_path = work_dir / f"{bin_name}.tar"
    with tarfile.open(tar_path, "w") as tar:
        tar.add(bin_file, arcname=bin_name)

    gz_path = work_dir / f"{bin_name}.tar.gz"
    with open(tar_path, "rb") as src, gzip.open(gz_path, "wb") as dst:
        shutil.copyfileobj(src, dst)

    logger.debug(f"Packed {bin_file} into {gz_path}")
    return gz_path


def unpack_archive(gz_path: Path, tar_path: Path, dest_dir: Path) -> Path:
    """
    Decompress then untar a package archive.

    Args:
        gz_path: The downloaded .tar.gz
        tar_path: Where to write the intermediate .tar (removed afterwards)
        dest_dir: Extraction directory (created if absent)

    Returns:
        The extraction directory

    Raises:
        OSError, tarfile.TarError: If the archive is corrupt or cannot be written
    """
    dest_dir.mkdir(parents=True, exist_ok=True)

    with gzip.open(gz_path, "rb") as src, open(tar_path, "wb") as dst:
        shutil.copyfileobj(src, dst)

    with tarfile.open(tar_path, "r") as tar:
        tar.extractall(dest_dir, filter="data")

    tar_path.unlink()
    logger.debug(f"Unpacked {gz_path} into {dest_dir}")
    return dest_dir
