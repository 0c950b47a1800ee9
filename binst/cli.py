# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
binst command line.

    binst self
    binst publish [-r REPO] [-p PATH] [--profile P] [-t TARGET]
    binst install BIN [-r REPO] [-s STREAM] [--profile P]
    binst update BIN [-r REPO] [--profile P]
    binst info BIN [-r REPO] [-s STREAM] [--profile P]

Command output goes to stdout, logs to stderr. Any failure prints one
error line and exits with status 1.
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from binst import __version__
from binst.core.config import Config, load_config
from binst.core.errors import BinstError, sanitize_error_for_user
from binst.core.logging import get_logger
from binst.repo.locator import BinRepo
from binst.repo.paths import MAIN_STREAM, BinstPaths
from binst.repo.resolver import VersionResolver
from binst.repo.transfer import ArtifactTransfer
from binst.services import (
    InfoService,
    InstallService,
    PublishService,
    SetupService,
    UpdateService,
    ensure_publishable,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="binst",
        description="Decentralized binary installer and publisher",
    )
    parser.add_argument("--version", action="version", version=f"binst {__version__}")
    parser.add_argument(
        "--log-level",
        help="Log level (default: from config.yaml or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("self", help="Install binst itself into the binst root")

    publish = subparsers.add_parser("publish", help="Build and publish the current project")
    publish.add_argument("-r", "--repo", help="Repo to publish to (s3://bucket/base or local dir)")
    publish.add_argument("-p", "--path", help="Publish at a pinned path instead of the version stream")
    publish.add_argument("--profile", help="AWS profile for S3 repos")
    publish.add_argument("-t", "--target", help="Build target triple (cross compilation)")

    install = subparsers.add_parser("install", help="Install the latest version of a package")
    install.add_argument("bin_name", help="Package binary name")
    install.add_argument("-r", "--repo", help="Repo to install from")
    install.add_argument("-s", "--stream", default=MAIN_STREAM, help="Release stream (default: main)")
    install.add_argument("--profile", help="AWS profile for S3 repos")

    update = subparsers.add_parser("update", help="Update an installed package")
    update.add_argument("bin_name", help="Package binary name")
    update.add_argument("-r", "--repo", help="Repo to update from (default: repo recorded at install)")
    update.add_argument("--profile", help="AWS profile for S3 repos")

    info = subparsers.add_parser("info", help="Show the latest version of a package")
    info.add_argument("bin_name", help="Package binary name")
    info.add_argument("-r", "--repo", help="Repo to query")
    info.add_argument("-s", "--stream", default=MAIN_STREAM, help="Release stream (default: main)")
    info.add_argument("--profile", help="AWS profile for S3 repos")

    return parser


def _bin_repo(config: Config, bin_name: str, args: argparse.Namespace) -> BinRepo:
    return BinRepo.from_args(
        bin_name,
        repo=args.repo,
        profile=args.profile,
        target=getattr(args, "target", None),
        default_install_repo=config.default_install_repo,
        default_publish_repo=config.default_publish_repo,
        default_publish_profile=config.default_publish_profile,
    )


async def _dispatch(config: Config, args: argparse.Namespace) -> None:
    paths = BinstPaths(config.root)
    transfer = ArtifactTransfer(http_timeout=config.http_timeout, chunk_size=config.download_chunk_size)
    installer = InstallService(paths, transfer)

    if args.command == "self":
        SetupService(paths, __version__).setup()

    elif args.command == "publish":
        publisher = PublishService(
            paths,
            transfer,
            manifest_path=config.manifest_path,
            build_command=config.build_command,
        )
        # repo is checked before the manifest is read
        bin_repo = _bin_repo(config, "", args)
        ensure_publishable(bin_repo.publish_repo)
        bin_name, _ = publisher.read_manifest()
        await publisher.publish(replace(bin_repo, bin_name=bin_name), at_path=args.path)

    elif args.command == "install":
        result = await installer.install(_bin_repo(config, args.bin_name, args), args.stream)
        print(result.summary())

    elif args.command == "update":
        result = await UpdateService(paths, installer).update(
            args.bin_name, repo=args.repo, profile=args.profile
        )
        if result.install is not None:
            print(result.install.summary())

    elif args.command == "info":
        bin_repo = _bin_repo(config, args.bin_name, args)
        version, url = await InfoService(VersionResolver(transfer)).info(bin_repo, args.stream)
        print(f"Info for binary: {args.bin_name}")
        print(f"  Latest Version: {version}")
        print(f"  Latest URL:     {url}")

    else:
        raise ValueError(f"Unknown command: {args.command}")


def run(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments and run one command.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config()
        get_logger("binst", args.log_level or config.log_level, config.log_format)
        asyncio.run(_dispatch(config, args))
    except BinstError as e:
        logger.debug("Command failed", extra={"error": e.to_dict()})
        print(f"Error: {sanitize_error_for_user(e, include_type=False)}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        print(f"Error: {sanitize_error_for_user(e)}", file=sys.stderr)
        return 1

    return 0


def main():
    sys.exit(run())
