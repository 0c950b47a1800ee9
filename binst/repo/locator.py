# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Repository Locator

Single responsibility: turn a repo location string into a backend descriptor.

    s3://bucket/base      -> S3Repo
    http(s)://host/base   -> HttpRepo (install only)
    anything else         -> LocalRepo
"""

from dataclasses import dataclass
from typing import Optional, Union

from binst.core.config import BINST_REPO_AWS_PROFILE, BINST_REPO_BUCKET, BINST_REPO_URL
from binst.core.errors import ParseError

from .paths import clean_path

S3_SCHEME = "s3://"


@dataclass(frozen=True)
class LocalRepo:
    """Local directory acting as repository root"""
    root_path: str

    @property
    def url(self) -> str:
        return self.root_path


@dataclass(frozen=True)
class S3Repo:
    """S3 bucket location, optionally under a base prefix"""
    url: str
    bucket: str
    base: str = ""
    profile: Optional[str] = None

    def full_key(self, key: str) -> str:
        """Key relative to the bucket root"""
        if not self.base:
            return key
        return f"{self.base}/{key}"

    def s3_url(self, key: str) -> str:
        return f"s3://{self.bucket}/{self.full_key(key)}"


@dataclass(frozen=True)
class HttpRepo:
    """HTTP(S) base URL, read-only"""
    base_url: str

    @property
    def url(self) -> str:
        return self.base_url

    def key_url(self, key: str) -> str:
        return f"{self.base_url}/{key}"


RepoDescriptor = Union[LocalRepo, S3Repo, HttpRepo]


def parse_s3_url(s3_url: str, profile: Optional[str] = None) -> S3Repo:
    """
    Parse 's3://bucket[/base]'.

    Args:
        s3_url: Location string starting with 's3://'
        profile: Optional AWS profile name

    Returns:
        S3Repo descriptor

    Raises:
        ParseError: If the bucket is empty or the base starts with '/'
    """
    repo_path = s3_url[len(S3_SCHEME):]
    bucket, sep, base = repo_path.partition("/")

    if not bucket:
        raise ParseError(s3_url)

    if sep and base.startswith("/"):
        raise ParseError(s3_url)

    return S3Repo(url=s3_url, bucket=bucket, base=clean_path(base), profile=profile)


def parse_repo(location: str, profile: Optional[str] = None) -> RepoDescriptor:
    """
    Classify a repository location string.

    Args:
        location: Repo path or URL as given by the user or an install record
        profile: AWS profile, only meaningful for S3

    Returns:
        The repo descriptor

    Raises:
        ParseError: For malformed S3 locations
    """
    if location.startswith(S3_SCHEME):
        return parse_s3_url(location, profile)
    if location.startswith("http://") or location.startswith("https://"):
        return HttpRepo(base_url=clean_path(location))
    # absolute local paths stay absolute
    root = clean_path(location)
    if location.startswith("/"):
        root = f"/{root}"
    return LocalRepo(root_path=root)


def binst_install_repo() -> HttpRepo:
    """Default repo for install/update/info"""
    return HttpRepo(base_url=clean_path(BINST_REPO_URL))


def binst_publish_repo() -> S3Repo:
    """Default repo for publish"""
    return S3Repo(
        url=f"s3://{BINST_REPO_BUCKET}",
        bucket=BINST_REPO_BUCKET,
        base="",
        profile=BINST_REPO_AWS_PROFILE,
    )


@dataclass(frozen=True)
class BinRepo:
    """
    Per-command session: which binary, where to install from, where to publish to.

    `target` overrides the host platform target (publish cross-compilation).
    """
    bin_name: str
    install_repo: RepoDescriptor
    publish_repo: RepoDescriptor
    target: Optional[str] = None

    @classmethod
    def from_args(
        cls,
        bin_name: str,
        repo: Optional[str] = None,
        profile: Optional[str] = None,
        target: Optional[str] = None,
        default_install_repo: Optional[str] = None,
        default_publish_repo: Optional[str] = None,
        default_publish_profile: Optional[str] = None,
    ) -> "BinRepo":
        """
        Build the session from command arguments.

        Without `repo`, install and publish fall back to the binst hosted repo
        (or to the configured defaults, when given).

        Raises:
            ParseError: For malformed repo locations
        """
        if repo:
            install_repo = parse_repo(repo, profile)
            publish_repo = parse_repo(repo, profile)
        else:
            install_repo = (
                parse_repo(default_install_repo, profile) if default_install_repo
                else binst_install_repo()
            )
            publish_repo = (
                parse_repo(default_publish_repo, profile or default_publish_profile) if default_publish_repo
                else binst_publish_repo()
            )

        return cls(
            bin_name=bin_name,
            install_repo=install_repo,
            publish_repo=publish_repo,
            target=target,
        )
