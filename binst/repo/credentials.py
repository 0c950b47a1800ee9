# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
AWS Credential Resolution

Single responsibility: find the key id / secret / region (or endpoint) for S3.

Sources are tried in order; each answers NOT_APPLICABLE, FOUND or MALFORMED.
The first answer that is not NOT_APPLICABLE wins, so a half-configured
source is an error instead of silently falling through to the next one.

    1. AWS profile from the shared config files, when --profile is given.
       botocore locates them, so AWS_SHARED_CREDENTIALS_FILE and
       AWS_CONFIG_FILE are honoured.
    2. BINST_REPO_AWS_KEY_ID / _KEY_SECRET / _REGION / _ENDPOINT
    3. AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY / AWS_DEFAULT_REGION / AWS_ENDPOINT
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional

import botocore.session

from binst.core.errors import CredentialError

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS_MESSAGE = (
    "AWS credentials not found in environment or profile.\n"
    "  Make sure to set the AWS Credential environment variables\n"
    "    - BINST_REPO_AWS_KEY_ID, BINST_REPO_AWS_KEY_SECRET, and BINST_REPO_AWS_REGION.\n"
    "    - Or AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, and AWS_DEFAULT_REGION.\n"
    "    - Or add a `--profile your_profile` to use your aws config profile."
)


class CredentialOutcome(str, Enum):
    """Answer of one credential source"""
    NOT_APPLICABLE = "not_applicable"
    FOUND = "found"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class AwsCredentials:
    key_id: str
    key_secret: str
    region: Optional[str] = None
    endpoint: Optional[str] = None
    source: str = ""


@dataclass(frozen=True)
class CredentialLookup:
    outcome: CredentialOutcome
    credentials: Optional[AwsCredentials] = None
    reason: Optional[str] = None

    @classmethod
    def not_applicable(cls) -> "CredentialLookup":
        return cls(CredentialOutcome.NOT_APPLICABLE)

    @classmethod
    def found(cls, credentials: AwsCredentials) -> "CredentialLookup":
        return cls(CredentialOutcome.FOUND, credentials=credentials)

    @classmethod
    def malformed(cls, reason: str) -> "CredentialLookup":
        return cls(CredentialOutcome.MALFORMED, reason=reason)


@dataclass(frozen=True)
class EnvCredentialSource:
    """A set of four environment variable names"""
    key_id: str
    key_secret: str
    region: str
    endpoint: str

    @property
    def name(self) -> str:
        return f"env {self.key_id}"

    def resolve(self, env: Mapping[str, str]) -> CredentialLookup:
        key_id = env.get(self.key_id) or None
        key_secret = env.get(self.key_secret) or None
        region = env.get(self.region) or None
        endpoint = env.get(self.endpoint) or None

        if key_id is None and key_secret is None:
            return CredentialLookup.not_applicable()

        if key_id is None or key_secret is None:
            missing = self.key_id if key_id is None else self.key_secret
            return CredentialLookup.malformed(
                f"Partial AWS credentials in environment, '{missing}' is not set"
            )

        if region is None and endpoint is None:
            return CredentialLookup.malformed(
                f"AWS environment variables must have {self.region} or {self.endpoint} "
                f"(both can't be None)"
            )

        return CredentialLookup.found(AwsCredentials(
            key_id=key_id,
            key_secret=key_secret,
            region=region,
            endpoint=endpoint,
            source=self.name,
        ))


BINST_CRED_ENV = EnvCredentialSource(
    key_id="BINST_REPO_AWS_KEY_ID",
    key_secret="BINST_REPO_AWS_KEY_SECRET",
    region="BINST_REPO_AWS_REGION",
    endpoint="BINST_REPO_AWS_ENDPOINT",
)

AWS_CRED_ENV = EnvCredentialSource(
    key_id="AWS_ACCESS_KEY_ID",
    key_secret="AWS_SECRET_ACCESS_KEY",
    region="AWS_DEFAULT_REGION",
    endpoint="AWS_ENDPOINT",
)


@dataclass(frozen=True)
class ProfileCredentialSource:
    """Named profile from the AWS shared config files"""
    profile: str
    aws_dir: Optional[Path] = None

    @property
    def name(self) -> str:
        return f"profile {self.profile}"

    def _session(self) -> botocore.session.Session:
        session = botocore.session.Session()
        if self.aws_dir is not None:
            session.set_config_variable("config_file", str(self.aws_dir / "config"))
            session.set_config_variable("credentials_file", str(self.aws_dir / "credentials"))
        return session

    def resolve(self, env: Mapping[str, str]) -> CredentialLookup:
        session = self._session()
        if self.profile not in session.available_profiles:
            return CredentialLookup.not_applicable()

        # credentials file values override the config file for the same profile
        values = session.full_config["profiles"][self.profile]

        key_id = values.get("aws_access_key_id")
        key_secret = values.get("aws_secret_access_key")
        if not key_id:
            return CredentialLookup.malformed(
                f"Credential profile config key aws_access_key_id not found for profile {self.profile}"
            )
        if not key_secret:
            return CredentialLookup.malformed(
                f"Credential profile config key aws_secret_access_key not found for profile {self.profile}"
            )

        return CredentialLookup.found(AwsCredentials(
            key_id=key_id,
            key_secret=key_secret,
            region=values.get("region") or None,
            # not standard in .aws/config, honoured when present
            endpoint=values.get("endpoint") or values.get("endpoint_url") or None,
            source=self.name,
        ))


def resolve_credentials(
    profile: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    aws_dir: Optional[Path] = None,
) -> AwsCredentials:
    """
    Resolve AWS credentials for an S3 repo.

    Args:
        profile: AWS profile name (--profile)
        env: Environment mapping (defaults to os.environ)
        aws_dir: AWS shared config dir (defaults to botocore's lookup)

    Returns:
        The first credentials found

    Raises:
        CredentialError: If a source is malformed, or no source applies
    """
    env = os.environ if env is None else env
    sources: List = []
    if profile:
        sources.append(ProfileCredentialSource(profile=profile, aws_dir=aws_dir))
    sources.extend([BINST_CRED_ENV, AWS_CRED_ENV])

    for source in sources:
        lookup = source.resolve(env)

        if lookup.outcome == CredentialOutcome.NOT_APPLICABLE:
            continue

        if lookup.outcome == CredentialOutcome.MALFORMED:
            raise CredentialError(lookup.reason or MISSING_CREDENTIALS_MESSAGE, details={"source": source.name})

        logger.debug(f"AWS credentials loaded from {source.name}")
        return lookup.credentials

    raise CredentialError(MISSING_CREDENTIALS_MESSAGE, details={"profile": profile})
