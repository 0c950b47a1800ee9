# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Version Handling

Semantic version parsing, latest.toml decoding and stream derivation.
Versions follow semver (not PEP 440): '0.1.3-rc-big-1' is a valid version.
"""

import logging
import re
import tomllib
from typing import Optional

from semver import Version

from binst.core.errors import InvalidVersionError
from binst.utils import get_toml_value_as_string

from .paths import MAIN_STREAM

logger = logging.getLogger(__name__)

PRE_STREAM = "pre"

_STREAM_RX = re.compile(r"[a-zA-Z-]+")


def parse_version(value: str, source: Optional[str] = None) -> Version:
    """
    Parse a semantic version string.

    Args:
        value: Version string, e.g. '1.2.0' or '1.2.0-beta.2'
        source: Where the value came from, for the error message

    Returns:
        Parsed version

    Raises:
        InvalidVersionError: If the value is not a semantic version
    """
    try:
        return Version.parse(value.strip())
    except (ValueError, TypeError) as e:
        where = f" from {source}" if source else ""
        raise InvalidVersionError(f"Invalid version '{value}'{where}", source=source) from e


def extract_stream(version: Version) -> str:
    """
    Release stream of a version.

    No prerelease -> 'main'. Otherwise the leading letters/hyphens of the
    prerelease, minus one trailing hyphen; 'pre' when it starts with anything else.

    Examples:
        0.1.3 -> main, 0.1.3-rc-big-1 -> rc-big, 0.1.3-beta.2 -> beta, 0.1.3-123 -> pre
    """
    if not version.prerelease:
        return MAIN_STREAM

    match = _STREAM_RX.match(version.prerelease)
    if match is None:
        return PRE_STREAM

    stream = match.group(0)
    if stream.endswith("-"):
        stream = stream[:-1]
    return stream or PRE_STREAM


def parse_latest_document(content: bytes, source: Optional[str] = None) -> Version:
    """
    Extract `latest.version` from a latest.toml document.

    Args:
        content: Raw document bytes, expected to be UTF-8
        source: Path/key/URL of the document, for error messages

    Returns:
        The latest version

    Raises:
        InvalidVersionError: If the document is not UTF-8 TOML, lacks latest.version,
            or the value is not a semantic version
    """
    try:
        toml = tomllib.loads(content.decode("utf-8"))
        version = get_toml_value_as_string(toml, ["latest", "version"])
    except UnicodeDecodeError as e:
        raise InvalidVersionError(f"latest.toml from origin {source} is not valid UTF-8", source=source) from e
    except tomllib.TOMLDecodeError as e:
        raise InvalidVersionError(f"Invalid latest.toml from origin {source}: {e}", source=source) from e
    except KeyError as e:
        raise InvalidVersionError(f"No latest.version in latest.toml from origin {source}", source=source) from e

    return parse_version(version, source)


def is_newer(origin: Version, installed: Version) -> bool:
    """True when the origin version has higher semver precedence"""
    return origin.compare(installed) > 0
