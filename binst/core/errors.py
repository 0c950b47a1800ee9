# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Custom exceptions for binst.

All exceptions inherit from BinstError so the CLI has a single catch point.
"""

from typing import Optional


class BinstError(Exception):
    """Base exception for all binst errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize binst error.

        Args:
            message: Human-readable error message
            details: Additional error details
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for structured logging."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


class ParseError(BinstError):
    """Repository location string could not be parsed."""

    def __init__(self, location: str, reason: str = "Invalid S3 repo url"):
        """
        Initialize parse error.

        Args:
            location: The repository location string as given
            reason: What was wrong with it
        """
        super().__init__(f"{reason} {location}", details={"location": location})
        self.location = location


class NotFoundError(BinstError):
    """Artifact, metadata document, or local file not found."""

    def __init__(self, resource: str, identifier: str, details: Optional[dict] = None):
        """
        Initialize not found error.

        Args:
            resource: Type of resource (e.g., "latest.toml", "Package archive")
            identifier: Exact path, key or URL that was looked up
            details: Additional error details
        """
        message = f"{resource} not found: {identifier}"
        super().__init__(message, details=details)
        self.resource = resource
        self.identifier = identifier


class InvalidVersionError(BinstError):
    """Version metadata present but not a valid semantic version."""

    def __init__(self, message: str, source: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, details=details)
        self.source = source


class TransportError(BinstError):
    """Network, provider or credential failure."""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[dict] = None):
        """
        Initialize transport error.

        Args:
            message: Transport error message
            code: Provider error code (S3 error code, HTTP status) when available
            details: Additional error details
        """
        super().__init__(message, details=details)
        self.code = code


class CredentialError(TransportError):
    """AWS credentials missing or only partially configured."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, code=None, details=details)


class UnsupportedOperationError(BinstError):
    """Operation not supported by the repository backend."""

    def __init__(self, message: str, backend: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, details=details)
        self.backend = backend


class UnsafeDeletionError(BinstError):
    """Directory failed the namespace check before recursive deletion."""

    def __init__(self, path: str):
        super().__init__(
            f"The directory {path} does not seem to be safe to delete (no 'binst' in the path)",
            details={"path": path}
        )
        self.path = path


class BuildError(BinstError):
    """External build command failed."""

    def __init__(self, command: str, cause: str):
        super().__init__(f"Fail to execute {command} cause: {cause}", details={"command": command})
        self.command = command


class ArchiveError(BinstError):
    """Package archive could not be unpacked."""

    def __init__(self, archive: str, cause: str):
        super().__init__(f"Cannot unpack {archive}: {cause}", details={"archive": archive})
        self.archive = archive


class ConfigurationError(BinstError):
    """Configuration error."""

    def __init__(self, message: str, config_file: Optional[str] = None, details: Optional[dict] = None):
        """
        Initialize configuration error.

        Args:
            message: Configuration error message
            config_file: Configuration file path
            details: Additional error details
        """
        super().__init__(message, details=details)
        self.config_file = config_file


# Error Message Utilities

def sanitize_error_for_user(error: Exception, include_type: bool = True) -> str:
    """
    Sanitize error messages for user display.
    Removes stack traces and keeps messages short.

    Args:
        error: The exception to sanitize
        include_type: Whether to include exception type

    Returns:
        User-friendly error message without stack trace
    """
    error_msg = str(error).strip()

    # Limit message length
    if len(error_msg) > 500:
        error_msg = error_msg[:500] + "..."

    if include_type:
        return f"{error.__class__.__name__}: {error_msg}"

    return error_msg
