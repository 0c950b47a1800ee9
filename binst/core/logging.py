# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Logging setup for binst.

Logs always go to stderr; stdout is reserved for command output.
Text is the default for interactive use. JSON suits CI publish jobs,
where `package_published` / `package_installed` events get collected.

Structured fields passed through log_event show up as JSON keys, or as
trailing key=value pairs in text mode.
"""

import logging
import json
import sys
from datetime import datetime, UTC
from typing import Any, Dict

from binst.core.errors import ConfigurationError


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_RESERVED_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line, extras as top-level keys"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(_extra_fields(record))
        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """
    Terse terminal format:

        INFO binst.services.install_service: package_installed bin_name=hello version=1.0.0
    """

    def __init__(self):
        super().__init__(fmt="%(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extra_fields(record)
        if not extras:
            return line
        fields = " ".join(f"{key}={value}" for key, value in extras.items())
        head, sep, tail = line.partition("\n")
        return f"{head} {fields}{sep}{tail}"


_FORMATTERS = {
    "text": TextFormatter,
    "json": JSONFormatter,
}


def get_logger(
    name: str,
    log_level: str = "WARNING",
    log_format: str = "text",
) -> logging.Logger:
    """
    Configure a logger with a single stderr handler.

    Calling it again replaces the handler, so the CLI can reconfigure
    after reading config.yaml.

    Args:
        name: Logger name (usually "binst" for the CLI root logger)
        log_level: One of LOG_LEVELS, case-insensitive
        log_format: "text" or "json"

    Returns:
        Configured logger instance

    Raises:
        ConfigurationError: For an unknown level or format
    """
    level = log_level.upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(
            f"Unknown log level '{log_level}', expected one of {', '.join(LOG_LEVELS)}"
        )
    formatter_class = _FORMATTERS.get(log_format)
    if formatter_class is None:
        raise ConfigurationError(
            f"Unknown log format '{log_format}', expected one of {', '.join(_FORMATTERS)}"
        )

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers = []

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter_class())
    logger.addHandler(handler)

    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    level: str = "INFO",
    **kwargs: Any
) -> None:
    """
    Log a named event with structured fields.

    Args:
        logger: Logger instance
        event: Event name, used as the message
        level: Log level
        **kwargs: Fields attached to the record
    """
    log_func = getattr(logger, level.lower())
    log_func(event, extra=kwargs)
