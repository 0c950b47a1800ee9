# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Command services: one class per CLI command.
"""

from .info_service import InfoService
from .install_service import InstallService
from .publish_service import PublishService, ensure_publishable
from .setup_service import SetupService
from .update_service import UpdateService

__all__ = [
    "InfoService",
    "InstallService",
    "PublishService",
    "SetupService",
    "UpdateService",
    "ensure_publishable",
]
