# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""Info Service - Latest version and archive URL of a package stream."""

import logging
from typing import Callable, Tuple

from binst.repo.locator import BinRepo
from binst.repo.paths import MAIN_STREAM
from binst.repo.resolver import VersionResolver
from binst.target import os_target

logger = logging.getLogger(__name__)


class InfoService:

    def __init__(self, resolver: VersionResolver, target_resolver: Callable[[], str] = os_target):
        self.resolver = resolver
        self.target_resolver = target_resolver

    async def info(self, bin_repo: BinRepo, stream: str = MAIN_STREAM) -> Tuple[str, str]:
        """
        Returns:
            (latest version, resolved archive URL)

        Raises:
            NotFoundError, InvalidVersionError, TransportError: From the resolver
        """
        repo = bin_repo.install_repo
        target = bin_repo.target or self.target_resolver()
        version = await self.resolver.latest_version(repo, bin_repo.bin_name, target, stream)
        url = self.resolver.origin_url(repo, bin_repo.bin_name, target, stream, version)
        return str(version), url
