# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""Host platform target triple (e.g. x86_64-unknown-linux-gnu)."""

import platform

_ARCH_ALIASES = {
    "amd64": "x86_64",
    "x86_64": "x86_64",
    "arm64": "aarch64",
    "aarch64": "aarch64",
}

_OS_SUFFIXES = {
    "darwin": "apple-darwin",
    "linux": "unknown-linux-gnu",
    "freebsd": "unknown-freebsd",
}


def os_target() -> str:
    """Target triple of the running host, in cargo's naming"""
    machine = platform.machine().lower()
    system = platform.system().lower()

    arch = _ARCH_ALIASES.get(machine, machine)
    suffix = _OS_SUFFIXES.get(system, f"unknown-{system}")
    return f"{arch}-{suffix}"
