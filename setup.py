# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Setup configuration for binst, the decentralized binary installer
"""

from setuptools import setup, find_packages

setup(
    name="binst",
    version="0.1.0",
    description="Decentralized binary installer and publisher (local, S3 and HTTP repos)",
    packages=find_packages(include=["binst", "binst.*"]),
    python_requires=">=3.11.4",
    install_requires=[
        "httpx>=0.25.0",
        "pydantic>=2.0.0",
        "pyyaml>=6.0",
        "aiofiles>=23.0.0",
        "boto3>=1.28.0",
        "semver>=3.0.0",
        "tomli-w>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "binst=binst.cli:main",
        ]
    },
)
