# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
binst - decentralized binary installer and publisher.

Packages are gzip'd single binaries laid out by name, target and release
stream in a local directory, an S3 bucket or a static HTTP site.
"""

__version__ = "0.1.0"
