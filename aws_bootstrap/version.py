"""Version utility to read from environment or installed package metadata"""

import os
from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "aws-bootstrap"


def get_version() -> str:
    """
    Read version from BUILD_VERSION environment variable or package metadata.

    Priority:
    1. BUILD_VERSION environment variable (set by CI from the git tag)
    2. Installed distribution metadata (pip install, editable or not)
    3. "unknown" when the package is not installed
    """
    if build_version := os.getenv("BUILD_VERSION"):
        return build_version

    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "unknown"


__version__ = get_version()
