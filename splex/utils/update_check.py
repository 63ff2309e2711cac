"""
Update notification for the splex CLI.

Looks up the latest released version on PyPI and reports whether the
running version is out of date. Network problems never affect a run.
"""

import logging
import re
from typing import Optional, Tuple

import requests

logger = logging.getLogger(__name__)

PYPI_URL = "https://pypi.org/pypi/splex/json"


def parse_version(version: str) -> Tuple[int, ...]:
    """
    Turn a dotted release string into a comparable tuple.

    Only the leading numeric components are used, so "1.2.0rc1" compares
    as (1, 2, 0).

    Args:
        version: Version string

    Returns:
        Tuple of integer components
    """
    parts = []
    for piece in version.split("."):
        match = re.match(r"\d+", piece)
        if match is None:
            break
        parts.append(int(match.group()))
    return tuple(parts)


def fetch_latest_version(url: str = PYPI_URL, timeout: float = 2) -> Optional[str]:
    """
    Fetch the latest released version string.

    Args:
        url: PyPI JSON endpoint for the project
        timeout: Request timeout in seconds

    Returns:
        Latest version, or None if it could not be determined
    """
    try:
        response = requests.get(url, timeout=timeout)
        if response.status_code != 200:
            logger.debug(f"Update check returned HTTP {response.status_code}")
            return None
        return response.json()["info"]["version"]
    except (requests.RequestException, ValueError, KeyError) as e:
        logger.debug(f"Update check failed: {e}")
        return None


def check_for_update(current_version: str, url: str = PYPI_URL) -> Optional[str]:
    """
    Check whether a newer release is available.

    Args:
        current_version: Version of the running package
        url: PyPI JSON endpoint for the project

    Returns:
        The newer version string, or None when up to date or unknown
    """
    latest = fetch_latest_version(url)
    if latest is None:
        return None
    if parse_version(latest) > parse_version(current_version):
        return latest
    return None
