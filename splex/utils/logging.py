"""
Logging setup for the splex CLI.

Diagnostics go to stderr so they never mix into the multiplexed stream on
stdout.
"""

import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure root logging for a CLI run.

    Args:
        level: Logging level for the root logger
    """
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True
    )
