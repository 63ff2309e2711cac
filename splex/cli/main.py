#!/usr/bin/env python3
"""
SpleX CLI Tool

Follows several log files at once and prints their new lines as one
color-coded stream.
"""

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from splex import __version__
from splex.cli.commands.follow import FollowCommand
from splex.utils.colors import painter_for
from splex.utils.logging import setup_logging


def create_parser():
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="splex",
        description="SpleX - follow multiple log files in one color-coded stream",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  splex logs/app.log logs/worker.log      # Follow two files
  splex -t -c red,blue a.log b.log        # Table rows with custom colors
  splex -m -o merged.log a.log b.log      # Monochrome, written to a file
  splex                                   # Follow files listed in .splexrc.json

Config file:
  A per-directory .splexrc.json can list the files to follow:
  {
    "files": ["logs/log-0.log", "logs/log-1.log"]
  }
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"SpleX v{__version__}"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress output except errors"
    )

    FollowCommand.add_arguments(parser)

    return parser


def main(argv: Optional[List[str]] = None, stream: Optional[TextIO] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging
    log_level = logging.INFO
    if args.verbose:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    try:
        command = FollowCommand(args, stream=stream)
        return command.run()

    except KeyboardInterrupt:
        # Interrupt is the normal way to stop following
        painter = painter_for(args.level, sys.stderr, args.monochrome)
        print(f"\n{painter.warning('Stopped')}", file=sys.stderr)
        return 0
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
