"""
Follow command: multiplex the configured log files.
"""

import argparse
import asyncio
import sys
from typing import Optional, TextIO

from splex import __version__
from splex.config.rc_file import DEFAULT_RC_FILE
from splex.config.settings import ConfigurationError, resolve_config
from splex.core.engine import SplexEngine
from splex.utils.colors import Painter, painter_for
from splex.utils.update_check import check_for_update

from .base import BaseCommand

BANNER = [
    "-------------------",
    "  Starting SpleX   ",
    "----- 🦈  🦈 ------",
]

USAGE_EXAMPLE = "splex [options] file1 file2 file3..."


class FollowCommand(BaseCommand):
    """Command to follow files and print their merged lines."""

    def __init__(self, args: argparse.Namespace, stream: Optional[TextIO] = None):
        """
        Initialize the command.

        Args:
            args: Parsed command line arguments
            stream: Terminal stream (defaults to sys.stdout)
        """
        super().__init__(args)
        self.stream = stream if stream is not None else sys.stdout

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add follow arguments to the parser."""
        parser.add_argument(
            "files",
            nargs="*",
            help="Files to follow (read from the rc file when omitted)"
        )
        parser.add_argument(
            "--file", "-f",
            default=DEFAULT_RC_FILE,
            help=f"rc file listing the files to follow (default: {DEFAULT_RC_FILE})"
        )
        parser.add_argument(
            "--table", "-t",
            action="store_true",
            help="Print lines as table rows"
        )
        parser.add_argument(
            "--colors", "-c",
            help="Custom colors, e.g. -c red,green"
        )
        parser.add_argument(
            "--monochrome", "-m",
            action="store_true",
            help="Monochrome mode"
        )
        parser.add_argument(
            "--level", "-l",
            type=int,
            help="Force color support (0: none, 1: 16, 2: 256, 3: 16m)"
        )
        parser.add_argument(
            "--output", "-o",
            help="Write to a file instead of stdout"
        )
        parser.add_argument(
            "--no-update-check",
            action="store_true",
            help="Do not check PyPI for a newer release"
        )

    def run(self) -> int:
        """Run the follow command."""
        painter = painter_for(self.args.level, self.stream, self.args.monochrome)
        try:
            config = resolve_config(
                files=self.args.files,
                rc_file=self.args.file,
                table=self.args.table,
                colors=self.args.colors,
                monochrome=self.args.monochrome,
                level=self.args.level,
                output=self.args.output,
                update_check=not self.args.no_update_check
            )
        except ConfigurationError as e:
            self._print(f"{painter.error('Error:')} {e}")
            self._print(f"{painter.warning('Usage example:')} {USAGE_EXAMPLE}")
            return 2

        if config.from_rc_file and not self.args.quiet:
            self._print(painter.info(f"INFO: File names not provided, reading from {config.rc_file} file"))

        try:
            engine = SplexEngine(config, stream=self.stream)
        except OSError as e:
            self.logger.error(f"Cannot open output file {config.output}: {e}")
            return 1

        if not self.args.quiet:
            self._announce(engine)

        asyncio.run(self._follow(engine, painter))
        return 0

    async def _follow(self, engine: SplexEngine, painter: Painter) -> None:
        # Following never waits on the update check
        notice = None
        if engine.config.update_check:
            notice = asyncio.create_task(self._notify_update(painter), name="update-check")
        try:
            await engine.run()
        finally:
            if notice is not None and not notice.done():
                notice.cancel()

    def _announce(self, engine: SplexEngine) -> None:
        for line in BANNER:
            self._print(line)
        for path, color in engine.registry.colors().items():
            self._print(engine.painter.paint("Setting up listener for: ", color) + path)

    async def _notify_update(self, painter: Painter) -> None:
        latest = await asyncio.to_thread(check_for_update, __version__)
        if latest:
            self._print(painter.warning(
                f"Update available {__version__} -> {latest}, run: pip install -U splex"
            ))

    def _print(self, text: str) -> None:
        self.stream.write(text + "\n")
        self.stream.flush()
