"""
Continuous following of a single log file.

A LineSource reads newly appended bytes from one file, splits them into
complete lines and hands each line to a callback. It survives the file
being truncated, replaced (logrotate) or deleted and recreated.

State machine:
    OPENING    waiting for the file to exist for the first time
    FOLLOWING  reading appended content from an open handle
    REOPENING  the file disappeared; waiting for it to be recreated
    FAILED     an unrecoverable error was reported; the source is done

Only the first successful open starts at the end of the file. A file that
appears or is replaced later was written entirely after following began,
so it is read from its start.
"""

import asyncio
import errno
import logging
import os
from enum import Enum
from typing import BinaryIO, Callable, List, Optional

from .watcher import FileWatcher

logger = logging.getLogger(__name__)


class SourceState(Enum):
    """Lifecycle states of a LineSource."""

    OPENING = "opening"
    FOLLOWING = "following"
    REOPENING = "reopening"
    FAILED = "failed"


class LineSource:
    """
    Follow one file and emit its new lines one at a time.

    Attributes:
        path: Path as configured by the user (used for display).
        state: Current SourceState.
        offset: Read position in the currently open file.
        poll_interval: Seconds to wait for a notification before checking anyway.

    Example:
        >>> source = LineSource("logs/app.log", print, print)
        >>> source.open()
        >>> lines = source.poll()  # New complete lines since the last poll
    """

    def __init__(
        self,
        path: str,
        on_line: Callable[[str], None],
        on_error: Callable[[Exception], None],
        poll_interval: float = 1.0
    ):
        """
        Initialize a source for a file.

        Args:
            path: File to follow
            on_line: Called once per complete line, in file order
            on_error: Called once if the file can never be read
            poll_interval: Fallback check interval in seconds
        """
        self.path = path
        self.on_line = on_line
        self.on_error = on_error
        self.poll_interval = poll_interval
        self.state = SourceState.OPENING
        self.offset = 0
        self._abs_path = os.path.abspath(path)
        self._handle: Optional[BinaryIO] = None
        self._identity = None
        # Bytes of an unterminated trailing line
        self._partial = b""
        self._changed = asyncio.Event()

    def open(self) -> None:
        """
        Perform the initial open, positioned at the end of the file.

        A missing file leaves the source in OPENING; a missing directory or
        unreadable file fails it.
        """
        directory = os.path.dirname(self._abs_path)
        if not os.path.isdir(directory):
            self._fail(FileNotFoundError(
                errno.ENOENT, "Directory does not exist", directory
            ))
            return

        try:
            self._open_handle(at_end=True)
        except FileNotFoundError:
            logger.debug(f"{self.path} does not exist yet, waiting for it")
        except OSError as e:
            self._fail(e)

    def notify(self) -> None:
        """Signal that the file may have changed."""
        self._changed.set()

    def poll(self) -> List[str]:
        """
        Read every complete line appended since the last poll.

        Returns:
            New lines in file order, terminators stripped
        """
        if self.state is SourceState.FAILED:
            return []

        try:
            return self._poll()
        except OSError as e:
            self._fail(e)
            return []

    def close(self) -> None:
        """Close the open file handle, if any."""
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    async def run(self, watcher: Optional[FileWatcher] = None) -> None:
        """
        Follow the file until it fails or the task is cancelled.

        Args:
            watcher: Notification source; without one the file is polled
        """
        self.open()
        if self.state is SourceState.FAILED:
            return

        if watcher is not None:
            try:
                watcher.watch(self._abs_path, self.notify)
            except OSError as e:
                self._fail(e)
                return

        try:
            while self.state is not SourceState.FAILED:
                try:
                    await asyncio.wait_for(self._changed.wait(), timeout=self.poll_interval)
                except asyncio.TimeoutError:
                    pass
                self._changed.clear()

                for line in self.poll():
                    self.on_line(line)
        finally:
            if watcher is not None:
                watcher.unwatch(self._abs_path, self.notify)
            self.close()

    def _poll(self) -> List[str]:
        if self.state in (SourceState.OPENING, SourceState.REOPENING):
            try:
                self._open_handle(at_end=False)
            except FileNotFoundError:
                return []

        lines = self._read_available()

        try:
            st = os.stat(self._abs_path)
        except FileNotFoundError:
            st = None

        if st is None:
            # Deleted: keep what was read and wait for it to come back
            lines.extend(self._flush_partial())
            self.close()
            self.state = SourceState.REOPENING
            logger.debug(f"{self.path} disappeared, waiting for it to be recreated")
            return lines

        if (st.st_dev, st.st_ino) != self._identity:
            # Replaced: the old handle has been drained above
            lines.extend(self._flush_partial())
            self.close()
            self.state = SourceState.REOPENING
            logger.debug(f"{self.path} was replaced, reopening")
            try:
                self._open_handle(at_end=False)
            except FileNotFoundError:
                return lines
            lines.extend(self._read_available())

        return lines

    def _open_handle(self, at_end: bool) -> None:
        handle = open(self._abs_path, "rb")
        try:
            st = os.fstat(handle.fileno())
            if at_end:
                handle.seek(0, os.SEEK_END)
        except OSError:
            handle.close()
            raise

        self._handle = handle
        self._identity = (st.st_dev, st.st_ino)
        self.offset = handle.tell()
        self._partial = b""
        self.state = SourceState.FOLLOWING
        logger.debug(f"Following {self.path} from offset {self.offset}")

    def _read_available(self) -> List[str]:
        if self._handle is None:
            return []

        lines: List[str] = []
        size = os.fstat(self._handle.fileno()).st_size
        if size < self.offset:
            # Truncated in place
            lines.extend(self._flush_partial())
            self._handle.seek(0)
            self.offset = 0
            logger.debug(f"{self.path} was truncated, reading from the start")

        data = self._handle.read()
        if not data:
            return lines
        self.offset += len(data)

        *complete, self._partial = (self._partial + data).split(b"\n")
        lines.extend(self._decode(raw) for raw in complete)
        return lines

    def _flush_partial(self) -> List[str]:
        if not self._partial:
            return []
        line = self._decode(self._partial)
        self._partial = b""
        return [line]

    @staticmethod
    def _decode(raw: bytes) -> str:
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        return raw.decode("utf-8", errors="replace")

    def _fail(self, error: Exception) -> None:
        if self.state is SourceState.FAILED:
            return
        self.state = SourceState.FAILED
        self.close()
        logger.debug(f"Source {self.path} failed: {error}")
        self.on_error(error)
