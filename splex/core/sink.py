"""
Output targets for rendered lines.

StdoutSink writes straight to the terminal. FileSink appends to a file and
heals itself when that file is deleted or rotated away while splex runs:
the old handle is flushed and closed and a fresh file is created at the
same path, so later writes are never lost into an unlinked inode.
"""

import logging
import os
import sys
from abc import ABC, abstractmethod
from typing import Optional, TextIO

from .watcher import FileWatcher

logger = logging.getLogger(__name__)


class SinkClosedError(Exception):
    """Raised when writing to a sink that has been closed."""
    pass


class Sink(ABC):
    """Destination of rendered output lines."""

    @abstractmethod
    def write(self, text: str) -> None:
        """
        Append one line of text followed by a newline.

        Args:
            text: Rendered line without terminator
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Flush pending output and release the destination."""
        pass

    def attach(self, watcher: FileWatcher) -> None:
        """Register for filesystem notifications, if the sink needs them."""


class StdoutSink(Sink):
    """Write lines to standard output, flushing every line."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved on use so a replaced sys.stdout is honoured
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str) -> None:
        self.stream.write(text + "\n")
        self.stream.flush()

    def close(self) -> None:
        self.stream.flush()


class FileSink(Sink):
    """
    Append lines to a file that is reopened if it disappears.

    Attributes:
        path: Output file path.
        reopen_count: Number of times a fresh file was created.
    """

    def __init__(self, path: str):
        """
        Open the output file for appending.

        Args:
            path: Output file path; created if missing

        Raises:
            OSError: If the file cannot be opened
        """
        self.path = path
        self.reopen_count = 0
        self._abs_path = os.path.abspath(path)
        self._watcher: Optional[FileWatcher] = None
        self._closed = False
        # None while the path cannot be recreated; the next write retries
        self._handle: Optional[TextIO] = self._open()

    def attach(self, watcher: FileWatcher) -> None:
        """Watch the output path so deletion is handled as soon as it happens."""
        watcher.watch(self._abs_path, self.handle_path_event)
        self._watcher = watcher

    def handle_path_event(self) -> None:
        """React to a change of the output path by reopening a stale handle."""
        if self._closed or not self._is_stale():
            return
        try:
            self._reopen()
        except OSError as e:
            logger.warning(f"Cannot recreate output file {self.path}, retrying on next write: {e}")

    def write(self, text: str) -> None:
        """
        Append one line, recreating the file first if it went away.

        Raises:
            SinkClosedError: If the sink was closed
            OSError: If the output file cannot be recreated
        """
        if self._closed:
            raise SinkClosedError(f"Output file {self.path} is closed")
        if self._is_stale():
            self._reopen()
        self._handle.write(text + "\n")
        self._handle.flush()

    def close(self) -> None:
        if self._watcher is not None:
            self._watcher.unwatch(self._abs_path, self.handle_path_event)
            self._watcher = None
        self._closed = True
        if self._handle is not None:
            self._release()
            logger.debug(f"Closed output file {self.path}")

    def _open(self) -> TextIO:
        return open(self._abs_path, "a", encoding="utf-8")

    def _release(self) -> None:
        handle, self._handle = self._handle, None
        try:
            handle.flush()
        finally:
            handle.close()

    def _is_stale(self) -> bool:
        """True if there is no open file or the path no longer refers to it."""
        if self._handle is None:
            return True
        try:
            current = os.stat(self._abs_path)
        except FileNotFoundError:
            return True
        opened = os.fstat(self._handle.fileno())
        return (current.st_dev, current.st_ino) != (opened.st_dev, opened.st_ino)

    def _reopen(self) -> None:
        if self._handle is not None:
            self._release()
        self._handle = self._open()
        self.reopen_count += 1
        logger.info(f"Output file {self.path} was removed, recreated it")


def create_sink(output: Optional[str] = None, stream: Optional[TextIO] = None) -> Sink:
    """
    Build the sink for a run.

    Args:
        output: Output file path, or None for standard output
        stream: Stream used by the stdout sink (defaults to sys.stdout)

    Returns:
        A FileSink when an output path is given, otherwise a StdoutSink
    """
    if output:
        return FileSink(output)
    return StdoutSink(stream)
