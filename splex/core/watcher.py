"""
Filesystem change notifications for followed files.

watchdog observes the parent directory of every registered path from its
own thread. Matching events are handed to the asyncio loop with
call_soon_threadsafe, so callbacks always run on the loop thread.
"""

import asyncio
import logging
import os
import threading
from typing import Callable, Dict, List, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class _PathEventHandler(FileSystemEventHandler):
    """Forward every directory event to the owning FileWatcher."""

    def __init__(self, watcher: "FileWatcher"):
        super().__init__()
        self._watcher = watcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        self._watcher.dispatch(event)


class FileWatcher:
    """
    Bridge watchdog events for individual files into an asyncio loop.

    Example:
        >>> watcher = FileWatcher()
        >>> watcher.start(asyncio.get_running_loop())
        >>> watcher.watch("logs/app.log", source.notify)
    """

    def __init__(self):
        """Initialize the watcher without starting the observer thread."""
        self._observer = Observer()
        self._handler = _PathEventHandler(self)
        self._callbacks: Dict[str, List[Callback]] = {}
        self._directories: Dict[str, object] = {}
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """
        Start the observer thread.

        Args:
            loop: Loop that callbacks are scheduled on (defaults to the running loop)
        """
        self._loop = loop or asyncio.get_running_loop()
        self._observer.daemon = True
        self._observer.start()
        logger.debug("File watcher started")

    def stop(self) -> None:
        """Stop the observer thread and wait for it to exit."""
        if self._observer.is_alive():
            self._observer.stop()
            self._observer.join()
        logger.debug("File watcher stopped")

    def watch(self, path: str, callback: Callback) -> None:
        """
        Call back whenever something happens to a path.

        Args:
            path: File to watch; its directory must exist
            callback: Called on the loop thread with no arguments

        Raises:
            OSError: If the directory of the path cannot be watched
        """
        path = os.path.abspath(path)
        directory = os.path.dirname(path)
        with self._lock:
            if directory not in self._directories:
                self._directories[directory] = self._observer.schedule(
                    self._handler, directory, recursive=False
                )
                logger.debug(f"Watching directory {directory}")
            self._callbacks.setdefault(path, []).append(callback)

    def unwatch(self, path: str, callback: Callback) -> None:
        """
        Remove a callback registered with watch().

        The directory watch is dropped once no watched path remains in it.
        """
        path = os.path.abspath(path)
        directory = os.path.dirname(path)
        with self._lock:
            callbacks = self._callbacks.get(path, [])
            if callback in callbacks:
                callbacks.remove(callback)
            if not callbacks:
                self._callbacks.pop(path, None)
            if any(os.path.dirname(other) == directory for other in self._callbacks):
                return
            watch = self._directories.pop(directory, None)
        if watch is None:
            return
        try:
            self._observer.unschedule(watch)
        except KeyError:
            # Already dropped by stop()
            pass
        logger.debug(f"Stopped watching directory {directory}")

    def dispatch(self, event: FileSystemEvent) -> None:
        """
        Schedule the callbacks of every watched path touched by an event.

        Runs on the observer thread.
        """
        if self._loop is None or self._loop.is_closed():
            return

        touched = [event.src_path, getattr(event, "dest_path", "")]
        for raw_path in touched:
            if not raw_path:
                continue
            path = os.path.abspath(os.fsdecode(raw_path))
            with self._lock:
                callbacks = list(self._callbacks.get(path, []))
            for callback in callbacks:
                try:
                    self._loop.call_soon_threadsafe(callback)
                except RuntimeError:
                    # Loop closed between the check and the call
                    return
