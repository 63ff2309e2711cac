"""
Helpers shared by the splex tests.
"""

import asyncio
import time
from pathlib import Path
from typing import Callable


def append(path: Path, data: bytes) -> None:
    """Append raw bytes to a file, creating it if needed."""
    with open(path, "ab") as f:
        f.write(data)


async def wait_for(condition: Callable[[], bool], timeout: float = 5.0) -> None:
    """Yield to the loop until a condition holds or fail after a timeout."""
    deadline = time.monotonic() + timeout
    while not condition():
        if time.monotonic() > deadline:
            raise AssertionError("Condition not met in time")
        await asyncio.sleep(0.01)


class NullWatcher:
    """Watcher stand-in that never notifies; sources fall back to polling."""

    def __init__(self):
        self.watched = []

    def start(self, loop=None):
        pass

    def stop(self):
        pass

    def watch(self, path, callback):
        self.watched.append(path)

    def unwatch(self, path, callback):
        if path in self.watched:
            self.watched.remove(path)
