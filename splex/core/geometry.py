"""
Terminal width tracking for table output.

The width is re-read once per second so the separator line follows window
resizes without relying on a resize signal.
"""

import asyncio
import shutil
from dataclasses import dataclass
from typing import Callable, Optional

DEFAULT_WIDTH = 80


@dataclass(frozen=True)
class TerminalGeometry:
    """Current terminal width and the separator line that fills it."""

    width: int
    separator_line: str

    @classmethod
    def for_width(cls, width: int) -> "TerminalGeometry":
        """Build the geometry for a given column count."""
        width = max(width, 0)
        return cls(width=width, separator_line="-" * width)


def terminal_width() -> int:
    """Return the terminal column count, or 80 when there is no terminal."""
    return shutil.get_terminal_size(fallback=(DEFAULT_WIDTH, 24)).columns


class TerminalGeometryTracker:
    """Recompute TerminalGeometry on a fixed interval."""

    def __init__(
        self,
        interval: float = 1.0,
        width_provider: Optional[Callable[[], int]] = None
    ):
        """
        Initialize the tracker with a first measurement.

        Args:
            interval: Seconds between refreshes
            width_provider: Returns the current width (defaults to terminal_width)
        """
        self.interval = interval
        self._width_provider = width_provider or terminal_width
        self.geometry = TerminalGeometry.for_width(self._width_provider())

    def refresh(self) -> TerminalGeometry:
        """Measure the terminal again and return the new geometry."""
        width = self._width_provider()
        if width != self.geometry.width:
            self.geometry = TerminalGeometry.for_width(width)
        return self.geometry

    async def run(self) -> None:
        """Refresh forever; ends only when the task is cancelled."""
        while True:
            self.refresh()
            await asyncio.sleep(self.interval)
