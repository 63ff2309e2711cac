"""
Ownership of the followed files and their display colors.
"""

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Sequence

from .models import LineEvent, Source
from .source import LineSource
from .watcher import FileWatcher

logger = logging.getLogger(__name__)


class SourceRegistry:
    """
    Owns every Source and the LineSource following it.

    Colors come from the palette round-robin, by the position of each path
    in the configured order, so the assignment is deterministic.
    """

    def __init__(self, palette: Sequence[str], poll_interval: float = 1.0):
        """
        Initialize the registry.

        Args:
            palette: Ordered color names assigned to files
            poll_interval: Fallback poll interval passed to each LineSource

        Raises:
            ValueError: If the palette is empty
        """
        if not palette:
            raise ValueError("Palette must contain at least one color")
        self.palette = list(palette)
        self.poll_interval = poll_interval
        self.sources: Dict[str, Source] = {}
        self.line_sources: Dict[str, LineSource] = {}

    def register(self, paths: Sequence[str]) -> Dict[str, str]:
        """
        Register files and assign their colors.

        Args:
            paths: File paths in display order

        Returns:
            Mapping of path to assigned color
        """
        for index, path in enumerate(paths):
            if path in self.sources:
                logger.warning(f"Ignoring duplicate file: {path}")
                continue
            color = self.palette[index % len(self.palette)]
            self.sources[path] = Source(path=path, color=color, index=index)

        return self.colors()

    def colors(self) -> Dict[str, str]:
        """Return the path to color mapping in registration order."""
        return {path: source.color for path, source in self.sources.items()}

    def start_all(
        self,
        on_event: Callable[[LineEvent], None],
        on_error: Callable[[str, Exception], None],
        watcher: Optional[FileWatcher] = None
    ) -> List[asyncio.Task]:
        """
        Start following every registered file.

        Must be called from a running event loop. A source that fails
        reports through on_error and stops; the others keep running.

        Args:
            on_event: Receives every line as a LineEvent
            on_error: Receives (path, error) once per failed source
            watcher: Shared filesystem notification bridge

        Returns:
            One task per followed file
        """
        tasks = []
        for source in self.sources.values():
            line_source = LineSource(
                source.path,
                on_line=self._line_handler(source, on_event),
                on_error=self._error_handler(source, on_error),
                poll_interval=self.poll_interval
            )
            self.line_sources[source.path] = line_source
            tasks.append(asyncio.create_task(
                line_source.run(watcher), name=f"source:{source.path}"
            ))
            logger.debug(f"Started source for {source.path}")
        return tasks

    def close_all(self) -> None:
        """Close the file handles of every source."""
        for line_source in self.line_sources.values():
            line_source.close()

    @staticmethod
    def _line_handler(source: Source, on_event: Callable[[LineEvent], None]) -> Callable[[str], None]:
        def handle(text: str) -> None:
            on_event(LineEvent(source_path=source.path, color=source.color, text=text))
        return handle

    @staticmethod
    def _error_handler(source: Source, on_error: Callable[[str, Exception], None]) -> Callable[[Exception], None]:
        def handle(error: Exception) -> None:
            on_error(source.path, error)
        return handle
