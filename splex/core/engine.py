"""
Wiring of the splex engine.

SourceRegistry -> LineSource (one per file) -> Merger -> Formatter -> Sink,
plus the terminal geometry timer and the filesystem watcher, all running on
one asyncio loop until an interrupt arrives.
"""

import asyncio
import logging
import signal
from typing import List, Optional, TextIO

from splex.config.settings import SplexConfig
from splex.utils.colors import Painter, painter_for

from .formatter import Formatter, derive_mode
from .geometry import TerminalGeometryTracker
from .merger import Merger
from .models import LineEvent
from .registry import SourceRegistry
from .sink import Sink, create_sink
from .watcher import FileWatcher

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class SplexEngine:
    """
    Follow the configured files and write the merged stream to the sink.

    Attributes:
        config: Run configuration.
        registry: Owner of the followed files and their colors.
        merger: Fan-in queue for line events.
        geometry: Terminal geometry tracker used by table modes.
        formatter: Renders events using the mode fixed at startup.
        sink: Output target.
    """

    def __init__(
        self,
        config: SplexConfig,
        stream: Optional[TextIO] = None,
        painter: Optional[Painter] = None,
        geometry: Optional[TerminalGeometryTracker] = None,
        sink: Optional[Sink] = None,
        watcher: Optional[FileWatcher] = None
    ):
        """
        Build every component for a run.

        Args:
            config: Run configuration
            stream: Terminal stream for stdout output and color detection
            painter: Color painter (defaults to the configured or detected level)
            geometry: Geometry tracker (defaults to the real terminal)
            sink: Output sink (defaults to one built from config.output)
            watcher: Filesystem watcher (defaults to a watchdog observer)
        """
        self.config = config
        self.registry = SourceRegistry(config.palette, poll_interval=config.poll_interval)
        self.registry.register(config.files)
        self.merger = Merger()
        self.geometry = geometry or TerminalGeometryTracker()

        self.painter = painter or painter_for(config.level, stream)

        self.mode = derive_mode(config.table, config.custom_colors, config.monochrome)
        self.formatter = Formatter(self.mode, self.painter, self.geometry)
        self.sink = sink or create_sink(config.output, stream)
        self.watcher = watcher or FileWatcher()
        self.errors: List[str] = []
        logger.debug(f"Format mode {self.mode.name}, colors {self.registry.colors()}")

    def handle_event(self, event: LineEvent) -> None:
        """Render one event and write it to the sink."""
        for line in self.formatter.render(event):
            self.sink.write(line)

    def handle_error(self, path: str, error: Exception) -> None:
        """Report a failed source once; the other sources keep running."""
        message = f"Error: {path}: {error}"
        self.errors.append(message)
        logger.error(message)

    async def run(self, stop: Optional[asyncio.Event] = None) -> None:
        """
        Run until the stop event is set or a shutdown signal arrives.

        The sink is always flushed and closed before returning.

        Args:
            stop: Event that ends the run when set
        """
        loop = asyncio.get_running_loop()
        stop = stop or asyncio.Event()
        installed = self._install_signal_handlers(loop, stop)

        tasks: List[asyncio.Task] = []
        try:
            self.watcher.start(loop)
            try:
                self.sink.attach(self.watcher)
            except OSError as e:
                logger.warning(f"Cannot watch output file, it is checked on every write instead: {e}")

            tasks.append(asyncio.create_task(self.geometry.run(), name="geometry"))
            tasks.append(asyncio.create_task(self.merger.run(self.handle_event), name="merger"))
            tasks.extend(self.registry.start_all(
                self.merger.publish, self.handle_error, self.watcher
            ))
            # A crashed output path ends the run instead of hanging silently
            tasks[1].add_done_callback(lambda _task: stop.set())
            await stop.wait()
            logger.debug("Shutting down")
        finally:
            for task in tasks:
                task.cancel()
            results = await asyncio.gather(*tasks, return_exceptions=True)
            try:
                self.merger.drain(self.handle_event)
            finally:
                self.watcher.stop()
                self.registry.close_all()
                self.sink.close()
                for sig in installed:
                    loop.remove_signal_handler(sig)

        for result in results:
            if isinstance(result, Exception):
                raise result

    @staticmethod
    def _install_signal_handlers(loop: asyncio.AbstractEventLoop, stop: asyncio.Event) -> List[int]:
        installed = []
        for sig in SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(sig, stop.set)
            except (NotImplementedError, RuntimeError):
                # Not supported on this platform or outside the main thread
                continue
            installed.append(sig)
        return installed
