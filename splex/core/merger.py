"""
Fan-in of every source into a single delivery point.

All LineSources publish into one FIFO queue and a single consumer loop
takes events off it one at a time. Events keep the order in which they
were published; there is no ordering across files beyond that.
"""

import asyncio
from typing import Callable

from .models import LineEvent

Consumer = Callable[[LineEvent], None]


class Merger:
    """
    Deliver LineEvents from many sources to one consumer.

    Example:
        >>> merger = Merger()
        >>> merger.publish(event)
        >>> await merger.run(handle_event)
    """

    def __init__(self):
        """Initialize an empty merger."""
        self._queue: "asyncio.Queue[LineEvent]" = asyncio.Queue()
        self.delivered = 0

    @property
    def pending(self) -> int:
        """Number of events published but not yet delivered."""
        return self._queue.qsize()

    def publish(self, event: LineEvent) -> None:
        """Queue an event for delivery. Must be called on the loop thread."""
        self._queue.put_nowait(event)

    async def run(self, consumer: Consumer) -> None:
        """
        Deliver events to the consumer forever.

        Args:
            consumer: Called once per event, in publish order
        """
        while True:
            event = await self._queue.get()
            try:
                self._deliver(consumer, event)
            finally:
                self._queue.task_done()

    def drain(self, consumer: Consumer) -> int:
        """
        Deliver every event that is already queued without waiting.

        Args:
            consumer: Called once per event, in publish order

        Returns:
            Number of events delivered
        """
        count = 0
        while not self._queue.empty():
            event = self._queue.get_nowait()
            try:
                self._deliver(consumer, event)
            finally:
                self._queue.task_done()
            count += 1
        return count

    def _deliver(self, consumer: Consumer, event: LineEvent) -> None:
        consumer(event)
        self.delivered += 1
