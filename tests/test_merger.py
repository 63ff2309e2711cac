"""
Tests for the fan-in Merger.
"""

import asyncio

from splex.core.merger import Merger
from splex.core.models import LineEvent

from tests.helpers import wait_for


def event(path, text):
    return LineEvent(source_path=path, color="red", text=text)


def test_drain_keeps_publish_order_across_sources():
    merger = Merger()
    published = [event("b.log", "1"), event("a.log", "2"), event("b.log", "3")]
    for item in published:
        merger.publish(item)

    received = []
    assert merger.pending == 3
    assert merger.drain(received.append) == 3

    assert received == published
    assert merger.pending == 0
    assert merger.delivered == 3


def test_run_delivers_each_event_once():
    received = []

    async def scenario():
        merger = Merger()
        task = asyncio.create_task(merger.run(received.append))
        merger.publish(event("a.log", "first"))
        merger.publish(event("b.log", "second"))
        await wait_for(lambda: len(received) == 2)
        merger.publish(event("a.log", "third"))
        await wait_for(lambda: len(received) == 3)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        return merger

    merger = asyncio.run(scenario())

    assert [e.text for e in received] == ["first", "second", "third"]
    assert merger.delivered == 3


def test_events_keep_their_origin():
    received = []
    merger = Merger()
    merger.publish(LineEvent(source_path="x.log", color="#123456", text="t"))

    merger.drain(received.append)

    assert received[0].source_path == "x.log"
    assert received[0].color == "#123456"
