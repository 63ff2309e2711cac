"""
Tests for SourceRegistry color assignment and partial-failure behavior.
"""

import asyncio

import pytest

from splex.core.registry import SourceRegistry
from splex.core.source import SourceState
from splex.utils.colors import DEFAULT_PALETTE

from tests.helpers import NullWatcher, append, wait_for


def test_colors_follow_index_modulo_palette():
    registry = SourceRegistry(["red", "green", "blue"])
    paths = [f"file-{i}.log" for i in range(7)]

    colors = registry.register(paths)

    assert list(colors) == paths
    assert [colors[p] for p in paths] == ["red", "green", "blue", "red", "green", "blue", "red"]


def test_files_a_palette_length_apart_share_a_color():
    registry = SourceRegistry(DEFAULT_PALETTE)
    paths = [f"{i}.log" for i in range(2 * len(DEFAULT_PALETTE) + 1)]

    colors = registry.register(paths)

    for i in range(len(DEFAULT_PALETTE) + 1):
        assert colors[paths[i]] == colors[paths[i + len(DEFAULT_PALETTE)]]


def test_duplicate_path_keeps_first_color():
    registry = SourceRegistry(["red", "green", "blue"])

    colors = registry.register(["a.log", "b.log", "a.log", "c.log"])

    assert colors == {"a.log": "red", "b.log": "green", "c.log": "red"}
    assert registry.sources["c.log"].index == 3


def test_empty_palette_is_rejected():
    with pytest.raises(ValueError):
        SourceRegistry([])


def test_one_failing_source_does_not_stop_the_others(tmp_path):
    good = tmp_path / "good.log"
    good.touch()
    bad = tmp_path / "missing-dir" / "bad.log"

    events = []
    errors = []

    async def scenario():
        registry = SourceRegistry(["cyan", "magenta"], poll_interval=0.02)
        registry.register([str(bad), str(good)])
        tasks = registry.start_all(events.append, lambda path, err: errors.append(path), NullWatcher())

        line_source = registry.line_sources[str(good)]
        await wait_for(lambda: line_source.state is SourceState.FOLLOWING)
        append(good, b"still running\n")
        await wait_for(lambda: len(events) == 1)

        assert registry.line_sources[str(bad)].state is SourceState.FAILED
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        registry.close_all()

    asyncio.run(scenario())

    assert errors == [str(bad)]
    assert events[0].source_path == str(good)
    assert events[0].color == "magenta"
    assert events[0].text == "still running"
