"""
Tests for terminal geometry tracking.
"""

import asyncio

from splex.core.geometry import TerminalGeometry, TerminalGeometryTracker, terminal_width


def test_separator_matches_width():
    geometry = TerminalGeometry.for_width(12)

    assert geometry.width == 12
    assert geometry.separator_line == "-" * 12


def test_negative_width_is_clamped():
    assert TerminalGeometry.for_width(-3).separator_line == ""


def test_refresh_follows_resizes():
    widths = [80, 80, 120]
    tracker = TerminalGeometryTracker(width_provider=lambda: widths.pop(0))

    first = tracker.geometry
    assert tracker.refresh() is first
    assert tracker.refresh().width == 120
    assert tracker.geometry.separator_line == "-" * 120


def test_run_refreshes_on_interval():
    calls = []

    def provider():
        calls.append(1)
        return 40 + len(calls)

    async def scenario():
        tracker = TerminalGeometryTracker(interval=0.01, width_provider=provider)
        task = asyncio.create_task(tracker.run())
        await asyncio.sleep(0.1)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        return tracker

    tracker = asyncio.run(scenario())

    assert len(calls) >= 3
    assert tracker.geometry.width == 40 + len(calls)


def test_terminal_width_falls_back(monkeypatch):
    monkeypatch.setenv("COLUMNS", "57")

    assert terminal_width() == 57
