"""
Tests for color detection and painting.
"""

import io

import pytest

from splex.utils.colors import ColorLevel, Painter, detect_color_level, is_known_color, painter_for


class TtyStream(io.StringIO):
    def isatty(self):
        return True


@pytest.mark.parametrize("environ, expected", [
    ({"NO_COLOR": "1", "TERM": "xterm-256color"}, ColorLevel.NONE),
    ({"FORCE_COLOR": "2"}, ColorLevel.ANSI256),
    ({"FORCE_COLOR": "9"}, ColorLevel.TRUECOLOR),
    ({"FORCE_COLOR": "0"}, ColorLevel.NONE),
    ({"TERM": "dumb"}, ColorLevel.NONE),
    ({"TERM": "xterm", "COLORTERM": "truecolor"}, ColorLevel.TRUECOLOR),
    ({"TERM": "xterm-256color"}, ColorLevel.ANSI256),
    ({"TERM": "xterm"}, ColorLevel.BASIC),
])
def test_detect_color_level_on_tty(environ, expected):
    assert detect_color_level(TtyStream(), environ) == expected


def test_non_tty_has_no_color():
    assert detect_color_level(io.StringIO(), {"TERM": "xterm-256color"}) == ColorLevel.NONE


def test_paint_named_colors():
    painter = Painter(ColorLevel.BASIC)

    assert painter.paint("x", "cyan") == "\033[36mx\033[0m"
    assert painter.paint("x", "redBright") == "\033[91mx\033[0m"


def test_paint_hex_per_level():
    assert Painter(ColorLevel.TRUECOLOR).paint("x", "#ff8000") == "\033[38;2;255;128;0mx\033[0m"
    assert Painter(ColorLevel.ANSI256).paint("x", "#ff0000") == "\033[38;5;196mx\033[0m"
    assert Painter(ColorLevel.BASIC).paint("x", "#0000ff") == "\033[94mx\033[0m"
    assert Painter(ColorLevel.BASIC).paint("x", "#000080") == "\033[34mx\033[0m"


def test_paint_disabled():
    assert Painter(ColorLevel.NONE).paint("x", "red") == "x"


def test_unknown_color_raises():
    with pytest.raises(ValueError):
        Painter(ColorLevel.BASIC).paint("x", "chartreuse")


def test_known_colors():
    assert is_known_color("magenta")
    assert is_known_color("#A0b1C2")
    assert not is_known_color("#abc")
    assert not is_known_color("purple")


def test_message_helpers():
    painter = Painter(ColorLevel.BASIC)

    assert painter.error("bad") == "\033[31mbad\033[0m"
    assert painter.warning("hm") == "\033[33mhm\033[0m"
    assert painter.info("fyi") == "\033[34mfyi\033[0m"


def test_message_helpers_follow_level():
    painter = Painter(ColorLevel.NONE)

    assert painter.error("bad") == "bad"
    assert painter.info("fyi") == "fyi"


def test_painter_for_forced_level_and_monochrome():
    assert painter_for(2, io.StringIO()).level == ColorLevel.ANSI256
    assert painter_for(3, TtyStream(), monochrome=True).level == ColorLevel.NONE
    assert painter_for(0, TtyStream()).level == ColorLevel.NONE


def test_painter_for_ignores_out_of_range_level(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)

    assert painter_for(7, io.StringIO()).level == ColorLevel.NONE
