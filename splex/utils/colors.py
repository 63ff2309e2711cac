"""
Color utilities for terminal output.

Colors are referred to by name (``red``, ``cyanBright``, ...) or as
``#rrggbb`` hex strings. The Painter renders them as ANSI escape codes for
the color level the terminal supports.
"""

import os
import re
import sys
from enum import IntEnum
from typing import Dict, List, Mapping, Optional, TextIO


RESET = '\033[0m'

# Palette assigned round-robin to input files when no custom colors are given
DEFAULT_PALETTE: List[str] = ["red", "green", "blue", "yellow", "magenta", "cyan"]

# Foreground SGR codes for named colors
NAMED_COLORS: Dict[str, int] = {
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
    "gray": 90,
    "grey": 90,
    "blackBright": 90,
    "redBright": 91,
    "greenBright": 92,
    "yellowBright": 93,
    "blueBright": 94,
    "magentaBright": 95,
    "cyanBright": 96,
    "whiteBright": 97,
}

HEX_COLOR = re.compile(r"^#(?P<r>[0-9a-fA-F]{2})(?P<g>[0-9a-fA-F]{2})(?P<b>[0-9a-fA-F]{2})$")


class ColorLevel(IntEnum):
    """Color support levels, matching the --level flag values."""

    NONE = 0
    BASIC = 1
    ANSI256 = 2
    TRUECOLOR = 3


def is_known_color(name: str) -> bool:
    """Check whether a color name or hex string can be painted."""
    return name in NAMED_COLORS or HEX_COLOR.match(name) is not None


def detect_color_level(
    stream: Optional[TextIO] = None,
    environ: Optional[Mapping[str, str]] = None
) -> ColorLevel:
    """
    Detect how many colors the terminal behind a stream supports.

    Args:
        stream: Output stream to inspect (defaults to sys.stdout)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Detected ColorLevel
    """
    stream = stream if stream is not None else sys.stdout
    environ = environ if environ is not None else os.environ

    if "NO_COLOR" in environ:
        return ColorLevel.NONE

    forced = environ.get("FORCE_COLOR")
    if forced is not None:
        if forced in ("", "true"):
            return ColorLevel.BASIC
        if forced.isdigit():
            return ColorLevel(min(int(forced), ColorLevel.TRUECOLOR))
        return ColorLevel.NONE

    isatty = getattr(stream, "isatty", None)
    if isatty is None or not isatty():
        return ColorLevel.NONE

    term = environ.get("TERM", "")
    if term == "dumb":
        return ColorLevel.NONE
    if environ.get("COLORTERM", "").lower() in ("truecolor", "24bit"):
        return ColorLevel.TRUECOLOR
    if "256" in term:
        return ColorLevel.ANSI256
    return ColorLevel.BASIC


def painter_for(
    level: Optional[int] = None,
    stream: Optional[TextIO] = None,
    monochrome: bool = False
) -> "Painter":
    """
    Build a painter for a forced level, falling back to detection.

    Args:
        level: Forced color level; values outside 0-3 are ignored
        stream: Stream whose terminal is inspected when no level is forced
        monochrome: Disable colors entirely
    """
    if monochrome:
        return Painter(ColorLevel.NONE)
    if level is not None and ColorLevel.NONE <= level <= ColorLevel.TRUECOLOR:
        return Painter(ColorLevel(level))
    return Painter(detect_color_level(stream))


class Painter:
    """Render named or hex colors as ANSI escapes for a given color level."""

    def __init__(self, level: ColorLevel = ColorLevel.BASIC):
        """
        Initialize the painter.

        Args:
            level: Color support level; NONE disables escapes entirely
        """
        self.level = ColorLevel(level)

    def paint(self, text: str, color: str) -> str:
        """
        Wrap text in the escape sequence for a color.

        Args:
            text: Text to color
            color: Color name or #rrggbb hex string

        Returns:
            Colored text, or the text unchanged when colors are disabled

        Raises:
            ValueError: If the color is not known
        """
        if self.level == ColorLevel.NONE:
            return text
        return f"\033[{self._sgr(color)}m{text}{RESET}"

    def error(self, text: str) -> str:
        """Format text as error message."""
        return self.paint(text, "red")

    def warning(self, text: str) -> str:
        """Format text as warning message."""
        return self.paint(text, "yellow")

    def info(self, text: str) -> str:
        """Format text as info message."""
        return self.paint(text, "blue")

    def _sgr(self, color: str) -> str:
        """Build the SGR parameter string for a color."""
        if color in NAMED_COLORS:
            return str(NAMED_COLORS[color])

        match = HEX_COLOR.match(color)
        if match is None:
            raise ValueError(f"Unknown color: {color}")

        r, g, b = (int(match.group(part), 16) for part in ("r", "g", "b"))
        if self.level == ColorLevel.TRUECOLOR:
            return f"38;2;{r};{g};{b}"
        if self.level == ColorLevel.ANSI256:
            return f"38;5;{_rgb_to_ansi256(r, g, b)}"
        return str(_rgb_to_ansi16(r, g, b))


def _rgb_to_ansi256(r: int, g: int, b: int) -> int:
    """Map an RGB triple onto the 6x6x6 color cube of the 256 palette."""
    if r == g == b:
        # Grayscale ramp
        if r < 8:
            return 16
        if r > 248:
            return 231
        return round((r - 8) / 247 * 24) + 232
    return 16 + 36 * round(r / 255 * 5) + 6 * round(g / 255 * 5) + round(b / 255 * 5)


def _rgb_to_ansi16(r: int, g: int, b: int) -> int:
    """Map an RGB triple onto the nearest basic foreground code."""
    code = 30 + ((round(b / 255) << 2) | (round(g / 255) << 1) | round(r / 255))
    if max(r, g, b) > 191:
        code += 60
    return code
