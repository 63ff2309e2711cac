"""
Output formatting of merged lines.

The table, custom-colors and monochrome flags collapse into one FormatMode
at startup. Monochrome always wins over colors; table only changes the
shape of the output.

    flags (t=1, c=2, m=4)   mode          output
    0                       PLAIN         # file: text            (colored)
    1                       TABLE         # file: | text + separator (colored)
    2                       COLOR_PLAIN   like PLAIN, custom palette
    3                       COLOR_TABLE   like TABLE, custom palette
    4, 6                    MONO          # file: text
    5, 7                    MONO_TABLE    # file: | text + separator
"""

from enum import Enum
from typing import Dict, List

from splex.utils.colors import Painter

from .geometry import TerminalGeometry, TerminalGeometryTracker
from .models import LineEvent

TABLE_FLAG = 1
COLORS_FLAG = 2
MONOCHROME_FLAG = 4

# Color of the table border and separator, and of the line text
BORDER_COLOR = "green"
TEXT_COLOR = "white"


class FormatMode(Enum):
    """Rendering modes."""

    PLAIN = "plain"
    COLOR_PLAIN = "color-plain"
    TABLE = "table"
    COLOR_TABLE = "color-table"
    MONO = "mono"
    MONO_TABLE = "mono-table"

    @property
    def is_table(self) -> bool:
        return self in TABLE_MODES

    @property
    def is_colored(self) -> bool:
        return self not in (FormatMode.MONO, FormatMode.MONO_TABLE)


TABLE_MODES = frozenset({FormatMode.TABLE, FormatMode.COLOR_TABLE, FormatMode.MONO_TABLE})


MODE_BY_FLAGS: Dict[int, FormatMode] = {
    0: FormatMode.PLAIN,
    1: FormatMode.TABLE,
    2: FormatMode.COLOR_PLAIN,
    3: FormatMode.COLOR_TABLE,
    4: FormatMode.MONO,
    5: FormatMode.MONO_TABLE,
    6: FormatMode.MONO,
    7: FormatMode.MONO_TABLE,
}


def derive_mode(table: bool, colors: bool, monochrome: bool) -> FormatMode:
    """
    Resolve the three output flags into a FormatMode.

    Args:
        table: Table output requested
        colors: Custom colors were given
        monochrome: Monochrome output requested

    Returns:
        The mode used for every line of the run
    """
    flags = (
        (TABLE_FLAG if table else 0)
        | (COLORS_FLAG if colors else 0)
        | (MONOCHROME_FLAG if monochrome else 0)
    )
    return MODE_BY_FLAGS[flags]


def render(
    mode: FormatMode,
    event: LineEvent,
    geometry: TerminalGeometry,
    painter: Painter
) -> List[str]:
    """
    Render one event as output lines.

    Args:
        mode: Active FormatMode
        event: Line to render
        geometry: Terminal geometry supplying the separator line
        painter: Applies colors in colored modes

    Returns:
        One line, or two (content and separator) in table modes
    """
    prefix = f"# {event.source_path}: "

    if not mode.is_colored:
        if mode.is_table:
            return [f"{prefix}| {event.text}", geometry.separator_line]
        return [f"{prefix}{event.text}"]

    head = painter.paint(prefix, event.color)
    text = painter.paint(event.text, TEXT_COLOR)
    if mode.is_table:
        return [
            head + painter.paint("| ", BORDER_COLOR) + text,
            painter.paint(geometry.separator_line, BORDER_COLOR),
        ]
    return [head + text]


class Formatter:
    """Render events with a mode fixed at startup."""

    def __init__(self, mode: FormatMode, painter: Painter, geometry: TerminalGeometryTracker):
        self.mode = mode
        self.painter = painter
        self.geometry = geometry

    def render(self, event: LineEvent) -> List[str]:
        """Render an event using the current terminal geometry."""
        return render(self.mode, event, self.geometry.geometry, self.painter)
