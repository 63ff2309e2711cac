"""
Run configuration for splex.

Combines command-line values, the project-local rc file and environment
variables into one SplexConfig, validated before anything starts.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from splex.utils.colors import DEFAULT_PALETTE, is_known_color

from .rc_file import DEFAULT_RC_FILE, RcFileError, load_rc_file

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Exception raised when the run cannot be configured."""
    pass


@dataclass
class SplexConfig:
    """Configuration settings for a run."""

    files: List[str]
    table: bool = False
    colors: Optional[List[str]] = None
    monochrome: bool = False
    level: Optional[int] = None
    output: Optional[str] = None
    rc_file: str = DEFAULT_RC_FILE
    from_rc_file: bool = False
    poll_interval: float = 1.0
    update_check: bool = True
    palette: List[str] = field(init=False)

    def __post_init__(self):
        self.palette = list(self.colors) if self.colors else list(DEFAULT_PALETTE)

    @property
    def custom_colors(self) -> bool:
        """True when a custom palette was given."""
        return bool(self.colors)


def parse_colors(value: Optional[str]) -> Optional[List[str]]:
    """
    Parse a comma-separated color list.

    Args:
        value: Raw flag value such as "red,green"

    Returns:
        List of color names, or None if the value is empty

    Raises:
        ConfigurationError: If a color name is not known
    """
    if not value:
        return None

    colors = [color.strip() for color in value.split(",") if color.strip()]
    if not colors:
        return None

    unknown = [color for color in colors if not is_known_color(color)]
    if unknown:
        raise ConfigurationError(f"Unknown colors: {', '.join(unknown)}")
    return colors


def resolve_config(
    files: Sequence[str] = (),
    rc_file: str = DEFAULT_RC_FILE,
    table: bool = False,
    colors: Optional[str] = None,
    monochrome: bool = False,
    level: Optional[int] = None,
    output: Optional[str] = None,
    update_check: bool = True,
    environ: Optional[Mapping[str, str]] = None
) -> SplexConfig:
    """
    Build the configuration for a run.

    Files given directly win; otherwise they are read from the rc file.

    Args:
        files: Files given on the command line
        rc_file: rc file consulted when no files are given
        table: Table output flag
        colors: Comma-separated custom colors
        monochrome: Monochrome output flag
        level: Forced color level (0-3); other values are ignored
        output: Output file path
        update_check: Whether the update check may run
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated SplexConfig

    Raises:
        ConfigurationError: If no files can be resolved or a value is invalid
    """
    environ = environ if environ is not None else os.environ

    from_rc_file = False
    file_list = list(files)
    if not file_list:
        if not Path(rc_file).exists():
            raise ConfigurationError("No files specified.")
        try:
            file_list = load_rc_file(rc_file).files
        except RcFileError as e:
            raise ConfigurationError(str(e)) from e
        from_rc_file = True
        if not file_list:
            raise ConfigurationError(f"No files listed in {rc_file}.")

    if level is not None and not 0 <= level <= 3:
        logger.warning(f"Ignoring color level {level}, expected 0-3")
        level = None

    poll_interval = _env_float(environ, "SPLEX_POLL_INTERVAL", 1.0)
    if environ.get("SPLEX_NO_UPDATE_CHECK", "").lower() in ("1", "true", "yes"):
        update_check = False

    return SplexConfig(
        files=file_list,
        table=table,
        colors=parse_colors(colors),
        monochrome=monochrome,
        level=level,
        output=output or None,
        rc_file=rc_file,
        from_rc_file=from_rc_file,
        poll_interval=poll_interval,
        update_check=update_check
    )


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value
