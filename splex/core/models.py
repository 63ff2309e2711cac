"""
Data models shared by the splex engine.
"""

from dataclasses import dataclass

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class Source:
    """A configured input file and its display color."""

    path: str
    color: str
    index: int


class LineEvent(BaseModel):
    """A single complete line read from a followed file."""

    source_path: str = Field(..., description="Path of the file the line was read from, as configured")
    color: str = Field(..., description="Display color assigned to the source file")
    text: str = Field(..., description="Line content without its terminator")
