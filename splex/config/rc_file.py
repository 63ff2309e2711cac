"""
Project-local .splexrc file loading.

The rc file lists the files to follow when none are given on the command
line:

    {
      "files": ["logs/log-0.log", "logs/log-1.log"]
    }

JSON is the default format; files ending in .yml or .yaml are read as YAML.
"""

import json
from pathlib import Path
from typing import List, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

DEFAULT_RC_FILE = ".splexrc.json"


class RcFileError(Exception):
    """Exception raised when an rc file cannot be read or is invalid."""
    pass


class RcFile(BaseModel):
    """Contents of a .splexrc file."""

    files: List[str] = Field(..., description="Files to follow, in display order")


def load_rc_file(path: Union[str, Path]) -> RcFile:
    """
    Load and validate an rc file.

    Args:
        path: Path to the rc file

    Returns:
        Parsed RcFile

    Raises:
        RcFileError: If the file is missing, unparsable or has the wrong shape
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding="utf-8") as f:
            if path.suffix in (".yml", ".yaml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except OSError as e:
        raise RcFileError(f"Cannot read {path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise RcFileError(f"Cannot parse {path}: {e}") from e

    try:
        return RcFile.model_validate(data)
    except ValidationError as e:
        raise RcFileError(f"Invalid rc file {path}: {e}") from e
