"""
Shared fixtures for the splex tests.
"""

from pathlib import Path

import pytest


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    """An existing, empty log file."""
    path = tmp_path / "app.log"
    path.touch()
    return path


@pytest.fixture
def collected():
    """Lists collecting lines and errors reported by a LineSource."""
    return {"lines": [], "errors": []}
