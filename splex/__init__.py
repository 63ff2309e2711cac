"""
SpleX - Log File Multiplexer

This package follows several growing log files at once and merges their
lines into a single color-coded stream, written to the terminal or to a
resilient output file.
"""

__version__ = "0.1.0"
__author__ = "SpleX Team"
