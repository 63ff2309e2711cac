"""
Entry point for running splex as a Python module (python -m splex).
"""

import sys

from splex.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
