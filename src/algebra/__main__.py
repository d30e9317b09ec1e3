"""
CLI entry point for algebra package.

Usage:
    python -m algebra [options]
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
