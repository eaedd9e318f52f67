"""
Entry point for running the package as a module.

Usage: python -m tag_router <source> <dest_root> [move|copy]
"""

import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
