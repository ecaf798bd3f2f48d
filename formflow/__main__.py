"""
Entry point for running formflow as a module.

Usage:
    python -m formflow render form.json --format pdf --output form.pdf
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main() or 0)
