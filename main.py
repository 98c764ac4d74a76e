#!/usr/bin/env python3
"""Speedrunner — entry point.

Run with:
    python main.py
    python -m speedrunner
"""

import sys

from speedrunner.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
