#!/usr/bin/env python3
"""
floorgen - command line entry point.

Usage:
    python main.py --seed 12345 --floor 1
    python main.py --help
"""

import sys

from floorgen.cli import main

if __name__ == "__main__":
    sys.exit(main())
