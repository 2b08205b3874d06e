#!/usr/bin/env python3
"""
Main entrypoint for nosscan (same as `python -m nosscan` or the `nosscan` script).
"""

import sys

from nosscan.cli import main

if __name__ == "__main__":
    sys.exit(main())
