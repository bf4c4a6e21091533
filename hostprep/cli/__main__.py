#!/usr/bin/env python3
"""
Entry point for hostprep CLI tool.
"""

import sys

from hostprep.cli.cli import main

if __name__ == "__main__":
    sys.exit(main())
