#!/usr/bin/env python3
"""Main entry point for the world status monitor."""

import sys

from world_monitor.cli import main

if __name__ == "__main__":
    sys.exit(main())
