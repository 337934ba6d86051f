#!/usr/bin/env python3
"""Entry point for the ffencode command line."""

from ffencode.cli import main

if __name__ == "__main__":
    # Settings and logging (level from settings, overridden by LOG_LEVEL)
    # are set up once by the command line itself
    main()
