#!/usr/bin/env python3
"""
wordlen CLI entry point for `python -m wordlen`.

Usage:
    python -m wordlen solve 'x = y ++ "ab"'
    python -m wordlen check problems.txt
    python -m wordlen parse 'x = y ++ z'
    python -m wordlen lengths 'x = "ab" ++ y'
"""

import sys
from wordlen.cli import main

if __name__ == "__main__":
    sys.exit(main())
