#!/usr/bin/env python3
"""
avgstego command line entry point.

Runs the CLI straight from a source checkout; an installed package
provides the same thing as the ``avgstego`` console script.
"""

import os
import sys

# Add python-core to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'python-core'))

from avgstego.cli import main


if __name__ == "__main__":
    main()
