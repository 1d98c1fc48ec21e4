"""
Entry point for the multisearch package.
Allows running with: python -m multisearch
"""

import sys

from multisearch.cli import main

if __name__ == "__main__":
    sys.exit(main())
