"""Main entry point for WetHelder.

For CLI usage, use: wethelder <query>
Or run directly: python main.py <query>
"""

import sys

from wethelder.interfaces.cli.cli import main

if __name__ == "__main__":
    sys.exit(main())
