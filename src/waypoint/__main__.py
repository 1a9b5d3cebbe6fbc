"""Main entry point for the Waypoint package when run as a module.

This module enables running Waypoint directly using 'python -m waypoint'.
"""

import sys

from . import cli


def main():
    """Main entry point for the package."""
    sys.exit(cli.main())


if __name__ == "__main__":
    main()
