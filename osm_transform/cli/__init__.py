"""Command-line interface for osm-tags-transform.

This module provides the CLI entry point for the osm-tags-transform
command. It is used by setuptools to create the console script.

Usage:
    # After pip install:
    osm-tags-transform --help
    osm-tags-transform -c retag.py -o out.osm map.osm

    # Or via Python:
    python -m osm_transform.cli
"""

import sys
from osm_transform.cli.main import main as _main, create_parser

__all__ = ['main', 'create_parser']


def main() -> int:
    """Entry point for the osm-tags-transform CLI.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        return _main() or 0
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"osm-tags-transform: fatal error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
