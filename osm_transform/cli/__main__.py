"""Allow running osm_transform.cli as a module.

Usage:
    python -m osm_transform.cli --help
"""

import sys
from osm_transform.cli import main

if __name__ == "__main__":
    sys.exit(main())
