"""Allow running osm_transform as a module.

Usage:
    python -m osm_transform --help
    python -m osm_transform -c retag.py -o out.osm map.osm
"""

import sys
from osm_transform.cli import main

if __name__ == "__main__":
    sys.exit(main())
