#!/usr/bin/env python3
"""
osm-tags-transform - rewrite OpenStreetMap tags with a Python script

This is the CLI entry point. The implementation is in the osm_transform
package.

Usage:
    osmtransform.py -c retag.py -o out.osm map.osm
    osmtransform.py -c retag.py -g bbox -u process -o out.osm.gz map.osm.gz
    osmtransform.py --show-index-types

For more information, run: osmtransform.py --help
"""
import sys

# Re-export public API
from osm_transform import (
    __version__,
    OSMNode,
    OSMWay,
    OSMRelation,
    ProcessingConfig,
    TagsTransform,
)

# Re-export CLI entry point
from osm_transform.cli.main import main


def cli_main():
    """CLI entry point for setuptools."""
    sys.exit(main())


if __name__ == "__main__":
    cli_main()
