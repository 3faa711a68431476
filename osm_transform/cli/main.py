"""CLI main entry point."""
import argparse
import sys
from typing import Optional

from osm_transform import __version__
from osm_transform.config import (
    DEFAULT_INDEX_TYPE, ProcessingConfig, check_index_type,
    parse_geometry_mode, parse_untagged_mode,
)
from osm_transform.exceptions import ConfigurationError
from osm_transform.io.writer import OUTPUT_FORMATS

PROG = 'osm-tags-transform'

USAGE_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog=PROG,
        description='Transform the tags of OSM objects with a Python script',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  osm-tags-transform -c retag.py -o out.osm map.osm
  osm-tags-transform -c filter.py -g bbox -o out.osm.gz map.osm.gz
  osm-tags-transform -c retag.py -u process -f osm map.osm > out.osm
  osm-tags-transform -I
'''
    )

    parser.add_argument('input_file', nargs='?', help='Input OSM file')

    parser.add_argument('-c', '--config-file', metavar='SCRIPT',
                        help='Python processing script')
    parser.add_argument('-f', '--output-format', choices=OUTPUT_FORMATS,
                        help='Output file format (default: from output file name)')
    parser.add_argument('-g', '--geom-proc', default='none', metavar='TYPE',
                        help="Geometry processing ('none' (default) or 'bbox')")
    parser.add_argument('-u', '--untagged', default='copy', metavar='MODE',
                        help="Untagged objects: 'drop', 'copy' (default) or 'process'")
    parser.add_argument('-i', '--index-type', default=DEFAULT_INDEX_TYPE,
                        metavar='INDEX',
                        help=f"Node location index type (default: '{DEFAULT_INDEX_TYPE}')")
    parser.add_argument('-I', '--show-index-types', action='store_true',
                        help='Show available index types')
    parser.add_argument('-o', '--output', metavar='OUTPUT_FILE',
                        help='Output file name')
    parser.add_argument('-O', '--overwrite', action='store_true',
                        help='Allow an existing output file to be overwritten')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose mode')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Suppress the summary')
    parser.add_argument('-V', '--version', action='version',
                        version=f'{PROG} {__version__}')

    return parser


def show_index_types() -> int:
    """Print the names of all available index backends."""
    from osm_transform.index.backends import MapFactory

    for map_type in MapFactory.map_types():
        print(map_type)
    return 0


def _usage_error(message: str) -> int:
    print(f"{message} Try with --help.", file=sys.stderr)
    return USAGE_ERROR


def _build_config(args) -> ProcessingConfig:
    return ProcessingConfig(
        geometry=parse_geometry_mode(args.geom_proc),
        untagged=parse_untagged_mode(args.untagged),
        index_type=check_index_type(args.index_type),
    )


def _print_summary(result: dict) -> None:
    metadata = result['metadata']
    elements = metadata['elements']
    print("\nTransform complete:", file=sys.stderr)
    for kind, counts in result['stats'].items():
        if not counts['input']:
            continue
        print(f"  {kind.capitalize()}s: {counts['input']} in, "
              f"{counts['kept']} kept, {counts['modified']} modified, "
              f"{counts['copied']} copied, {counts['dropped']} dropped",
              file=sys.stderr)
    print(f"  Total: {elements['input']} in, {elements['output']} out",
          file=sys.stderr)
    print(f"  Time: {metadata['processing_time_seconds']:.3f}s", file=sys.stderr)


def main(args: Optional[list] = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.show_index_types:
        return show_index_types()

    try:
        config = _build_config(parsed_args)
    except ConfigurationError as e:
        print(e, file=sys.stderr)
        return USAGE_ERROR

    if not parsed_args.config_file:
        return _usage_error("Missing config file.")
    if not parsed_args.output and not parsed_args.output_format:
        return _usage_error("Missing output file or format.")
    if not parsed_args.input_file:
        return _usage_error("Missing input file.")

    from osm_transform.api import TagsTransform
    from osm_transform.utils.verbose import VerboseOutput

    vout = VerboseOutput(parsed_args.verbose)
    try:
        vout(f"{PROG} {__version__} started")
        transform = TagsTransform(parsed_args.config_file, config, verbose=vout)
        result = transform.run(
            parsed_args.input_file,
            parsed_args.output,
            output_format=parsed_args.output_format,
            overwrite=parsed_args.overwrite,
        )
    except FileNotFoundError as e:
        print(f"{PROG}: error: File not found: {e}", file=sys.stderr)
        return 3
    except Exception as e:
        print(f"{PROG}: error: {e}", file=sys.stderr)
        if parsed_args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    if parsed_args.output and not parsed_args.quiet:
        _print_summary(result)
    return 0


if __name__ == '__main__':
    sys.exit(main())
