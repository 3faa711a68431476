"""OSM XML input and output."""

from osm_transform.io.reader import OSMReader, OSMHeader, open_osm_file, DEFAULT_BATCH_SIZE
from osm_transform.io.writer import OSMWriter, OUTPUT_FORMATS, detect_format, format_coordinate

__all__ = [
    'OSMReader', 'OSMHeader', 'open_osm_file', 'DEFAULT_BATCH_SIZE',
    'OSMWriter', 'OUTPUT_FORMATS', 'detect_format', 'format_coordinate',
]
