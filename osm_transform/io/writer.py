"""OSM XML writer."""
import io
import sys
from pathlib import Path
from typing import Iterable, Optional, TextIO, Union

from osm_transform.io.reader import OSMHeader
from osm_transform.models.elements import OSMNode, OSMObject, OSMRelation, OSMWay
from osm_transform.utils.xml_utils import xml_attrs, xml_escape

OUTPUT_FORMATS = ('osm', 'osm.gz', 'xml')


def format_coordinate(value: float) -> str:
    """Format a coordinate with at most 7 decimals, as OSM tools do.

    Examples:
        >>> format_coordinate(10.0)
        '10'
        >>> format_coordinate(-0.1234567891)
        '-0.1234568'
    """
    text = f"{value:.7f}".rstrip('0').rstrip('.')
    return '0' if text == '-0' else text


def detect_format(output_file: Optional[str], output_format: Optional[str]) -> str:
    """Determine the output format from an explicit format or a file name.

    Raises:
        ValueError: If the format is unknown or can not be detected
    """
    if output_format:
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format '{output_format}'. "
                f"Use one of: {', '.join(OUTPUT_FORMATS)}")
        return output_format
    if output_file:
        name = str(output_file).lower()
        if name.endswith('.osm.gz'):
            return 'osm.gz'
        if name.endswith('.osm') or name.endswith('.xml'):
            return 'osm'
    raise ValueError(f"Can not detect output format of '{output_file}'. Use -f.")


class OSMWriter:
    """Write features to an OSM XML file (or stdout) batch by batch.

    Args:
        output_file: Target path; None writes to stdout
        output_format: 'osm', 'osm.gz' or 'xml'; detected from the
            file name when not given
        overwrite: Allow replacing an existing file
        generator: Value of the ``generator`` attribute
    """

    def __init__(self, output_file: Optional[Union[str, Path]] = None,
                 output_format: Optional[str] = None,
                 overwrite: bool = False,
                 generator: Optional[str] = None):
        from osm_transform import __version__

        self.output_file = str(output_file) if output_file else None
        self.output_format = detect_format(self.output_file, output_format)
        self.generator = generator or f"osm-tags-transform/{__version__}"
        self.header = OSMHeader()
        self.elements_written = 0
        self._started = False

        if self.output_file is None:
            if self.output_format == 'osm.gz':
                raise ValueError("Compressed output needs an output file")
            self._stream: TextIO = sys.stdout
            self._owns_stream = False
        else:
            if Path(self.output_file).exists() and not overwrite:
                raise FileExistsError(
                    f"Output file '{self.output_file}' already exists. "
                    "Use --overwrite to replace it.")
            if self.output_format == 'osm.gz':
                import gzip
                self._stream = io.TextIOWrapper(
                    gzip.open(self.output_file, 'wb'), encoding='utf-8')
            else:
                self._stream = open(self.output_file, 'w', encoding='utf-8')
            self._owns_stream = True

    def set_header(self, header: OSMHeader) -> None:
        """Use bounds from the input header. Must be called before writing."""
        self.header = header

    def _start(self) -> None:
        if self._started:
            return
        self._started = True
        f = self._stream
        f.write('<?xml version="1.0" encoding="UTF-8"?>\n')
        extra = [(name, value) for name, value in self.header.attributes.items()
                 if name not in ('version', 'generator')]
        f.write(f'<osm version="0.6" generator="{xml_escape(self.generator)}"'
                f'{xml_attrs(extra)}>\n')
        if self.header.bounds:
            f.write(f'  <bounds{xml_attrs(self.header.bounds.items())}/>\n')

    def write(self, features: Iterable[OSMObject]) -> None:
        """Write one committed batch."""
        self._start()
        for feature in features:
            self._write_feature(feature)
            self.elements_written += 1

    def _write_feature(self, feature: OSMObject) -> None:
        f = self._stream
        attrs = [('id', feature.id)]
        # Out-of-range coordinates are written as read
        if isinstance(feature, OSMNode) and None not in (feature.lon, feature.lat):
            attrs.append(('lat', format_coordinate(feature.lat)))
            attrs.append(('lon', format_coordinate(feature.lon)))
        for name in ('version', 'changeset', 'timestamp', 'uid', 'user'):
            value = getattr(feature, name)
            if value is not None:
                attrs.append((name, value))

        opening = f'  <{feature.kind}{xml_attrs(attrs)}'
        has_children = bool(feature.tags) or (
            isinstance(feature, OSMWay) and feature.node_refs) or (
            isinstance(feature, OSMRelation) and feature.members)
        if not has_children:
            f.write(opening + '/>\n')
            return

        f.write(opening + '>\n')
        if isinstance(feature, OSMWay):
            for node_ref in feature.node_refs:
                f.write(f'    <nd ref="{node_ref}"/>\n')
        elif isinstance(feature, OSMRelation):
            for member in feature.members:
                f.write(f'    <member type="{member.type}" ref="{member.ref}" '
                        f'role="{xml_escape(member.role)}"/>\n')
        for k, v in feature.tags.items():
            f.write(f'    <tag k="{xml_escape(k)}" v="{xml_escape(v)}"/>\n')
        f.write(f'  </{feature.kind}>\n')

    def close(self) -> None:
        """Finish the document and close the file."""
        self._start()
        self._stream.write('</osm>\n')
        if self._owns_stream:
            self._stream.close()
        else:
            self._stream.flush()

    def __enter__(self) -> 'OSMWriter':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
