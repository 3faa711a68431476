"""Streaming OSM XML reader.

Reads plain or gzip-compressed OSM XML and yields features in batches, in
file order. Elements are cleared as soon as they are converted, so memory
use stays constant regardless of file size.
"""
import gzip
import time
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from osm_transform.models.elements import (
    Member, OSMNode, OSMObject, OSMRelation, OSMWay
)
from osm_transform.models.geometry import Location

DEFAULT_BATCH_SIZE = 8000

OBJECT_TAGS = ('node', 'way', 'relation')


def _int_or_none(value: Optional[str]) -> Optional[int]:
    return int(value) if value is not None else None


def _float_or_none(value: Optional[str]) -> Optional[float]:
    return float(value) if value is not None else None


def open_osm_file(path: Union[str, Path], mode: str = 'rb'):
    """Open an OSM file, transparently handling ``.gz`` compression."""
    path = str(path)
    if path.endswith('.gz'):
        return gzip.open(path, mode)
    return open(path, mode)


class OSMHeader:
    """Attributes of the ``<osm>`` root element plus ``<bounds>``."""

    def __init__(self, attributes: Optional[Dict[str, str]] = None,
                 bounds: Optional[Dict[str, str]] = None):
        self.attributes = dict(attributes or {})
        self.bounds = dict(bounds) if bounds else None

    def to_dict(self) -> Dict[str, Any]:
        return {'attributes': self.attributes, 'bounds': self.bounds}


class OSMReader:
    """Forward-only reader producing feature batches.

    Args:
        file_path: Path to an ``.osm`` or ``.osm.gz`` file
        batch_size: Maximum number of features per batch
    """

    def __init__(self, file_path: Union[str, Path],
                 batch_size: int = DEFAULT_BATCH_SIZE):
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"OSM file not found: {file_path}")
        self.batch_size = batch_size
        self.header = OSMHeader()

        self.stats = {
            'nodes': 0,
            'ways': 0,
            'relations': 0,
            'batches': 0,
            'parsing_time': 0.0,
        }

        self._file = open_osm_file(self.file_path)
        self._events = ET.iterparse(self._file, events=('start', 'end'))
        self._pending: Optional[OSMObject] = None
        self._root: Optional[ET.Element] = None
        self._read_header()

    def _read_header(self) -> None:
        """Consume events up to the first object, filling in the header."""
        for event, elem in self._events:
            if event == 'start' and elem.tag == 'osm':
                self._root = elem
                self.header.attributes = dict(elem.attrib)
            elif event == 'end' and elem.tag == 'bounds':
                self.header.bounds = dict(elem.attrib)
            elif event == 'end' and elem.tag in OBJECT_TAGS:
                self._pending = self._convert(elem)
                self._release(elem)
                return

    def _iter_objects(self) -> Iterator[OSMObject]:
        if self._pending is not None:
            pending, self._pending = self._pending, None
            yield pending
        for event, elem in self._events:
            if event == 'end' and elem.tag in OBJECT_TAGS:
                obj = self._convert(elem)
                self._release(elem)
                yield obj

    def _release(self, elem: ET.Element) -> None:
        elem.clear()
        # Drop references to finished elements kept by the root
        if self._root is not None:
            self._root.clear()

    def _convert(self, elem: ET.Element) -> OSMObject:
        attrib = elem.attrib
        common = {
            'id': int(attrib['id']),
            'tags': {tag.get('k'): tag.get('v') for tag in elem.iter('tag')},
            'version': _int_or_none(attrib.get('version')),
            'changeset': _int_or_none(attrib.get('changeset')),
            'timestamp': attrib.get('timestamp'),
            'uid': _int_or_none(attrib.get('uid')),
            'user': attrib.get('user'),
        }

        if elem.tag == 'node':
            self.stats['nodes'] += 1
            location = Location(_float_or_none(attrib.get('lon')),
                                _float_or_none(attrib.get('lat')))
            return OSMNode(location=location, **common)

        if elem.tag == 'way':
            self.stats['ways'] += 1
            node_refs = [int(nd.get('ref')) for nd in elem.iter('nd')]
            return OSMWay(node_refs=node_refs, **common)

        self.stats['relations'] += 1
        members = [Member(m.get('type'), int(m.get('ref')), m.get('role', ''))
                   for m in elem.iter('member')]
        return OSMRelation(members=members, **common)

    def batches(self) -> Iterator[List[OSMObject]]:
        """Yield lists of at most ``batch_size`` features in file order."""
        start_time = time.time()
        batch: List[OSMObject] = []
        for obj in self._iter_objects():
            batch.append(obj)
            if len(batch) >= self.batch_size:
                self.stats['batches'] += 1
                yield batch
                batch = []
        if batch:
            self.stats['batches'] += 1
            yield batch
        self.stats['parsing_time'] = time.time() - start_time

    def __iter__(self) -> Iterator[OSMObject]:
        for batch in self.batches():
            yield from batch

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> 'OSMReader':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
