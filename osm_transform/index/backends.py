"""Keyed map backends for the spatial index.

A backend maps a signed object id to a fixed-width tuple of floats (a
location is ``(lon, lat)``, a bounding box ``(min_lon, min_lat, max_lon,
max_lat)``). Backends are selected by name with an optional parameter,
e.g. ``sqlite,/tmp/locations.db``.

All backends share the same life cycle: any number of ``set`` calls, one
``finalize`` and then only ``get_if_present`` lookups.
"""
import bisect
import sqlite3
import struct
import sys
from abc import ABC, abstractmethod
from array import array
from typing import Dict, List, Optional, Tuple, Type

from osm_transform.exceptions import ConfigurationError, IndexPhaseError

Value = Tuple[float, ...]


class LocationMap(ABC):
    """Abstract id -> value map."""

    name = ''

    def __init__(self, param: Optional[str] = None):
        self.param = param

    @abstractmethod
    def set(self, object_id: int, value: Value) -> None:
        """Store ``value`` under ``object_id``."""

    @abstractmethod
    def get_if_present(self, object_id: int) -> Optional[Value]:
        """Return the stored value or None."""

    def finalize(self) -> None:
        """Prepare the map for lookups. Calling it again is a no-op."""

    @abstractmethod
    def memory_used(self) -> int:
        """Approximate number of bytes used by the map."""

    @abstractmethod
    def __len__(self) -> int:
        pass

    def close(self) -> None:
        """Release any external resources."""


class FlexMemMap(LocationMap):
    """Dict backed map. Lookups work in any phase."""

    name = 'flex_mem'

    def __init__(self, param: Optional[str] = None):
        super().__init__(param)
        self._data: Dict[int, Value] = {}

    def set(self, object_id: int, value: Value) -> None:
        self._data[object_id] = value

    def get_if_present(self, object_id: int) -> Optional[Value]:
        return self._data.get(object_id)

    def memory_used(self) -> int:
        # Tuples and ints are counted too, not only the dict table
        size = sys.getsizeof(self._data)
        for value in self._data.values():
            size += sys.getsizeof(value) + 8
        return size

    def __len__(self) -> int:
        return len(self._data)


class SparseMemArrayMap(LocationMap):
    """Parallel arrays of ids and values, sorted once on finalize.

    Cheaper than ``flex_mem`` for large extracts because ids are stored in
    a packed ``array('q')``. Lookups are binary searches and therefore only
    allowed after ``finalize``.
    """

    name = 'sparse_mem_array'

    def __init__(self, param: Optional[str] = None):
        super().__init__(param)
        self._ids = array('q')
        self._values: List[Value] = []
        self._sorted = False

    def set(self, object_id: int, value: Value) -> None:
        if self._sorted:
            raise IndexPhaseError(
                f"Cannot add id {object_id} to finalized {self.name} index")
        self._ids.append(object_id)
        self._values.append(value)

    def finalize(self) -> None:
        if self._sorted:
            return
        # Stable sort keeps the last write for duplicate ids at the end
        order = sorted(range(len(self._ids)), key=self._ids.__getitem__)
        self._ids = array('q', (self._ids[i] for i in order))
        self._values = [self._values[i] for i in order]
        self._sorted = True

    def get_if_present(self, object_id: int) -> Optional[Value]:
        if not self._sorted:
            raise IndexPhaseError(
                f"{self.name} index must be finalized before lookup")
        pos = bisect.bisect_right(self._ids, object_id) - 1
        if pos >= 0 and self._ids[pos] == object_id:
            return self._values[pos]
        return None

    def memory_used(self) -> int:
        size = self._ids.buffer_info()[1] * self._ids.itemsize
        size += sys.getsizeof(self._values)
        for value in self._values:
            size += sys.getsizeof(value)
        return size

    def __len__(self) -> int:
        return len(self._ids)


class SqliteMap(LocationMap):
    """SQLite backed map, in memory or in the file given as parameter.

    Values are packed as little-endian doubles. The file, if any, is only
    scratch space for the current run.
    """

    name = 'sqlite'

    def __init__(self, param: Optional[str] = None):
        super().__init__(param)
        self._conn = sqlite3.connect(param or ':memory:')
        self._conn.execute('DROP TABLE IF EXISTS idx')
        self._conn.execute(
            'CREATE TABLE idx (id INTEGER PRIMARY KEY, value BLOB NOT NULL)')

    def set(self, object_id: int, value: Value) -> None:
        packed = struct.pack(f'<{len(value)}d', *value)
        self._conn.execute(
            'INSERT OR REPLACE INTO idx (id, value) VALUES (?, ?)',
            (object_id, packed))

    def finalize(self) -> None:
        self._conn.commit()

    def get_if_present(self, object_id: int) -> Optional[Value]:
        row = self._conn.execute(
            'SELECT value FROM idx WHERE id = ?', (object_id,)).fetchone()
        if row is None:
            return None
        blob = row[0]
        return struct.unpack(f'<{len(blob) // 8}d', blob)

    def memory_used(self) -> int:
        page_count = self._conn.execute('PRAGMA page_count').fetchone()[0]
        page_size = self._conn.execute('PRAGMA page_size').fetchone()[0]
        return page_count * page_size

    def __len__(self) -> int:
        return self._conn.execute('SELECT COUNT(*) FROM idx').fetchone()[0]

    def close(self) -> None:
        self._conn.close()


class MapFactory:
    """Registry of backends selectable by name."""

    _registry: Dict[str, Type[LocationMap]] = {}

    @classmethod
    def register(cls, map_class: Type[LocationMap]) -> Type[LocationMap]:
        cls._registry[map_class.name] = map_class
        return map_class

    @classmethod
    def map_types(cls) -> List[str]:
        """Get the names of all registered backends."""
        return sorted(cls._registry)

    @classmethod
    def has_map_type(cls, name: str) -> bool:
        return name in cls._registry

    @classmethod
    def create_map(cls, index_spec: str) -> LocationMap:
        """Create a backend from a ``name[,param]`` string.

        Raises:
            ConfigurationError: If the backend name is unknown
        """
        name, _, param = index_spec.partition(',')
        map_class = cls._registry.get(name)
        if map_class is None:
            raise ConfigurationError(
                f"Unknown index type '{index_spec}'. "
                "Use --show-index-types or -I to get a list.")
        return map_class(param or None)


for _map_class in (FlexMemMap, SparseMemArrayMap, SqliteMap):
    MapFactory.register(_map_class)
