"""Two-phase spatial index for bounding box derivation.

Node locations and way bounding boxes are kept in two id-keyed stores. Each
store starts *open* (insert only) and is turned into a *closed* store
(lookup only) exactly once, when the first object that needs it arrives:
the first way closes the node store, the first relation closes the way
store. This relies on the usual OSM file order of nodes, then ways, then
relations.
"""
from typing import Callable, Iterable, Optional, Tuple, Union

from osm_transform.exceptions import IndexPhaseError
from osm_transform.index.backends import LocationMap, MapFactory
from osm_transform.models.elements import NODE, WAY, OSMRelation, OSMWay
from osm_transform.models.geometry import BoundingBox, Location

NodeLookup = Callable[[int], Optional[Location]]
WayLookup = Callable[[int], Optional[BoundingBox]]

WAY_INDEX_TYPE = 'flex_mem'

ORDER_HINT = ("input must be ordered nodes, then ways, then relations; "
              "sort it first, e.g. with 'osmium sort'")


class OpenStore:
    """Insert-only phase of a store.

    ``close()`` finalizes the backend and hands it over to a ClosedStore.
    The open store cannot be used afterwards.
    """

    def __init__(self, name: str, backend: LocationMap):
        self.name = name
        self._backend: Optional[LocationMap] = backend

    def set(self, object_id: int, value: tuple) -> None:
        if self._backend is None:
            raise IndexPhaseError(
                f"{self.name} index is closed; {ORDER_HINT}")
        self._backend.set(object_id, value)

    def close(self) -> 'ClosedStore':
        if self._backend is None:
            raise IndexPhaseError(f"{self.name} index was already closed")
        backend, self._backend = self._backend, None
        backend.finalize()
        return ClosedStore(self.name, backend)


class ClosedStore:
    """Lookup-only phase of a store."""

    def __init__(self, name: str, backend: LocationMap):
        self.name = name
        self.backend = backend

    def get(self, object_id: int) -> Optional[tuple]:
        return self.backend.get_if_present(object_id)


Store = Union[OpenStore, ClosedStore]


def resolve_bbox(refs: Iterable[Tuple[str, int]],
                 node_lookup: NodeLookup,
                 way_lookup: WayLookup) -> BoundingBox:
    """Compute the bounding box of a list of typed references.

    Node references are resolved with ``node_lookup``, way references with
    ``way_lookup``. References of any other type (relations) and references
    that can not be resolved are skipped.

    Args:
        refs: Iterable of (type, id) pairs
        node_lookup: Returns the Location of a node id or None
        way_lookup: Returns the BoundingBox of a way id or None

    Returns:
        The union of all resolved locations and boxes, possibly invalid
    """
    box = BoundingBox()
    for ref_type, ref in refs:
        if ref_type == NODE:
            location = node_lookup(ref)
            if location is not None:
                box = box.extend(location)
        elif ref_type == WAY:
            way_box = way_lookup(ref)
            if way_box is not None:
                box = box.union(way_box)
    return box


class SpatialIndex:
    """Node location and way bounding box stores for one run.

    Args:
        index_type: Backend for node locations (``name[,param]``)
    """

    def __init__(self, index_type: str = 'flex_mem'):
        self.index_type = index_type
        self._nodes: Store = OpenStore('node location', MapFactory.create_map(index_type))
        self._ways: Store = OpenStore('way bbox', MapFactory.create_map(WAY_INDEX_TYPE))

    # === Store phases ===

    @property
    def nodes_closed(self) -> bool:
        return isinstance(self._nodes, ClosedStore)

    @property
    def ways_closed(self) -> bool:
        return isinstance(self._ways, ClosedStore)

    def finish_nodes(self) -> ClosedStore:
        """Close the node store if still open. Further node writes fail."""
        if isinstance(self._nodes, OpenStore):
            self._nodes = self._nodes.close()
        return self._nodes

    def finish_ways(self) -> ClosedStore:
        """Close the way store if still open. Further way writes fail."""
        if isinstance(self._ways, OpenStore):
            self._ways = self._ways.close()
        return self._ways

    # === Writes ===

    def add_node_location(self, node_id: int, location: Location) -> None:
        """Record a node location. Invalid locations are not stored."""
        if isinstance(self._nodes, ClosedStore):
            raise IndexPhaseError(
                f"Node {node_id} after ways; {ORDER_HINT}")
        if location.valid:
            self._nodes.set(node_id, location.as_tuple())

    def add_way_bbox(self, way_id: int, box: BoundingBox) -> None:
        """Record a way bounding box. Invalid boxes are not stored."""
        if isinstance(self._ways, ClosedStore):
            raise IndexPhaseError(
                f"Way {way_id} after relations; {ORDER_HINT}")
        if box.valid:
            self._ways.set(way_id, box.as_tuple())

    # === Lookups ===

    def node_location(self, node_id: int) -> Optional[Location]:
        value = self.finish_nodes().get(node_id)
        if value is None:
            return None
        return Location(*value)

    def way_bbox(self, way_id: int) -> Optional[BoundingBox]:
        value = self.finish_ways().get(way_id)
        if value is None:
            return None
        return BoundingBox.from_tuple(value)

    def bbox_for_way(self, way: OSMWay) -> BoundingBox:
        """Union of the locations of all known nodes of a way.

        Closes the node store on first use.
        """
        self.finish_nodes()
        return resolve_bbox(((NODE, ref) for ref in way.node_refs),
                            self.node_location, self.way_bbox)

    def bbox_for_relation(self, relation: OSMRelation) -> BoundingBox:
        """Union over node and way members of a relation.

        Closes the way store on first use. Relation members are not
        followed.
        """
        self.finish_nodes()
        self.finish_ways()
        return resolve_bbox(((m.type, m.ref) for m in relation.members),
                            self.node_location, self.way_bbox)

    # === Reporting ===

    def memory_used(self) -> dict:
        """Bytes used by the node location and way bbox backends."""
        return {
            'node_locations': self._backend(self._nodes).memory_used(),
            'way_bboxes': self._backend(self._ways).memory_used(),
        }

    def close(self) -> None:
        """Release backend resources."""
        for store in (self._nodes, self._ways):
            backend = self._backend(store)
            if backend is not None:
                backend.close()

    @staticmethod
    def _backend(store: Store) -> Optional[LocationMap]:
        if isinstance(store, ClosedStore):
            return store.backend
        return store._backend
