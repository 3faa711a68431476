"""Spatial index used to derive bounding boxes of ways and relations."""

from osm_transform.index.backends import (
    LocationMap, FlexMemMap, SparseMemArrayMap, SqliteMap, MapFactory
)
from osm_transform.index.spatial_index import (
    OpenStore, ClosedStore, SpatialIndex, resolve_bbox
)

__all__ = [
    'LocationMap', 'FlexMemMap', 'SparseMemArrayMap', 'SqliteMap', 'MapFactory',
    'OpenStore', 'ClosedStore', 'SpatialIndex', 'resolve_bbox',
]
