"""Data models for OSM elements and geometry."""

from osm_transform.models.elements import (
    NODE, WAY, RELATION, OBJECT_KINDS,
    Member, OSMObject, OSMNode, OSMWay, OSMRelation,
)
from osm_transform.models.geometry import Location, BoundingBox

__all__ = [
    'NODE', 'WAY', 'RELATION', 'OBJECT_KINDS',
    'Member', 'OSMObject', 'OSMNode', 'OSMWay', 'OSMRelation',
    'Location', 'BoundingBox',
]
