"""
osm-tags-transform - rewrite OpenStreetMap tags with a Python script.

Features are streamed from an OSM file through user-defined callbacks that
keep, drop or retag each node, way and relation, optionally using bounding
boxes derived from the input geometry.
"""

__version__ = "0.1.0"

# Data models
from osm_transform.models.elements import OSMNode, OSMWay, OSMRelation, Member
from osm_transform.models.geometry import Location, BoundingBox

# Configuration and errors
from osm_transform.config import ProcessingConfig, GeometryMode, UntaggedMode
from osm_transform.exceptions import (
    TransformError, ConfigurationError, ScriptLoadError, ScriptCallError,
    ScriptResultError, TagTypeError, ScriptContextError, IndexPhaseError,
)

# Index
from osm_transform.index.backends import MapFactory
from osm_transform.index.spatial_index import SpatialIndex, resolve_bbox

# Scripting
from osm_transform.scripting.binding import ScriptBinding, BoundFunction, CallingContext
from osm_transform.scripting.runtime import ScriptRuntime
from osm_transform.scripting.snapshot import FeatureSnapshot

# Processing
from osm_transform.processing.buffer import OutputBuffer
from osm_transform.processing.processor import ObjectProcessor

# I/O
from osm_transform.io.reader import OSMReader
from osm_transform.io.writer import OSMWriter

# Main API
from osm_transform.api import TagsTransform

__all__ = [
    # Version
    '__version__',
    # Models
    'OSMNode', 'OSMWay', 'OSMRelation', 'Member', 'Location', 'BoundingBox',
    # Configuration
    'ProcessingConfig', 'GeometryMode', 'UntaggedMode',
    # Errors
    'TransformError', 'ConfigurationError', 'ScriptLoadError', 'ScriptCallError',
    'ScriptResultError', 'TagTypeError', 'ScriptContextError', 'IndexPhaseError',
    # Index
    'MapFactory', 'SpatialIndex', 'resolve_bbox',
    # Scripting
    'ScriptBinding', 'BoundFunction', 'CallingContext', 'ScriptRuntime',
    'FeatureSnapshot',
    # Processing
    'OutputBuffer', 'ObjectProcessor',
    # I/O
    'OSMReader', 'OSMWriter',
    # API
    'TagsTransform',
]
