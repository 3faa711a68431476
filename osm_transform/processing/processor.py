"""Per-feature processing pipeline.

Every node, way and relation goes through the same steps:

1. record its geometry in the spatial index (nodes and ways only),
2. decide whether the script needs to see it at all,
3. derive its bounding box,
4. call the script with a read-only snapshot,
5. turn the result into an output feature (or none) and commit it.
"""
from collections import Counter
from collections.abc import Mapping
from typing import Dict, Optional, TextIO

from osm_transform.config import ProcessingConfig, UntaggedMode
from osm_transform.exceptions import ScriptResultError
from osm_transform.index.spatial_index import SpatialIndex
from osm_transform.models.elements import (
    NODE, OBJECT_KINDS, RELATION, WAY, OSMNode, OSMObject, OSMRelation, OSMWay
)
from osm_transform.models.geometry import BoundingBox
from osm_transform.processing.buffer import OutputBuffer
from osm_transform.processing.tags import build_tags
from osm_transform.scripting.binding import BoundFunction, ScriptBinding
from osm_transform.scripting.runtime import ScriptRuntime
from osm_transform.scripting.snapshot import CallContext, FeatureSnapshot


class ObjectProcessor:
    """Routes features through the user script and into an OutputBuffer.

    Args:
        runtime: Loaded script runtime
        binding: Callbacks resolved from the runtime
        config: Geometry mode, untagged policy and index backend
        spatial_index: Index to use; created from ``config`` when geometry
            processing is enabled and none is given
        warning_stream: Where non-fatal warnings go (default: stderr)
    """

    def __init__(self, runtime: ScriptRuntime, binding: ScriptBinding,
                 config: Optional[ProcessingConfig] = None,
                 spatial_index: Optional[SpatialIndex] = None,
                 warning_stream: Optional[TextIO] = None):
        self.runtime = runtime
        self.binding = binding
        self.config = config or ProcessingConfig()
        self.warning_stream = warning_stream

        self.index: Optional[SpatialIndex] = None
        if self.config.geometry_enabled:
            self.index = spatial_index or SpatialIndex(self.config.index_type)

        self._buffer: Optional[OutputBuffer] = None
        self._stats: Dict[str, Counter] = {kind: Counter() for kind in OBJECT_KINDS}

    def set_buffer(self, buffer: OutputBuffer) -> None:
        """Set the buffer receiving output for the current read batch."""
        self._buffer = buffer

    # === Entry points ===

    def apply(self, feature: OSMObject) -> None:
        """Process one feature of any kind."""
        if feature.kind == NODE:
            self.node(feature)
        elif feature.kind == WAY:
            self.way(feature)
        elif feature.kind == RELATION:
            self.relation(feature)
        else:
            raise TypeError(f"Unsupported feature type: {type(feature).__name__}")

    def node(self, node: OSMNode) -> None:
        if self.index is not None:
            self.index.add_node_location(node.id, node.location)
        self._process(node, lambda: BoundingBox.from_location(node.location))

    def way(self, way: OSMWay) -> None:
        box = BoundingBox()
        if self.index is not None:
            box = self.index.bbox_for_way(way)
            self.index.add_way_bbox(way.id, box)
        self._process(way, lambda: box)

    def relation(self, relation: OSMRelation) -> None:
        if self.index is not None:
            self.index.finish_ways()
        self._process(relation, lambda: self.index.bbox_for_relation(relation))

    # === Pipeline ===

    def _process(self, feature: OSMObject, derive_box) -> None:
        stats = self._stats[feature.kind]
        stats['input'] += 1

        bound = self.binding.for_kind(feature.kind)
        if bound is None or (not feature.tags and
                             self.config.untagged is not UntaggedMode.PROCESS):
            # Only 'copy' passes skipped features through
            if self.config.untagged is not UntaggedMode.COPY:
                stats['dropped'] += 1
                return
            stats['copied'] += 1
            self._emit(feature)
            return

        box = derive_box() if self.index is not None else BoundingBox()
        result = self._invoke(bound, feature, box)
        output = self._interpret(feature, result)

        if output is None:
            stats['dropped'] += 1
            return
        stats['kept' if output is feature else 'modified'] += 1
        self._emit(output)

    def _invoke(self, bound: BoundFunction, feature: OSMObject, box: BoundingBox):
        with CallContext(bound.context, feature) as context:
            snapshot = FeatureSnapshot(feature, box, context)
            return self.runtime.call(bound, snapshot)

    def _interpret(self, feature: OSMObject, result) -> Optional[OSMObject]:
        """Map a callback result to the feature to emit, or None.

        Raises:
            ScriptResultError: If the result is not a bool or a mapping
            TagTypeError: If a returned tag key or value is not a string
        """
        if isinstance(result, bool):
            return feature if result else None
        if isinstance(result, Mapping):
            return feature.with_tags(build_tags(result, self.warning_stream))
        raise ScriptResultError(
            "Processing functions should return True, False, or a tags dict")

    def _emit(self, feature: OSMObject) -> None:
        if self._buffer is None:
            raise RuntimeError("No output buffer set")
        self._buffer.add(feature)
        self._buffer.commit()

    # === Reporting ===

    def stats(self) -> Dict[str, Dict[str, int]]:
        """Per-kind counters: input, kept, modified, dropped, copied."""
        keys = ('input', 'kept', 'modified', 'dropped', 'copied')
        return {kind: {key: counter[key] for key in keys}
                for kind, counter in self._stats.items()}

    def memory_used(self) -> Dict[str, int]:
        if self.index is None:
            return {}
        return self.index.memory_used()
