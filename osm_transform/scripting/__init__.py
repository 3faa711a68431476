"""User script runtime, callback binding and feature snapshots."""

from osm_transform.scripting.binding import (
    CallingContext, BoundFunction, ScriptBinding, CONTEXT_FOR_KIND
)
from osm_transform.scripting.runtime import ScriptRuntime, NAMESPACE
from osm_transform.scripting.snapshot import CallContext, FeatureSnapshot

__all__ = [
    'CallingContext', 'BoundFunction', 'ScriptBinding', 'CONTEXT_FOR_KIND',
    'ScriptRuntime', 'NAMESPACE',
    'CallContext', 'FeatureSnapshot',
]
