"""Read-only view of a feature handed to a processing callback.

A snapshot behaves like the dict ``{'id': ..., 'tags': {...}, 'bbox': [...]}``
(``bbox`` only present when a valid box was derived) and additionally
offers attribute access. The concrete feature being processed is reachable
through ``snapshot.feature`` but only while the callback runs.
"""
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional

from osm_transform.exceptions import ScriptContextError
from osm_transform.models.elements import OSMObject
from osm_transform.models.geometry import BoundingBox
from osm_transform.scripting.binding import CallingContext


class CallContext:
    """Per-call context: the active callback and its current feature.

    Used as a context manager around a single callback invocation. On exit
    the context is reset so nothing leaks into the next call.
    """

    def __init__(self, calling_context: CallingContext, feature: OSMObject):
        self.calling_context = calling_context
        self._feature: Optional[OSMObject] = feature

    @property
    def active(self) -> bool:
        return self._feature is not None

    @property
    def feature(self) -> OSMObject:
        if self._feature is None:
            raise ScriptContextError(
                "The current feature is only available inside "
                f"{self.calling_context.value}()")
        return self._feature

    def close(self) -> None:
        self._feature = None
        self.calling_context = CallingContext.MAIN

    def __enter__(self) -> 'CallContext':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class FeatureSnapshot(Mapping):
    """Immutable mapping with ``id``, ``tags`` and optionally ``bbox``."""

    __slots__ = ('_fields', 'context')

    def __init__(self, feature: OSMObject, box: BoundingBox, context: CallContext):
        fields: Dict[str, Any] = {
            'id': feature.id,
            'tags': dict(feature.tags),
        }
        if box.valid:
            fields['bbox'] = box.as_list()
        object.__setattr__(self, '_fields', fields)
        object.__setattr__(self, 'context', context)

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __getattr__(self, name: str) -> Any:
        try:
            return self._fields[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("FeatureSnapshot is read-only")

    @property
    def feature(self) -> OSMObject:
        """The feature being processed (only valid during the call)."""
        return self.context.feature

    def __repr__(self) -> str:
        return f"FeatureSnapshot({self._fields!r})"
