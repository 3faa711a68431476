"""Callback bindings between the processor and the user script."""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from osm_transform.models.elements import NODE, RELATION, WAY


class CallingContext(Enum):
    """Which part of the user script is currently running."""
    MAIN = 'main'
    PROCESS_NODE = 'process_node'
    PROCESS_WAY = 'process_way'
    PROCESS_RELATION = 'process_relation'


CONTEXT_FOR_KIND = {
    NODE: CallingContext.PROCESS_NODE,
    WAY: CallingContext.PROCESS_WAY,
    RELATION: CallingContext.PROCESS_RELATION,
}


@dataclass(frozen=True)
class BoundFunction:
    """A resolved script callback.

    Attributes:
        name: Name of the function in the script namespace
        context: Calling context the function runs in
        func: The callable itself
        nresults: Number of results the function must return
    """
    name: str
    context: CallingContext
    func: Callable
    nresults: int = 1


@dataclass(frozen=True)
class ScriptBinding:
    """The process_* callbacks of one script, resolved once at startup."""
    node: Optional[BoundFunction] = None
    way: Optional[BoundFunction] = None
    relation: Optional[BoundFunction] = None

    @classmethod
    def from_runtime(cls, runtime) -> 'ScriptBinding':
        """Resolve all three callbacks from a loaded ScriptRuntime.

        Raises:
            ConfigurationError: If a callback name is bound to a
                non-callable value
        """
        return cls(**{kind: runtime.bind(context.value, context)
                      for kind, context in CONTEXT_FOR_KIND.items()})

    def for_kind(self, kind: str) -> Optional[BoundFunction]:
        """Get the callback for 'node', 'way' or 'relation'."""
        return getattr(self, kind)

    @property
    def bound_names(self) -> list:
        return [f.name for f in (self.node, self.way, self.relation) if f]
