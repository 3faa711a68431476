"""Output buffer collecting finalized features for one read batch."""
from typing import Iterator, List

from osm_transform.models.elements import OSMObject


class OutputBuffer:
    """Features are added, then committed as a unit.

    Only committed features reach the writer; anything added but not yet
    committed when a fatal error unwinds the run is discarded.
    """

    def __init__(self):
        self._committed: List[OSMObject] = []
        self._pending: List[OSMObject] = []

    def add(self, feature: OSMObject) -> None:
        self._pending.append(feature)

    def commit(self) -> None:
        self._committed.extend(self._pending)
        self._pending.clear()

    @property
    def committed(self) -> List[OSMObject]:
        return list(self._committed)

    def __len__(self) -> int:
        return len(self._committed)

    def __iter__(self) -> Iterator[OSMObject]:
        return iter(self._committed)
