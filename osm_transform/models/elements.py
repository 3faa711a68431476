"""OSM Element data models."""
import dataclasses
from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Optional

from osm_transform.models.geometry import Location

NODE = 'node'
WAY = 'way'
RELATION = 'relation'

OBJECT_KINDS = (NODE, WAY, RELATION)


@dataclass(frozen=True)
class Member:
    """Relation member reference: (type, ref, role)."""
    type: str
    ref: int
    role: str = ''


@dataclass
class OSMObject:
    """Attributes shared by all OSM elements.

    Attribution fields (version, changeset, timestamp, uid, user) are
    carried through untouched and are ``None`` when the input did not
    provide them.
    """
    kind: ClassVar[str] = ''

    id: int
    tags: Dict[str, str] = field(default_factory=dict)
    version: Optional[int] = None
    changeset: Optional[int] = None
    timestamp: Optional[str] = None
    uid: Optional[int] = None
    user: Optional[str] = None

    def with_tags(self, tags: Dict[str, str]) -> 'OSMObject':
        """Return a copy of this object with its tag set replaced.

        All structural fields, including the kind-specific payload, are
        kept verbatim.
        """
        return dataclasses.replace(self, tags=dict(tags))


@dataclass
class OSMNode(OSMObject):
    """OSM Node with location and tags.

    Represents a point feature in OpenStreetMap.
    """
    kind: ClassVar[str] = NODE

    location: Location = field(default_factory=Location)

    @property
    def lat(self) -> Optional[float]:
        return self.location.lat

    @property
    def lon(self) -> Optional[float]:
        return self.location.lon


@dataclass
class OSMWay(OSMObject):
    """OSM Way with node references and tags.

    Represents a linear or area feature defined by an ordered list of node
    references.
    """
    kind: ClassVar[str] = WAY

    node_refs: List[int] = field(default_factory=list)

    @property
    def is_closed(self) -> bool:
        """Check if this way forms a closed loop."""
        return (len(self.node_refs) >= 4 and
                self.node_refs[0] == self.node_refs[-1])


@dataclass
class OSMRelation(OSMObject):
    """OSM Relation with members and tags.

    Represents a logical grouping of elements (nodes, ways, other relations)
    with roles and associated tags.
    """
    kind: ClassVar[str] = RELATION

    members: List[Member] = field(default_factory=list)

    @property
    def member_count(self) -> int:
        """Get the number of members in this relation."""
        return len(self.members)

    def get_members_by_type(self, member_type: str) -> List[Member]:
        """Get all members of a specific type.

        Args:
            member_type: 'node', 'way', or 'relation'

        Returns:
            List of members matching the type
        """
        return [m for m in self.members if m.type == member_type]
