"""Location and bounding box value types."""
from dataclasses import dataclass
from typing import List, Optional

MAX_LON = 180.0
MAX_LAT = 90.0


@dataclass(frozen=True)
class Location:
    """A (lon, lat) pair in degrees.

    Either coordinate may be missing, e.g. for nodes of a deleted-object
    history file. Such locations are invalid and never contribute to a
    bounding box.
    """
    lon: Optional[float] = None
    lat: Optional[float] = None

    @property
    def valid(self) -> bool:
        """Check whether both coordinates are present and in range."""
        if self.lon is None or self.lat is None:
            return False
        return -MAX_LON <= self.lon <= MAX_LON and -MAX_LAT <= self.lat <= MAX_LAT

    def as_tuple(self) -> tuple:
        return (self.lon, self.lat)


@dataclass(frozen=True)
class BoundingBox:
    """Rectangular envelope over geographic coordinates.

    The default instance is the empty box, which is invalid. Boxes are
    immutable; ``extend`` and ``union`` return new boxes.

    Examples:
        >>> box = BoundingBox().extend(Location(0, 0)).extend(Location(10, 10))
        >>> box.as_list()
        [0, 0, 10, 10]
    """
    min_lon: Optional[float] = None
    min_lat: Optional[float] = None
    max_lon: Optional[float] = None
    max_lat: Optional[float] = None

    @classmethod
    def from_location(cls, location: Location) -> 'BoundingBox':
        """Create the degenerate box covering a single location."""
        return cls().extend(location)

    @classmethod
    def from_tuple(cls, values: tuple) -> 'BoundingBox':
        return cls(*values)

    @property
    def valid(self) -> bool:
        """Check if the box has been extended by at least one valid point."""
        if None in (self.min_lon, self.min_lat, self.max_lon, self.max_lat):
            return False
        return self.min_lon <= self.max_lon and self.min_lat <= self.max_lat

    def extend(self, location: Location) -> 'BoundingBox':
        """Return a box that also covers ``location``.

        Invalid locations leave the box unchanged.
        """
        if not location.valid:
            return self
        return self.union(BoundingBox(location.lon, location.lat,
                                      location.lon, location.lat))

    def union(self, other: 'BoundingBox') -> 'BoundingBox':
        """Componentwise min/max of two boxes.

        A union with an invalid box is a no-op in either direction.
        """
        if not other.valid:
            return self
        if not self.valid:
            return other
        return BoundingBox(
            min(self.min_lon, other.min_lon),
            min(self.min_lat, other.min_lat),
            max(self.max_lon, other.max_lon),
            max(self.max_lat, other.max_lat),
        )

    def as_list(self) -> List[float]:
        """Return ``[min_lon, min_lat, max_lon, max_lat]``."""
        return [self.min_lon, self.min_lat, self.max_lon, self.max_lat]

    def as_tuple(self) -> tuple:
        return (self.min_lon, self.min_lat, self.max_lon, self.max_lat)
