"""Run-level configuration.

Options come from the command line (see ``osm_transform.cli.main``) and are
validated here so that bad values are rejected before any input is read.
"""
from dataclasses import dataclass
from enum import Enum

from osm_transform.exceptions import ConfigurationError

DEFAULT_INDEX_TYPE = 'flex_mem'


class GeometryMode(Enum):
    """Geometry processing: 'none' or 'bbox'."""
    NONE = 'none'
    BBOX = 'bbox'


class UntaggedMode(Enum):
    """What to do with objects that have no tags."""
    DROP = 'drop'
    COPY = 'copy'
    PROCESS = 'process'


def parse_geometry_mode(name: str) -> GeometryMode:
    """Convert a geometry processing name into a GeometryMode.

    Raises:
        ConfigurationError: If the name is unknown
    """
    try:
        return GeometryMode(name)
    except ValueError:
        raise ConfigurationError(
            f"Unknown geometry processing '{name}'. Use 'none' or 'bbox'.") from None


def parse_untagged_mode(name: str) -> UntaggedMode:
    """Convert an untagged-object policy name into an UntaggedMode.

    Raises:
        ConfigurationError: If the name is unknown
    """
    try:
        return UntaggedMode(name)
    except ValueError:
        raise ConfigurationError(
            f"Unknown untagged mode '{name}'. Use 'drop', 'copy', or 'process'.") from None


def check_index_type(index_spec: str) -> str:
    """Validate an index type of the form ``name[,param]``.

    Returns:
        The unchanged index type

    Raises:
        ConfigurationError: If the backend name is not registered
    """
    from osm_transform.index.backends import MapFactory

    name = index_spec.split(',', 1)[0]
    if not MapFactory.has_map_type(name):
        raise ConfigurationError(
            f"Unknown index type '{index_spec}'. "
            "Use --show-index-types or -I to get a list.")
    return index_spec


@dataclass(frozen=True)
class ProcessingConfig:
    """Settings shared by the processor and the spatial index."""
    geometry: GeometryMode = GeometryMode.NONE
    untagged: UntaggedMode = UntaggedMode.COPY
    index_type: str = DEFAULT_INDEX_TYPE

    @property
    def geometry_enabled(self) -> bool:
        return self.geometry is not GeometryMode.NONE

    @classmethod
    def from_names(cls, geometry: str = 'none', untagged: str = 'copy',
                   index_type: str = DEFAULT_INDEX_TYPE) -> 'ProcessingConfig':
        """Build a validated config from option strings."""
        return cls(
            geometry=parse_geometry_mode(geometry),
            untagged=parse_untagged_mode(untagged),
            index_type=check_index_type(index_type),
        )
