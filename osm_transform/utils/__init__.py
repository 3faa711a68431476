"""Utility modules."""

from osm_transform.utils.verbose import VerboseOutput
from osm_transform.utils.xml_utils import xml_escape, xml_attrs

__all__ = ['VerboseOutput', 'xml_escape', 'xml_attrs']
