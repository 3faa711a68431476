"""Feature processing pipeline."""

from osm_transform.processing.buffer import OutputBuffer
from osm_transform.processing.processor import ObjectProcessor
from osm_transform.processing.tags import MAX_TAG_LENGTH, build_tags

__all__ = ['OutputBuffer', 'ObjectProcessor', 'MAX_TAG_LENGTH', 'build_tags']
