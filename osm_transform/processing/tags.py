"""Rebuilding tag sets from callback results."""
import sys
from typing import Dict, Mapping, TextIO

from osm_transform.exceptions import TagTypeError

# Longest key or value (in UTF-8 bytes) an OSM object can store
MAX_TAG_LENGTH = 256 * 4


def _too_long(text: str) -> bool:
    try:
        return len(text.encode('utf-8')) > MAX_TAG_LENGTH
    except UnicodeEncodeError as e:
        raise TagTypeError(
            f"Tag {text!r} is not valid UTF-8 text: {e.reason}") from e


def build_tags(mapping: Mapping, stream: TextIO = None) -> Dict[str, str]:
    """Convert a callback's tag mapping into a sorted tag dict.

    Args:
        mapping: Key/value mapping returned by the script
        stream: Stream for length warnings (default: stderr)

    Returns:
        Dict with entries ordered by key

    Raises:
        TagTypeError: If any key or value is not a string or can not be
            encoded as UTF-8
    """
    items = []
    for key, value in mapping.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise TagTypeError("Keys and values in tags must be strings!")
        items.append((key, value))

    items.sort()

    tags = {}
    for key, value in items:
        if _too_long(key) or _too_long(value):
            print("Warning: Length of tag key or value exceeded. Ignoring tag...",
                  file=stream or sys.stderr)
            continue
        tags[key] = value
    return tags
