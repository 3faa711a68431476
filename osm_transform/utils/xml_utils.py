"""XML utility functions - single source of truth."""
from typing import Any, Iterable, Tuple


def xml_escape(text: Any) -> str:
    """Escape special XML characters.

    Tabs and newlines are encoded as character references so that they
    survive attribute value normalization on re-read.

    Args:
        text: Raw text to escape

    Returns:
        XML-safe escaped string

    Examples:
        >>> xml_escape("Tom & Jerry")
        'Tom &amp; Jerry'
        >>> xml_escape("<script>")
        '&lt;script&gt;'
        >>> xml_escape("a\\nb")
        'a&#10;b'
    """
    return (str(text)
            .replace('&', '&amp;')
            .replace('<', '&lt;')
            .replace('>', '&gt;')
            .replace('"', '&quot;')
            .replace("'", '&#39;')
            .replace('\t', '&#9;')
            .replace('\n', '&#10;')
            .replace('\r', '&#13;'))


def xml_attrs(attrs: Iterable[Tuple[str, Any]]) -> str:
    """Render name/value pairs as an attribute string with a leading space.

    Examples:
        >>> xml_attrs([('id', 1), ('user', 'a&b')])
        ' id="1" user="a&amp;b"'
    """
    return ''.join(f' {name}="{xml_escape(value)}"' for name, value in attrs)
