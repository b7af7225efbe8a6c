"""HTML utility functions for Scribe.

Following the Single Responsibility Principle, this module focuses
exclusively on HTML string manipulation.

Functions:
    escape_html: Escape special HTML characters in an interpolated value.
"""

from __future__ import annotations


def escape_html(text: str) -> str:
    """Escape special HTML characters in a string.

    Converts the following characters to their HTML entity equivalents,
    in this order:
    - & becomes &amp;
    - < becomes &lt;
    - > becomes &gt;
    - ' becomes &apos;
    - " becomes &quot;

    Args:
        text: The string to escape.

    Returns:
        The escaped string, safe for inclusion in HTML.

    Examples:
        >>> escape_html("<em>it's</em>")
        '&lt;em&gt;it&apos;s&lt;/em&gt;'

        >>> escape_html('Tom & Jerry')
        'Tom &amp; Jerry'
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("'", "&apos;")
        .replace('"', "&quot;")
    )
