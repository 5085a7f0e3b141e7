"""Text escaping for chatmark output.

Example:
    >>> from chatmark.utils.text import escape_html
    >>> escape_html("<b>Tom & Jerry's</b>")
    '&lt;b&gt;Tom &amp; Jerry&#039;s&lt;/b&gt;'
"""

from __future__ import annotations

import html as html_module


def escape_html(text: str) -> str:
    """Escape the five HTML-reserved characters in free text.

    Converts special characters to HTML entities:
    - & becomes &amp;
    - < becomes &lt;
    - > becomes &gt;
    - " becomes &quot;
    - ' becomes &#039;

    ``html.escape`` replaces "&" first, so entities it introduces are never
    re-escaped. Single quotes use the decimal ``&#039;`` form.

    Args:
        text: Text to escape

    Returns:
        Text safe to place in an element body or a quoted attribute
    """
    if not text:
        return ""

    escaped = html_module.escape(text, quote=True)
    return escaped.replace("&#x27;", "&#039;")
