# topmark:header:start
#
#   project      : MarcPipe
#   file         : escaping.py
#   file_relpath : src/marcpipe/pipeline/encoders/escaping.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""XML escaping for element text and attribute values.

Both helpers replace the five XML-reserved characters with the predefined
entities (``&amp;``, ``&lt;``, ``&gt;``, ``&quot;``, ``&apos;``). Text without
reserved characters is returned unchanged. Callers escape each value exactly
once; escaping already escaped text escapes its ``&`` again.

No other character is touched. Control characters that XML 1.0 forbids, such
as U+000B or U+001F, pass through unchanged, so a value containing them yields
malformed output; callers supply valid XML characters.
"""

from __future__ import annotations

from typing import Final
from xml.sax.saxutils import escape

RESERVED_CHARACTERS: Final[frozenset[str]] = frozenset("&<>\"'")

# `escape` always handles &, < and >; quotes are added as extra entities.
_QUOTE_ENTITIES: Final[dict[str, str]] = {'"': "&quot;", "'": "&apos;"}


def needs_escaping(value: str) -> bool:
    """Return True if ``value`` contains an XML-reserved character."""
    return any(char in RESERVED_CHARACTERS for char in value)


def escape_text(value: str) -> str:
    """Escape a value for use as element text.

    Only the five reserved characters are replaced. Characters outside the XML
    character range, such as C0 controls other than tab, newline and carriage
    return, are copied as they are.

    Args:
        value (str): Raw text.

    Returns:
        str: The escaped text, or ``value`` itself if nothing needed escaping.
    """
    if not needs_escaping(value):
        return value
    return escape(value, _QUOTE_ENTITIES)


def escape_attribute(value: str) -> str:
    """Escape a value for use inside a double-quoted attribute.

    Args:
        value (str): Raw attribute value.

    Returns:
        str: The escaped value.
    """
    return escape_text(value)
