# topmark:header:start
#
#   project      : MarcPipe
#   file         : keys.py
#   file_relpath : src/marcpipe/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML section and key names for MarcPipe configuration.

These constants are the external configuration schema as it appears in
``marcpipe.toml`` and in ``[tool.marcpipe]`` inside ``pyproject.toml``.
Renaming or removing a key is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by MarcPipe configuration."""

    # [tool.marcpipe] in pyproject.toml
    SECTION_TOOL: Final[str] = "tool"
    SECTION_TOOL_MARCPIPE: Final[str] = "marcpipe"

    # [marcxml]
    SECTION_MARCXML: Final[str] = "marcxml"

    KEY_EMIT_NAMESPACE: Final[str] = "emit_namespace"
    KEY_OMIT_XML_DECLARATION: Final[str] = "omit_xml_declaration"
    KEY_XML_VERSION: Final[str] = "xml_version"
    KEY_XML_ENCODING: Final[str] = "xml_encoding"
    KEY_PRETTY_PRINT: Final[str] = "pretty_print"

    # [batch]
    SECTION_BATCH: Final[str] = "batch"

    KEY_BATCH_SIZE: Final[str] = "size"

    # [input]
    SECTION_INPUT: Final[str] = "input"

    KEY_COMPRESSION: Final[str] = "compression"
    KEY_ENCODING: Final[str] = "encoding"

    # Known keys per section, used to warn about typos.
    KNOWN_KEYS: Final[dict[str, frozenset[str]]] = {
        SECTION_MARCXML: frozenset(
            {
                KEY_EMIT_NAMESPACE,
                KEY_OMIT_XML_DECLARATION,
                KEY_XML_VERSION,
                KEY_XML_ENCODING,
                KEY_PRETTY_PRINT,
            }
        ),
        SECTION_BATCH: frozenset({KEY_BATCH_SIZE}),
        SECTION_INPUT: frozenset({KEY_COMPRESSION, KEY_ENCODING}),
    }
