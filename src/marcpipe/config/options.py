# topmark:header:start
#
#   project      : MarcPipe
#   file         : options.py
#   file_relpath : src/marcpipe/config/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Immutable options for the MARCXML encoder.

`MarcXmlOptions` is plain immutable configuration passed at construction time.
Validation happens in ``__post_init__`` so an invalid value fails before any
event is processed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from marcpipe.config.keys import Toml
from marcpipe.core.errors import ConfigurationError

SUPPORTED_XML_VERSIONS: Final[tuple[str, ...]] = ("1.0", "1.1")


@dataclass(frozen=True, slots=True)
class MarcXmlOptions:
    """Output options of `marcpipe.pipeline.encoders.marcxml.MarcXmlEncoder`.

    Attributes:
        emit_namespace (bool): Prefix element names with ``marc:`` and declare the
            namespace and schema location on the root element.
        omit_xml_declaration (bool): Skip the ``<?xml ...?>`` declaration.
        xml_version (str): Version written in the declaration.
        xml_encoding (str): Encoding label written in the declaration.
        pretty_print (bool): Emit tab indentation and newlines.
    """

    emit_namespace: bool = True
    omit_xml_declaration: bool = False
    xml_version: str = "1.0"
    xml_encoding: str = "UTF-8"
    pretty_print: bool = True

    def __post_init__(self) -> None:
        if self.xml_version not in SUPPORTED_XML_VERSIONS:
            raise ConfigurationError(
                f"Unsupported XML version {self.xml_version!r} "
                f"(expected one of: {', '.join(SUPPORTED_XML_VERSIONS)})",
                key=Toml.KEY_XML_VERSION,
            )
        try:
            # rejects unknown labels and non-text codecs such as base64
            "".encode(self.xml_encoding)
        except LookupError as exc:
            raise ConfigurationError(
                f"Unsupported XML encoding label {self.xml_encoding!r}",
                key=Toml.KEY_XML_ENCODING,
            ) from exc
