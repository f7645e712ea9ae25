# topmark:header:start
#
#   project      : MarcPipe
#   file         : marcxml.py
#   file_relpath : src/marcpipe/pipeline/decoders/marcxml.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""MARCXML decoder.

Parses MARCXML (with or without the ``marc:`` namespace prefix) using
`xml.sax` and forwards structural events:

    <record type="T">              ->  start_record(""), literal("type", "T")
    <leader>...</leader>           ->  literal("leader", ...)
    <controlfield tag="001">       ->  literal("001", ...)
    <datafield tag ind1 ind2>      ->  start_entity(tag + ind1 + ind2)
    <subfield code="a">            ->  literal("a", ...)
    </datafield>, </record>        ->  end_entity(), end_record()

Blank indicators are passed on as a single space. Elements outside a
``record`` (e.g. the ``collection`` root) produce no events.
"""

from __future__ import annotations

import xml.sax
from typing import IO, TYPE_CHECKING, Final
from xml.sax.handler import ContentHandler, feature_external_ges, feature_namespaces

from marcpipe.config.logging import get_logger
from marcpipe.core.errors import FormatError
from marcpipe.core.marc21 import LEADER_ENTITY, MARCXML_TYPE_LITERAL
from marcpipe.pipeline.base import DefaultObjectPipe
from marcpipe.registry.commands import Capability, register_command

if TYPE_CHECKING:
    from xml.sax.xmlreader import AttributesNSImpl

    from marcpipe.config.logging import MarcpipeLogger
    from marcpipe.pipeline.contracts import StreamReceiver

logger: MarcpipeLogger = get_logger(__name__)

_BLANK_INDICATOR: Final[str] = " "


def _attribute(attrs: AttributesNSImpl, name: str) -> str | None:
    return attrs.get((None, name))


class _MarcXmlHandler(ContentHandler):
    """SAX handler translating MARCXML elements into structural events."""

    def __init__(self, receiver: StreamReceiver) -> None:
        super().__init__()
        self._receiver = receiver
        self._in_record: bool = False
        self._literal_name: str | None = None
        self._text: list[str] = []

    def startElementNS(
        self, name: tuple[str | None, str], qname: str | None, attrs: AttributesNSImpl
    ) -> None:
        local: str = name[1]
        if local == "record":
            self._receiver.start_record("")
            self._in_record = True
            record_type: str | None = _attribute(attrs, MARCXML_TYPE_LITERAL)
            if record_type is not None:
                self._receiver.literal(MARCXML_TYPE_LITERAL, record_type)
            return
        if not self._in_record:
            return

        if local == "leader":
            self._start_literal(LEADER_ENTITY)
        elif local == "controlfield":
            self._start_literal(_attribute(attrs, "tag") or "")
        elif local == "datafield":
            tag: str = _attribute(attrs, "tag") or ""
            ind1: str = _attribute(attrs, "ind1") or _BLANK_INDICATOR
            ind2: str = _attribute(attrs, "ind2") or _BLANK_INDICATOR
            self._receiver.start_entity(f"{tag}{ind1}{ind2}")
        elif local == "subfield":
            self._start_literal(_attribute(attrs, "code") or "")

    def endElementNS(self, name: tuple[str | None, str], qname: str | None) -> None:
        if not self._in_record:
            return
        local: str = name[1]
        if local == "record":
            self._receiver.end_record()
            self._in_record = False
        elif local == "datafield":
            self._receiver.end_entity()
        elif local in ("leader", "controlfield", "subfield") and self._literal_name is not None:
            self._receiver.literal(self._literal_name, "".join(self._text))
            self._literal_name = None
            self._text = []

    def characters(self, content: str) -> None:
        if self._literal_name is not None:
            self._text.append(content)

    def _start_literal(self, literal_name: str) -> None:
        self._literal_name = literal_name
        self._text = []


@register_command(
    name="decode-marcxml",
    description="Reads MARCXML and emits one record event stream per record.",
    in_type=Capability.READER,
    out_type=Capability.STREAM,
)
class MarcXmlDecoder(DefaultObjectPipe[IO[str], "StreamReceiver"]):
    """Parse each reader as a MARCXML document.

    Raises:
        FormatError: If the document is not well-formed XML.
    """

    def __init__(self) -> None:
        super().__init__()
        self._parser = xml.sax.make_parser()
        self._parser.setFeature(feature_namespaces, True)
        self._parser.setFeature(feature_external_ges, False)

    def process(self, obj: IO[str]) -> None:
        self._parser.setContentHandler(_MarcXmlHandler(self.receiver))
        logger.debug("Decoding MARCXML from %s", getattr(obj, "name", "<stream>"))
        try:
            self._parser.parse(obj)
        except xml.sax.SAXParseException as exc:
            raise FormatError(
                f"Malformed MARCXML at line {exc.getLineNumber()}, "
                f"column {exc.getColumnNumber()}: {exc.getMessage()}"
            ) from exc
