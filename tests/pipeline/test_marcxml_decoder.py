# topmark:header:start
#
#   project      : MarcPipe
#   file         : test_marcxml_decoder.py
#   file_relpath : tests/pipeline/test_marcxml_decoder.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `MarcXmlDecoder`."""

from __future__ import annotations

import io

import pytest

from marcpipe.core.errors import FormatError, MarcpipeError
from marcpipe.pipeline.decoders.marcxml import MarcXmlDecoder
from tests.conftest import mark_pipeline
from tests.pipeline.conftest import EventRecorder

pytestmark = [mark_pipeline]

NAMESPACED = """<?xml version="1.0" encoding="UTF-8"?>
<marc:collection xmlns:marc="http://www.loc.gov/MARC21/slim">
  <marc:record type="Bibliographic">
    <marc:leader>00925naa a2200265 c 4500</marc:leader>
    <marc:controlfield tag="001">12345</marc:controlfield>
    <marc:datafield tag="245" ind1="1" ind2="0">
      <marc:subfield code="a">Title &amp; more</marc:subfield>
      <marc:subfield code="b">Sub</marc:subfield>
    </marc:datafield>
  </marc:record>
</marc:collection>
"""

PLAIN = """<collection xmlns="http://www.loc.gov/MARC21/slim">
<record><controlfield tag="001">1</controlfield></record>
<record><datafield tag="650" ind1=" " ind2=""><subfield code="a">X</subfield></datafield></record>
</collection>"""


def _decode(document: str) -> list[tuple[object, ...]]:
    decoder = MarcXmlDecoder()
    recorder = EventRecorder()
    decoder.set_receiver(recorder)
    decoder.process(io.StringIO(document))
    return recorder.events


def test_decodes_namespaced_record() -> None:
    assert _decode(NAMESPACED) == [
        ("start_record", ""),
        ("literal", "type", "Bibliographic"),
        ("literal", "leader", "00925naa a2200265 c 4500"),
        ("literal", "001", "12345"),
        ("start_entity", "24510"),
        ("literal", "a", "Title & more"),
        ("literal", "b", "Sub"),
        ("end_entity",),
        ("end_record",),
    ]


def test_decodes_default_namespace_and_blank_indicators() -> None:
    assert _decode(PLAIN) == [
        ("start_record", ""),
        ("literal", "001", "1"),
        ("end_record",),
        ("start_record", ""),
        ("start_entity", "650  "),
        ("literal", "a", "X"),
        ("end_entity",),
        ("end_record",),
    ]


def test_decoder_can_parse_several_documents() -> None:
    decoder = MarcXmlDecoder()
    recorder = EventRecorder()
    decoder.set_receiver(recorder)

    decoder.process(io.StringIO(PLAIN))
    decoder.process(io.StringIO(PLAIN))

    assert [e for e in recorder.events if e[0] == "end_record"] == [("end_record",)] * 4


def test_malformed_document_raises_format_error() -> None:
    with pytest.raises(FormatError, match="line 2"):
        _decode("<collection>\n<record></collection>")


def test_decoder_without_receiver_fails() -> None:
    decoder = MarcXmlDecoder()
    with pytest.raises(MarcpipeError, match="no receiver"):
        decoder.process(io.StringIO(PLAIN))
