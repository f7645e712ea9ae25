# topmark:header:start
#
#   project      : MarcPipe
#   file         : conftest.py
#   file_relpath : tests/pipeline/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared helpers for pipeline stage tests.

Key utilities:
  * EventRecorder: a stream receiver that records every call as a tuple.
  * make_encoder(): an encoder wired to an `ObjectCollector`.
  * ROOT_OPEN / DECLARATION: the canonical namespaced document prologue.
"""

from __future__ import annotations

from typing import Any

from marcpipe.config.options import MarcXmlOptions
from marcpipe.pipeline.encoders.marcxml import MarcXmlEncoder
from marcpipe.pipeline.sinks import ObjectCollector

DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
ROOT_OPEN = (
    '<marc:collection xmlns:marc="http://www.loc.gov/MARC21/slim" '
    'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
    'xsi:schemaLocation="http://www.loc.gov/MARC21/slim '
    'http://www.loc.gov/standards/marcxml/schema/MARC21slim.xsd">\n'
)
ROOT_CLOSE = "</marc:collection>"


class EventRecorder:
    """Stream receiver recording each call as ``(method, *args)``."""

    def __init__(self) -> None:
        self.events: list[tuple[Any, ...]] = []

    def start_record(self, identifier: str) -> None:
        self.events.append(("start_record", identifier))

    def end_record(self) -> None:
        self.events.append(("end_record",))

    def start_entity(self, name: str) -> None:
        self.events.append(("start_entity", name))

    def end_entity(self) -> None:
        self.events.append(("end_entity",))

    def literal(self, name: str, value: str | None) -> None:
        self.events.append(("literal", name, value))

    def reset_stream(self) -> None:
        self.events.append(("reset_stream",))

    def close_stream(self) -> None:
        self.events.append(("close_stream",))


def make_encoder(**options: Any) -> tuple[MarcXmlEncoder, ObjectCollector[str]]:
    """Return an encoder with the given options and the collector it writes to."""
    encoder = MarcXmlEncoder(MarcXmlOptions(**options))
    collector: ObjectCollector[str] = ObjectCollector()
    encoder.set_receiver(collector)
    return encoder, collector


def send_sample_record(encoder: MarcXmlEncoder) -> None:
    """Send the canonical sample record (leader, 001, 245 10 $a)."""
    encoder.start_record("1")
    encoder.literal("leader", "00925naa a2200265 c 4500")
    encoder.literal("001", "12345")
    encoder.start_entity("24510")
    encoder.literal("a", "Title")
    encoder.end_entity()
    encoder.end_record()
