# topmark:header:start
#
#   project      : MarcPipe
#   file         : marcxml.py
#   file_relpath : src/marcpipe/pipeline/encoders/marcxml.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""MARCXML encoder.

`MarcXmlEncoder` turns MARC 21 shaped structural events into MARCXML text and
sends one completed chunk to its text receiver per record:

    start_record("")                    ->  <marc:record>
    literal("leader", "00925naa ...")   ->  <marc:leader>00925naa ...</marc:leader>
    literal("001", "12345")             ->  <marc:controlfield tag="001">12345</...>
    start_entity("24510")               ->  <marc:datafield tag="245" ind1="1" ind2="0">
    literal("a", "Title")               ->  <marc:subfield code="a">Title</...>
    end_entity()                        ->  </marc:datafield>
    literal("type", "Bibliographic")    ->  type="Bibliographic" on the record tag
    end_record()                        ->  </marc:record> (flush)

The first record of a stream segment is preceded by the optional XML declaration
and the ``collection`` root open tag; ``reset_stream()`` and ``close_stream()``
close the root if it was opened.

Record tag attributes are collected apart from the record body and the record
is assembled at ``end_record()``, so a ``type`` literal may appear anywhere at
record level.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from marcpipe.config.logging import get_logger
from marcpipe.config.options import MarcXmlOptions
from marcpipe.core.errors import FormatError, StreamClosedError
from marcpipe.core.marc21 import (
    DATAFIELD_ENTITY_LENGTH,
    LEADER_ENTITY,
    MARCXML_TYPE_LITERAL,
    NAMESPACE,
    NAMESPACE_NAME,
    SCHEMA_LOCATION,
    TAG_LENGTH,
    XSI_NAMESPACE,
)
from marcpipe.pipeline.base import DefaultStreamPipe
from marcpipe.pipeline.encoders.escaping import escape_attribute, escape_text
from marcpipe.registry.commands import Capability, register_command

if TYPE_CHECKING:
    from marcpipe.config.logging import MarcpipeLogger
    from marcpipe.pipeline.contracts import ObjectReceiver

logger: MarcpipeLogger = get_logger(__name__)

# ASCII space and the C0 controls; other Unicode whitespace is part of the value.
_TRIM_CHARACTERS: str = "".join(chr(code) for code in range(0x21))


class EncoderState(Enum):
    """Position of the encoder in the event grammar."""

    AT_STREAM_START = "at-stream-start"
    BETWEEN_RECORDS = "between-records"
    IN_RECORD = "in-record"
    IN_ENTITY = "in-entity"
    CLOSED = "closed"


class MarcXmlEncoder(DefaultStreamPipe["ObjectReceiver[str]"]):
    """Encode structural events as MARCXML.

    Args:
        options (MarcXmlOptions | None): Output options; defaults to
            ``MarcXmlOptions()``.

    Raises:
        FormatError: On a data field entity name that is not 5 characters long,
            a ``None`` leader value, or events out of grammar order. The encoder
            must be reset before it is reused.
        StreamClosedError: On a structural event after ``close_stream()``.
    """

    def __init__(self, options: MarcXmlOptions | None = None) -> None:
        super().__init__()
        self._options: MarcXmlOptions = options if options is not None else MarcXmlOptions()
        self._prefix: str = f"{NAMESPACE_NAME}:" if self._options.emit_namespace else ""
        self._newline: str = "\n" if self._options.pretty_print else ""

        # Stream-level text (declaration, root tags) waiting for the next flush.
        self._pending: list[str] = []
        self._record_body: list[str] = []
        self._record_attributes: dict[str, str] = {}
        self._record_depth: int = 0
        self._depth: int = 0
        self._root_opened: bool = False
        self._current_entity: str | None = None
        self._state: EncoderState = EncoderState.AT_STREAM_START

    @property
    def options(self) -> MarcXmlOptions:
        """The (immutable) output options."""
        return self._options

    @property
    def state(self) -> EncoderState:
        """Current position in the event grammar."""
        return self._state

    @property
    def indentation_level(self) -> int:
        """Current nesting depth (0 outside the root element)."""
        return self._depth

    @property
    def root_opened(self) -> bool:
        """Whether the root element of the current segment has been written."""
        return self._root_opened

    # --- structural events -------------------------------------------------

    def start_record(self, identifier: str) -> None:
        self._require_open("start_record")
        if self._state in (EncoderState.IN_RECORD, EncoderState.IN_ENTITY):
            raise FormatError(
                f"Record {identifier!r} started inside an open record", name=identifier
            )
        logger.trace("start_record %r", identifier)

        if not self._root_opened:
            self._open_root()

        self._record_depth = self._depth
        self._record_attributes = {}
        self._record_body = []
        self._current_entity = None
        self._depth += 1
        self._state = EncoderState.IN_RECORD

    def start_entity(self, name: str) -> None:
        self._require_open("start_entity")
        if self._state is EncoderState.IN_ENTITY:
            raise FormatError(
                f"Entity {name!r} started inside entity {self._current_entity!r}", name=name
            )
        if self._state is not EncoderState.IN_RECORD:
            raise FormatError(f"Entity {name!r} started outside a record", name=name)

        if name != LEADER_ENTITY:
            if len(name) != DATAFIELD_ENTITY_LENGTH:
                raise FormatError(
                    f"Entity name {name!r} has length {len(name)}; expected "
                    f"{DATAFIELD_ENTITY_LENGTH} (3-character tag and 2 indicators)",
                    name=name,
                    value=name,
                )
            tag: str = name[:TAG_LENGTH]
            ind1: str = name[TAG_LENGTH]
            ind2: str = name[TAG_LENGTH + 1]
            self._write_line(
                f'<{self._prefix}datafield tag="{escape_attribute(tag)}" '
                f'ind1="{escape_attribute(ind1)}" ind2="{escape_attribute(ind2)}">'
            )
            self._depth += 1

        self._current_entity = name
        self._state = EncoderState.IN_ENTITY

    def end_entity(self) -> None:
        self._require_open("end_entity")
        if self._state is not EncoderState.IN_ENTITY:
            raise FormatError("end_entity without an open entity")

        if self._current_entity != LEADER_ENTITY:
            self._depth -= 1
            self._write_line(f"</{self._prefix}datafield>")

        self._current_entity = None
        self._state = EncoderState.IN_RECORD

    def literal(self, name: str, value: str | None) -> None:
        self._require_open("literal")
        if self._state is EncoderState.IN_ENTITY:
            if self._current_entity == LEADER_ENTITY:
                self._write_leader(value)
            else:
                self._write_value_element("subfield", "code", name, value)
            return
        if self._state is not EncoderState.IN_RECORD:
            raise FormatError(f"Literal {name!r} outside a record", name=name, value=value)

        if name == MARCXML_TYPE_LITERAL:
            if value is not None:
                self._record_attributes[MARCXML_TYPE_LITERAL] = value
        elif name == LEADER_ENTITY:
            self._write_leader(value)
        else:
            self._write_value_element("controlfield", "tag", name, value)

    def end_record(self) -> None:
        self._require_open("end_record")
        if self._state is EncoderState.IN_ENTITY:
            raise FormatError(f"end_record inside open entity {self._current_entity!r}")
        if self._state is not EncoderState.IN_RECORD:
            raise FormatError("end_record without an open record")

        self._depth -= 1
        indent: str = self._indent(self._record_depth)
        attributes: str = "".join(
            f' {key}="{escape_attribute(value)}"' for key, value in self._record_attributes.items()
        )
        self._pending.append(f"{indent}<{self._prefix}record{attributes}>{self._newline}")
        self._pending.extend(self._record_body)
        self._pending.append(f"{indent}</{self._prefix}record>{self._newline}")
        self._record_body = []
        self._record_attributes = {}
        self._state = EncoderState.BETWEEN_RECORDS

        logger.trace("end_record")
        self._flush()

    # --- lifecycle ---------------------------------------------------------

    def on_reset_stream(self) -> None:
        self._discard_open_record("reset_stream")
        self._close_root()
        self._flush()
        self._depth = 0
        self._current_entity = None
        self._state = EncoderState.AT_STREAM_START

    def on_close_stream(self) -> None:
        self._discard_open_record("close_stream")
        self._close_root()
        self._flush()
        self._state = EncoderState.CLOSED

    # --- helpers -----------------------------------------------------------

    def _require_open(self, event: str) -> None:
        if self._state is EncoderState.CLOSED:
            raise StreamClosedError(f"{event} after close_stream")

    def _indent(self, depth: int) -> str:
        return "\t" * depth if self._options.pretty_print else ""

    def _write_line(self, text: str) -> None:
        self._record_body.append(f"{self._indent(self._depth)}{text}{self._newline}")

    def _write_leader(self, value: str | None) -> None:
        if value is None:
            raise FormatError("Leader value must not be None", name=LEADER_ENTITY)
        self._write_line(f"<{self._prefix}leader>{value}</{self._prefix}leader>")

    def _write_value_element(self, element: str, attribute: str, key: str, value: str | None) -> None:
        body: str = "" if value is None else escape_text(value.strip(_TRIM_CHARACTERS))
        self._write_line(
            f'<{self._prefix}{element} {attribute}="{escape_attribute(key)}">'
            f"{body}</{self._prefix}{element}>"
        )

    def _open_root(self) -> None:
        if not self._options.omit_xml_declaration:
            self._pending.append(
                f'<?xml version="{self._options.xml_version}" '
                f'encoding="{self._options.xml_encoding}"?>{self._newline}'
            )
        if self._options.emit_namespace:
            root: str = (
                f'<{self._prefix}collection xmlns:{NAMESPACE_NAME}="{NAMESPACE}" '
                f'xmlns:xsi="{XSI_NAMESPACE}" xsi:schemaLocation="{SCHEMA_LOCATION}">'
            )
        else:
            root = f'<collection xmlns="{NAMESPACE}">'
        self._pending.append(f"{root}{self._newline}")
        self._depth += 1
        self._root_opened = True

    def _close_root(self) -> None:
        if not self._root_opened:
            return
        self._depth -= 1
        self._pending.append(f"</{self._prefix}collection>")
        self._root_opened = False

    def _discard_open_record(self, event: str) -> None:
        if self._state not in (EncoderState.IN_RECORD, EncoderState.IN_ENTITY):
            return
        logger.warning("%s inside an open record; discarding the partial record", event)
        self._depth = self._record_depth
        self._record_body = []
        self._record_attributes = {}
        self._current_entity = None
        self._state = EncoderState.BETWEEN_RECORDS

    def _flush(self) -> None:
        if not self._pending:
            return
        chunk: str = "".join(self._pending)
        self._pending = []
        logger.debug("Flushing %d characters", len(chunk))
        self.receiver.process(chunk)


@register_command(
    name="encode-marcxml",
    description="Encodes MARC 21 records as MARCXML.",
    in_type=Capability.STREAM,
    out_type=Capability.TEXT,
    options={
        "emit_namespace": bool,
        "omit_xml_declaration": bool,
        "xml_version": str,
        "xml_encoding": str,
        "pretty_print": bool,
    },
)
def create_marcxml_encoder(**options: object) -> MarcXmlEncoder:
    """Build a `MarcXmlEncoder` from keyword options.

    Args:
        **options (object): `MarcXmlOptions` fields.

    Returns:
        MarcXmlEncoder: The encoder.
    """
    return MarcXmlEncoder(MarcXmlOptions(**options))  # type: ignore[arg-type]
