# topmark:header:start
#
#   project      : MarcPipe
#   file         : strings.py
#   file_relpath : src/marcpipe/pipeline/strings.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Text pipes: record segmentation and Unicode normalization."""

from __future__ import annotations

import re
import unicodedata
from typing import TYPE_CHECKING, Final

from marcpipe.config.logging import get_logger
from marcpipe.core.errors import ConfigurationError
from marcpipe.pipeline.base import DefaultObjectPipe
from marcpipe.registry.commands import Capability, register_command

if TYPE_CHECKING:
    from marcpipe.config.logging import MarcpipeLogger
    from marcpipe.pipeline.contracts import ObjectReceiver

logger: MarcpipeLogger = get_logger(__name__)

DEFAULT_RECORD_MARKER: Final[str] = "\n"


@register_command(
    name="record-lines",
    description="Joins lines into records separated by a marker line (an empty line by default).",
    in_type=Capability.TEXT,
    out_type=Capability.TEXT,
    options={"record_marker": str},
)
class LineRecorder(DefaultObjectPipe[str, "ObjectReceiver[str]"]):
    """Collect lines into records.

    After each chunk, if the buffer ends with a match of ``record_marker``
    that starts at a line boundary, everything before the marker is sent as
    one record. Feed one line per chunk (see `marcpipe.pipeline.sources.LineReader`).
    Only the unterminated line plus the new chunk is searched, so the marker
    must start in that window and the cost per chunk does not grow with the
    record.

    Empty records are not sent. On ``close_stream()`` a non-empty unterminated
    remainder is sent as the last record; ``reset_stream()`` discards it.

    Args:
        record_marker (str): Regular expression for the record end marker.

    Raises:
        ConfigurationError: If ``record_marker`` is not a valid regular expression.
    """

    def __init__(self, record_marker: str = DEFAULT_RECORD_MARKER) -> None:
        super().__init__()
        self._record_marker: str = record_marker
        self._pattern: re.Pattern[str] = _compile_marker(record_marker)
        # Completed lines of the current record, and the unterminated line after them.
        self._lines: list[str] = []
        self._tail: str = ""

    @property
    def record_marker(self) -> str:
        """The record end marker expression."""
        return self._record_marker

    def process(self, obj: str) -> None:
        # The window starts at a line boundary, so earlier lines are never rescanned.
        window: str = self._tail + obj
        match: re.Match[str] | None = self._pattern.search(window)
        if match is None:
            cut: int = window.rfind("\n") + 1
            if cut:
                self._lines.append(window[:cut])
            self._tail = window[cut:]
            return
        record: str = "".join(self._lines) + window[: match.start()]
        self._lines = []
        self._tail = ""
        self._emit(record)

    def on_reset_stream(self) -> None:
        if self._lines or self._tail:
            logger.debug("Discarding unterminated record on reset")
        self._lines = []
        self._tail = ""

    def on_close_stream(self) -> None:
        remainder: str = "".join(self._lines) + self._tail
        self._lines = []
        self._tail = ""
        self._emit(remainder)

    def _emit(self, record: str) -> None:
        if not record:
            logger.trace("Skipping empty record")
            return
        self.receiver.process(record)


def _compile_marker(record_marker: str) -> re.Pattern[str]:
    try:
        return re.compile(rf"(?:^|(?<=\n))(?:{record_marker})\Z")
    except re.error as exc:
        raise ConfigurationError(
            f"Invalid record marker {record_marker!r}: {exc}", key="record_marker"
        ) from exc


@register_command(
    name="normalize-utf8",
    description="Normalizes text to Unicode NFC (composed diacritics).",
    in_type=Capability.TEXT,
    out_type=Capability.TEXT,
    options={"form": str},
)
class Utf8Normalizer(DefaultObjectPipe[str, "ObjectReceiver[str]"]):
    """Normalize every string, NFC unless another form is given.

    Args:
        form (str): One of ``NFC``, ``NFD``, ``NFKC``, ``NFKD``.
    """

    FORMS: Final[tuple[str, ...]] = ("NFC", "NFD", "NFKC", "NFKD")

    def __init__(self, form: str = "NFC") -> None:
        super().__init__()
        if form.upper() not in self.FORMS:
            raise ConfigurationError(f"Unknown normalization form {form!r}", key="form")
        self._form: str = form.upper()

    def process(self, obj: str) -> None:
        self.receiver.process(unicodedata.normalize(self._form, obj))  # type: ignore[arg-type]
