# topmark:header:start
#
#   project      : MarcPipe
#   file         : sources.py
#   file_relpath : src/marcpipe/pipeline/sources.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Sources: open files as text readers and split readers into lines."""

from __future__ import annotations

from os import PathLike
from typing import IO, TYPE_CHECKING, Union

from marcpipe.config.logging import get_logger
from marcpipe.config.types import FileCompression
from marcpipe.pipeline.base import DefaultObjectPipe
from marcpipe.pipeline.files import open_text
from marcpipe.registry.commands import Capability, register_command

if TYPE_CHECKING:
    from marcpipe.config.logging import MarcpipeLogger
    from marcpipe.pipeline.contracts import ObjectReceiver

logger: MarcpipeLogger = get_logger(__name__)

PathArg = Union[str, "PathLike[str]"]


@register_command(
    name="open-file",
    description="Opens a (possibly compressed) file and passes a text reader on.",
    in_type=Capability.PATH,
    out_type=Capability.READER,
    options={"compression": FileCompression, "encoding": str},
)
class FileOpener(DefaultObjectPipe[PathArg, "ObjectReceiver[IO[str]]"]):
    """Open each path as a text reader and send it downstream.

    Readers stay open until ``close_stream()`` (or ``reset_stream()``), so
    receivers may consume them lazily.

    Args:
        compression (FileCompression): Input compression; ``AUTO`` picks it from
            the file suffix.
        encoding (str): Text encoding of the files.
    """

    def __init__(
        self,
        compression: FileCompression = FileCompression.AUTO,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__()
        self.compression: FileCompression = compression
        self.encoding: str = encoding
        self._open_readers: list[IO[str]] = []

    def process(self, obj: PathArg) -> None:
        reader: IO[str] = open_text(obj, "r", compression=self.compression, encoding=self.encoding)
        self._open_readers.append(reader)
        self.receiver.process(reader)

    def on_reset_stream(self) -> None:
        self._close_readers()

    def on_close_stream(self) -> None:
        self._close_readers()

    def _close_readers(self) -> None:
        for reader in self._open_readers:
            reader.close()
        if self._open_readers:
            logger.debug("Closed %d reader(s)", len(self._open_readers))
        self._open_readers = []


@register_command(
    name="read-lines",
    description="Splits a text reader into lines (line endings kept).",
    in_type=Capability.READER,
    out_type=Capability.TEXT,
)
class LineReader(DefaultObjectPipe[IO[str], "ObjectReceiver[str]"]):
    """Send each line of a reader downstream, line ending included."""

    def process(self, obj: IO[str]) -> None:
        count: int = 0
        for line in obj:
            self.receiver.process(line)
            count += 1
        logger.debug("Read %d line(s)", count)
