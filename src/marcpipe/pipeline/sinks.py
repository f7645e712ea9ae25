# topmark:header:start
#
#   project      : MarcPipe
#   file         : sinks.py
#   file_relpath : src/marcpipe/pipeline/sinks.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Terminal text sinks.

A sink receives one completed chunk per flush and never sees partial output.
Sink failures propagate to the caller unchanged.
"""

from __future__ import annotations

import sys
from typing import IO, TYPE_CHECKING, Generic, TypeVar

from marcpipe.config.logging import get_logger
from marcpipe.config.types import FileCompression
from marcpipe.pipeline.base import DefaultObjectReceiver
from marcpipe.pipeline.files import open_text
from marcpipe.registry.commands import Capability, register_command

if TYPE_CHECKING:
    from os import PathLike

    from marcpipe.config.logging import MarcpipeLogger

logger: MarcpipeLogger = get_logger(__name__)

T = TypeVar("T")


class ObjectCollector(DefaultObjectReceiver[T], Generic[T]):
    """Collects every received object in memory.

    Attributes:
        items (list[T]): Received objects in arrival order.
        reset_count (int): Number of ``reset_stream()`` calls seen.
        closed (bool): Whether ``close_stream()`` was called.
    """

    def __init__(self) -> None:
        self.items: list[T] = []
        self.reset_count: int = 0
        self.closed: bool = False

    def process(self, obj: T) -> None:
        self.items.append(obj)

    def reset_stream(self) -> None:
        self.reset_count += 1

    def close_stream(self) -> None:
        self.closed = True

    def joined(self) -> str:
        """Return all items concatenated as text.

        Returns:
            str: ``"".join(str(item) for item in items)``.
        """
        return "".join(str(item) for item in self.items)


@register_command(
    name="write-text",
    description="Writes text chunks to standard output.",
    in_type=Capability.TEXT,
    out_type=None,
)
class TextWriter(DefaultObjectReceiver[str]):
    """Writes each chunk to a text stream it does not own.

    The stream is flushed on reset and close but never closed.
    """

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream: IO[str] = stream if stream is not None else sys.stdout

    def process(self, obj: str) -> None:
        self._stream.write(obj)

    def reset_stream(self) -> None:
        self._stream.flush()

    def close_stream(self) -> None:
        self._stream.flush()


class FileWriter(DefaultObjectReceiver[str]):
    """Writes chunks to a file it opens lazily and closes on ``close_stream()``.

    Compression follows the file suffix unless given explicitly.
    """

    def __init__(
        self,
        path: str | PathLike[str],
        *,
        compression: FileCompression = FileCompression.AUTO,
        encoding: str = "utf-8",
    ) -> None:
        self._path = path
        self._compression = compression
        self._encoding = encoding
        self._stream: IO[str] | None = None

    def process(self, obj: str) -> None:
        if self._stream is None:
            self._stream = open_text(
                self._path, "w", compression=self._compression, encoding=self._encoding
            )
        self._stream.write(obj)

    def reset_stream(self) -> None:
        if self._stream is not None:
            self._stream.flush()

    def close_stream(self) -> None:
        if self._stream is not None:
            logger.debug("Closing output file %s", self._path)
            self._stream.close()
            self._stream = None
