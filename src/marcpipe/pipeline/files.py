# topmark:header:start
#
#   project      : MarcPipe
#   file         : files.py
#   file_relpath : src/marcpipe/pipeline/files.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Open text files with optional (de)compression."""

from __future__ import annotations

import bz2
import gzip
import lzma
from pathlib import Path
from typing import IO, TYPE_CHECKING, Final

from marcpipe.config.logging import get_logger
from marcpipe.config.types import FileCompression

if TYPE_CHECKING:
    from os import PathLike

    from marcpipe.config.logging import MarcpipeLogger

logger: MarcpipeLogger = get_logger(__name__)

_SUFFIXES: Final[dict[str, FileCompression]] = {
    ".gz": FileCompression.GZIP,
    ".gzip": FileCompression.GZIP,
    ".bz2": FileCompression.BZIP2,
    ".bzip2": FileCompression.BZIP2,
    ".xz": FileCompression.XZ,
}


def detect_compression(path: str | PathLike[str]) -> FileCompression:
    """Return the compression implied by a file name suffix.

    Args:
        path (str | PathLike[str]): File path.

    Returns:
        FileCompression: The matching compression, or ``NONE``.
    """
    return _SUFFIXES.get(Path(path).suffix.lower(), FileCompression.NONE)


def open_text(
    path: str | PathLike[str],
    mode: str,
    *,
    compression: FileCompression = FileCompression.AUTO,
    encoding: str = "utf-8",
) -> IO[str]:
    """Open a file in text mode, decompressing or compressing as requested.

    Args:
        path (str | PathLike[str]): File path.
        mode (str): ``"r"``, ``"w"`` or ``"a"`` (text mode is implied).
        compression (FileCompression): Compression; ``AUTO`` picks it from the suffix.
        encoding (str): Text encoding.

    Returns:
        IO[str]: The open text stream; the caller closes it.
    """
    if compression is FileCompression.AUTO:
        compression = detect_compression(path)
    logger.debug("Opening %s (mode=%s, compression=%s)", path, mode, compression.value)

    text_mode: str = f"{mode}t"
    if compression is FileCompression.GZIP:
        return gzip.open(path, text_mode, encoding=encoding)
    if compression is FileCompression.BZIP2:
        return bz2.open(path, text_mode, encoding=encoding)
    if compression is FileCompression.XZ:
        return lzma.open(path, text_mode, encoding=encoding)
    return open(path, mode, encoding=encoding, newline="")
