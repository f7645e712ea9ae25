# topmark:header:start
#
#   project      : MarcPipe
#   file         : test_sources.py
#   file_relpath : tests/pipeline/test_sources.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for file sources and compressed text I/O."""

from __future__ import annotations

import bz2
import gzip
import lzma
from pathlib import Path
from typing import IO

import pytest

from marcpipe.config.types import FileCompression
from marcpipe.pipeline.files import detect_compression, open_text
from marcpipe.pipeline.sinks import FileWriter, ObjectCollector
from marcpipe.pipeline.sources import FileOpener, LineReader
from tests.conftest import mark_pipeline, parametrize

pytestmark = [mark_pipeline]

CONTENT = "first line\nzweite Zeile – ü\n"


def _write(path: Path) -> Path:
    raw: bytes = CONTENT.encode("utf-8")
    if path.suffix == ".gz":
        path.write_bytes(gzip.compress(raw))
    elif path.suffix == ".bz2":
        path.write_bytes(bz2.compress(raw))
    elif path.suffix == ".xz":
        path.write_bytes(lzma.compress(raw))
    else:
        path.write_bytes(raw)
    return path


@parametrize(
    "name, expected",
    [
        ("records.xml", FileCompression.NONE),
        ("records.xml.gz", FileCompression.GZIP),
        ("records.XML.GZ", FileCompression.GZIP),
        ("records.bz2", FileCompression.BZIP2),
        ("records.xz", FileCompression.XZ),
        ("records", FileCompression.NONE),
    ],
)
def test_detect_compression(name: str, expected: FileCompression) -> None:
    assert detect_compression(name) is expected


@parametrize("name", ["plain.txt", "packed.txt.gz", "packed.txt.bz2", "packed.txt.xz"])
def test_file_opener_detects_compression(tmp_path: Path, name: str) -> None:
    path: Path = _write(tmp_path / name)
    opener = FileOpener()
    lines: ObjectCollector[str] = ObjectCollector()
    opener.set_receiver(LineReader()).set_receiver(lines)

    opener.process(str(path))

    assert lines.items == ["first line\n", "zweite Zeile – ü\n"]


def test_explicit_compression_overrides_suffix(tmp_path: Path) -> None:
    path: Path = tmp_path / "misnamed.dat"
    path.write_bytes(gzip.compress(CONTENT.encode("utf-8")))
    opener = FileOpener(compression=FileCompression.GZIP)
    collector: ObjectCollector[IO[str]] = ObjectCollector()
    opener.set_receiver(collector)

    opener.process(path)

    assert collector.items[0].read() == CONTENT


def test_readers_are_closed_with_the_stream(tmp_path: Path) -> None:
    path: Path = _write(tmp_path / "plain.txt")
    opener = FileOpener()
    collector: ObjectCollector[IO[str]] = ObjectCollector()
    opener.set_receiver(collector)

    opener.process(path)
    opener.process(path)
    assert not any(reader.closed for reader in collector.items)

    opener.close_stream()

    assert all(reader.closed for reader in collector.items)
    assert collector.closed


def test_reset_closes_readers(tmp_path: Path) -> None:
    path: Path = _write(tmp_path / "plain.txt")
    opener = FileOpener()
    collector: ObjectCollector[IO[str]] = ObjectCollector()
    opener.set_receiver(collector)

    opener.process(path)
    opener.reset_stream()

    assert collector.items[0].closed
    assert collector.reset_count == 1


def test_missing_file_raises(tmp_path: Path) -> None:
    opener = FileOpener()
    opener.set_receiver(ObjectCollector())
    with pytest.raises(FileNotFoundError):
        opener.process(tmp_path / "absent.xml")


@parametrize("name", ["out.xml", "out.xml.gz", "out.xml.bz2", "out.xml.xz"])
def test_file_writer_round_trips_through_open_text(tmp_path: Path, name: str) -> None:
    path: Path = tmp_path / name
    writer = FileWriter(path)

    writer.process("<a>")
    writer.process("ü</a>")
    writer.close_stream()

    with open_text(path, "r") as stream:
        assert stream.read() == "<a>ü</a>"


def test_file_writer_creates_nothing_without_output(tmp_path: Path) -> None:
    path: Path = tmp_path / "never.xml"
    writer = FileWriter(path)
    writer.close_stream()
    assert not path.exists()
