# topmark:header:start
#
#   project      : MarcPipe
#   file         : test_base_pipes.py
#   file_relpath : tests/pipeline/test_base_pipes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the lifecycle shared by all pipeline stages."""

from __future__ import annotations

import io

import pytest

from marcpipe.core.errors import MarcpipeError
from marcpipe.pipeline.base import ForwardingStreamPipe, StreamTee
from marcpipe.pipeline.sinks import ObjectCollector, TextWriter
from marcpipe.pipeline.strings import Utf8Normalizer
from tests.conftest import mark_pipeline
from tests.pipeline.conftest import EventRecorder

pytestmark = [mark_pipeline]


class _Flushing(ForwardingStreamPipe):
    """Records hook calls next to the events seen downstream."""

    def __init__(self, log: list[str]) -> None:
        super().__init__()
        self._log = log

    def on_reset_stream(self) -> None:
        self._log.append("on_reset")

    def on_close_stream(self) -> None:
        self._log.append("on_close")


def test_receiver_is_required() -> None:
    stage = ForwardingStreamPipe()
    assert not stage.has_receiver
    with pytest.raises(MarcpipeError, match="has no receiver"):
        stage.start_record("1")


def test_set_receiver_returns_receiver_for_chaining() -> None:
    first = Utf8Normalizer()
    second = Utf8Normalizer()
    collector: ObjectCollector[str] = ObjectCollector()

    assert first.set_receiver(second).set_receiver(collector) is collector
    first.process("x")
    assert collector.items == ["x"]


def test_hooks_run_before_forwarding() -> None:
    log: list[str] = []
    stage = _Flushing(log)
    recorder = EventRecorder()
    stage.set_receiver(recorder)

    stage.reset_stream()
    log.append(f"seen:{len(recorder.events)}")
    stage.close_stream()
    log.append(f"seen:{len(recorder.events)}")

    assert log == ["on_reset", "seen:1", "on_close", "seen:2"]


def test_close_is_idempotent_and_reset_reopens() -> None:
    log: list[str] = []
    stage = _Flushing(log)
    recorder = EventRecorder()
    stage.set_receiver(recorder)

    stage.close_stream()
    stage.close_stream()
    assert stage.is_closed
    assert recorder.events == [("close_stream",)]

    stage.reset_stream()
    assert not stage.is_closed
    stage.close_stream()
    assert log == ["on_close", "on_reset", "on_close"]


def test_tee_sends_to_all_receivers_in_order() -> None:
    tee = StreamTee()
    first = EventRecorder()
    second = EventRecorder()
    tee.add_receiver(first).add_receiver(second)

    tee.start_record("1")
    tee.literal("001", "x")
    tee.end_record()
    tee.close_stream()
    tee.close_stream()

    expected = [("start_record", "1"), ("literal", "001", "x"), ("end_record",), ("close_stream",)]
    assert first.events == expected
    assert second.events == expected
    assert tee.receivers == (first, second)


def test_tee_set_receiver_replaces_all() -> None:
    tee = StreamTee()
    dropped = EventRecorder()
    kept = EventRecorder()
    tee.add_receiver(dropped)

    tee.set_receiver(kept)
    tee.reset_stream()

    assert dropped.events == []
    assert kept.events == [("reset_stream",)]


def test_text_writer_does_not_close_its_stream() -> None:
    stream = io.StringIO()
    writer = TextWriter(stream)

    writer.process("<a/>")
    writer.close_stream()

    assert not stream.closed
    assert stream.getvalue() == "<a/>"
