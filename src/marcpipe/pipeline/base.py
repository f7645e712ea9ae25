# topmark:header:start
#
#   project      : MarcPipe
#   file         : base.py
#   file_relpath : src/marcpipe/pipeline/base.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Base classes for pipeline stages.

`DefaultSender` implements the common lifecycle:

    stage.reset_stream()  # internally: on_reset_stream → receiver.reset_stream
    stage.close_stream()  # internally: on_close_stream → receiver.close_stream

Subclasses put their flushing into the ``on_*`` hooks; forwarding always happens
afterwards, so buffered output reaches the receiver before the lifecycle call.

``close_stream()`` is idempotent. ``reset_stream()`` after a close reopens the
stage for a new stream.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

from marcpipe.config.logging import get_logger
from marcpipe.core.errors import MarcpipeError

if TYPE_CHECKING:
    from marcpipe.config.logging import MarcpipeLogger
    from marcpipe.pipeline.contracts import LifeCycle, StreamReceiver

logger: MarcpipeLogger = get_logger(__name__)

R = TypeVar("R", bound="LifeCycle")
T = TypeVar("T")


class DefaultSender(Generic[R]):
    """Holds a single downstream receiver and implements the lifecycle.

    Do not override ``reset_stream``/``close_stream``; override the
    ``on_reset_stream``/``on_close_stream`` hooks instead.
    """

    def __init__(self) -> None:
        self._receiver: R | None = None
        self._closed: bool = False

    @property
    def receiver(self) -> R:
        """The downstream receiver.

        Raises:
            MarcpipeError: If no receiver has been set.
        """
        if self._receiver is None:
            raise MarcpipeError(f"{self.__class__.__name__} has no receiver")
        return self._receiver

    @property
    def has_receiver(self) -> bool:
        """Whether a downstream receiver is set."""
        return self._receiver is not None

    @property
    def is_closed(self) -> bool:
        """Whether ``close_stream()`` was called (and not followed by a reset)."""
        return self._closed

    def set_receiver(self, receiver: R) -> R:
        """Set the downstream receiver.

        Args:
            receiver (R): The receiver.

        Returns:
            R: ``receiver``, so stages can be chained.
        """
        self._receiver = receiver
        self.on_set_receiver()
        return receiver

    def reset_stream(self) -> None:
        """Flush and reset this stage, then forward the reset."""
        self.on_reset_stream()
        if self._receiver is not None:
            self._receiver.reset_stream()
        self._closed = False

    def close_stream(self) -> None:
        """Flush and close this stage, then forward the close (once)."""
        if not self._closed:
            self.on_close_stream()
            if self._receiver is not None:
                self._receiver.close_stream()
        self._closed = True

    def on_set_receiver(self) -> None:
        """Hook invoked after a receiver was set."""

    def on_reset_stream(self) -> None:
        """Hook invoked before the reset is forwarded."""

    def on_close_stream(self) -> None:
        """Hook invoked before the close is forwarded."""


class DefaultStreamPipe(DefaultSender[R]):
    """Structural stage whose events are no-ops unless overridden."""

    def start_record(self, identifier: str) -> None:
        pass

    def end_record(self) -> None:
        pass

    def start_entity(self, name: str) -> None:
        pass

    def end_entity(self) -> None:
        pass

    def literal(self, name: str, value: str | None) -> None:
        pass


class ForwardingStreamPipe(DefaultStreamPipe["StreamReceiver"]):
    """Structural stage that relays every event unchanged.

    Decorators subclass this and extend individual events with side effects.
    """

    def start_record(self, identifier: str) -> None:
        self.receiver.start_record(identifier)

    def end_record(self) -> None:
        self.receiver.end_record()

    def start_entity(self, name: str) -> None:
        self.receiver.start_entity(name)

    def end_entity(self) -> None:
        self.receiver.end_entity()

    def literal(self, name: str, value: str | None) -> None:
        self.receiver.literal(name, value)


class DefaultObjectPipe(DefaultSender[R], Generic[T, R]):
    """Object stage: consumes ``T`` objects and sends to an ``R`` receiver."""

    def process(self, obj: T) -> None:
        """Consume one object (no-op unless overridden).

        Args:
            obj (T): The object to consume.
        """


class DefaultObjectReceiver(Generic[T]):
    """Terminal object receiver with no-op lifecycle hooks."""

    def process(self, obj: T) -> None:
        pass

    def reset_stream(self) -> None:
        pass

    def close_stream(self) -> None:
        pass


class StreamTee(DefaultStreamPipe["StreamReceiver"]):
    """Multiplexer that sends every event to a fixed set of receivers.

    Receivers are called in the order they were added.
    """

    def __init__(self) -> None:
        super().__init__()
        self._receivers: list[StreamReceiver] = []

    @property
    def receivers(self) -> tuple[StreamReceiver, ...]:
        """All receivers, in call order."""
        return tuple(self._receivers)

    def set_receiver(self, receiver: StreamReceiver) -> StreamReceiver:
        """Replace all receivers with ``receiver``.

        Args:
            receiver (StreamReceiver): The single receiver.

        Returns:
            StreamReceiver: ``receiver``.
        """
        self._receivers = [receiver]
        return super().set_receiver(receiver)

    def add_receiver(self, receiver: StreamReceiver) -> StreamTee:
        """Append a receiver.

        Args:
            receiver (StreamReceiver): Receiver to add.

        Returns:
            StreamTee: ``self``, so several receivers can be added in a row.
        """
        if self._receiver is None:
            self._receiver = receiver
        self._receivers.append(receiver)
        return self

    def start_record(self, identifier: str) -> None:
        for r in self._receivers:
            r.start_record(identifier)

    def end_record(self) -> None:
        for r in self._receivers:
            r.end_record()

    def start_entity(self, name: str) -> None:
        for r in self._receivers:
            r.start_entity(name)

    def end_entity(self) -> None:
        for r in self._receivers:
            r.end_entity()

    def literal(self, name: str, value: str | None) -> None:
        for r in self._receivers:
            r.literal(name, value)

    def reset_stream(self) -> None:
        self.on_reset_stream()
        for r in self._receivers:
            r.reset_stream()
        self._closed = False

    def close_stream(self) -> None:
        if not self._closed:
            self.on_close_stream()
            for r in self._receivers:
                r.close_stream()
        self._closed = True
