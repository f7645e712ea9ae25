# topmark:header:start
#
#   project      : MarcPipe
#   file         : batcher.py
#   file_relpath : src/marcpipe/pipeline/batcher.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Batching decorators for structural streams.

A batcher relays every event unchanged and counts records. Each time
``batch_size`` records have passed, ``on_batch_complete()`` is called once.
Both counters restart at zero on ``reset_stream()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Final

from marcpipe.config.logging import get_logger
from marcpipe.core.errors import ConfigurationError
from marcpipe.pipeline.base import ForwardingStreamPipe
from marcpipe.registry.commands import Capability, register_command

if TYPE_CHECKING:
    from marcpipe.config.logging import MarcpipeLogger

logger: MarcpipeLogger = get_logger(__name__)

DEFAULT_BATCH_SIZE: Final[int] = 1000


class AbstractBatcher(ForwardingStreamPipe, ABC):
    """Relay events and call `on_batch_complete` every ``batch_size`` records.

    Args:
        batch_size (int): Records per batch; must be positive.
    """

    def __init__(self, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        super().__init__()
        self._batch_size: int = _validate_batch_size(batch_size)
        self._record_count: int = 0
        self._batch_count: int = 0

    @property
    def batch_size(self) -> int:
        """Records per batch.

        Changing it does not reinterpret the current partial batch; the
        running count simply wraps against the new size.
        """
        return self._batch_size

    @batch_size.setter
    def batch_size(self, value: int) -> None:
        self._batch_size = _validate_batch_size(value)

    @property
    def record_count(self) -> int:
        """Records seen in the current (partial) batch."""
        return self._record_count

    @property
    def batch_count(self) -> int:
        """Completed batches since the last reset."""
        return self._batch_count

    def end_record(self) -> None:
        self.receiver.end_record()

        self._record_count = (self._record_count + 1) % self._batch_size
        if self._record_count == 0:
            self._batch_count += 1
            self.on_batch_complete()

    def on_reset_stream(self) -> None:
        self._record_count = 0
        self._batch_count = 0

    @abstractmethod
    def on_batch_complete(self) -> None:
        """Hook invoked after each completed batch."""


def _validate_batch_size(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(
            f"Batch size must be a positive integer (got {value!r})", key="batch_size"
        )
    return value


@register_command(
    name="batch-log",
    description="Logs the number of processed records after every batch.",
    in_type=Capability.STREAM,
    out_type=Capability.STREAM,
    options={"batch_size": int},
)
class StreamBatchLogger(AbstractBatcher):
    """Log progress at INFO level after every completed batch."""

    def on_batch_complete(self) -> None:
        logger.info("%d records processed", self.batch_count * self.batch_size)


class CallbackBatcher(AbstractBatcher):
    """Invoke a callable with the batcher after every completed batch.

    Args:
        callback (Callable[[AbstractBatcher], None]): Called once per batch.
        batch_size (int): Records per batch; must be positive.
    """

    def __init__(
        self,
        callback: Callable[[AbstractBatcher], None],
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        super().__init__(batch_size)
        self._callback = callback

    def on_batch_complete(self) -> None:
        self._callback(self)
