# topmark:header:start
#
#   project      : MarcPipe
#   file         : contracts.py
#   file_relpath : src/marcpipe/pipeline/contracts.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Type contracts for pipeline stages.

Structural events
-----------------
Every structural stage accepts five calls in this nesting grammar::

    start_record (start_entity literal* end_entity | literal)* end_record

Callers guarantee the order; stages only validate what affects their own
state.

Lifecycle
---------
``reset_stream()`` is a soft reset: flush buffered output, reset internal state,
then forward. ``close_stream()`` is terminal: flush, emit any closing
structure, then forward. A stage forwards lifecycle calls only **after** its own
buffered output for the current unit has been sent downstream.

Fan-out
-------
A stage forwards to at most one receiver, unless it is explicitly a
multiplexer with a fixed set of receivers (see
`marcpipe.pipeline.base.StreamTee`).
"""

from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

T_contra = TypeVar("T_contra", contravariant=True)


@runtime_checkable
class LifeCycle(Protocol):
    """Stream lifecycle shared by every receiver."""

    def reset_stream(self) -> None:
        """Flush, reset internal state and forward the reset downstream."""
        ...

    def close_stream(self) -> None:
        """Flush, emit closing structure and forward the close downstream."""
        ...


@runtime_checkable
class StreamReceiver(LifeCycle, Protocol):
    """Receiver of structural record events."""

    def start_record(self, identifier: str) -> None:
        """Open a record.

        Args:
            identifier (str): Record identifier; may be empty.
        """
        ...

    def end_record(self) -> None:
        """Close the current record."""
        ...

    def start_entity(self, name: str) -> None:
        """Open a named entity inside the current record.

        Args:
            name (str): Entity name.
        """
        ...

    def end_entity(self) -> None:
        """Close the current entity."""
        ...

    def literal(self, name: str, value: str | None) -> None:
        """Emit a name/value pair.

        Args:
            name (str): Literal name.
            value (str | None): Literal value; ``None`` is allowed.
        """
        ...


@runtime_checkable
class ObjectReceiver(LifeCycle, Protocol[T_contra]):
    """Receiver of whole objects (text chunks, readers, paths)."""

    def process(self, obj: T_contra) -> None:
        """Consume one object.

        Args:
            obj (T_contra): The object to consume.
        """
        ...
