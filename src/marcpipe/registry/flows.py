# topmark:header:start
#
#   project      : MarcPipe
#   file         : flows.py
#   file_relpath : src/marcpipe/registry/flows.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Build linear flows from registered commands.

`build_flow` instantiates each command, checks that every stage produces what
the next one consumes, and chains them with ``set_receiver``. Incompatible
neighbours are rejected before any stage sees data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from marcpipe.config.logging import get_logger
from marcpipe.core.errors import ConfigurationError
from marcpipe.registry.commands import CommandRegistry

if TYPE_CHECKING:
    from marcpipe.config.logging import MarcpipeLogger
    from marcpipe.registry.commands import Capability, CommandMeta, CommandSpec

logger: MarcpipeLogger = get_logger(__name__)

StepLike = str | tuple[str, Mapping[str, Any]]


@dataclass(frozen=True)
class Flow:
    """A chain of instantiated stages.

    Attributes:
        metas (tuple[CommandMeta, ...]): Metadata of each stage, in flow order.
        stages (tuple[Any, ...]): The stage instances, in flow order.
    """

    metas: tuple[CommandMeta, ...]
    stages: tuple[Any, ...]

    @property
    def head(self) -> Any:
        """First stage; feed the flow through it."""
        return self.stages[0]

    @property
    def tail(self) -> Any:
        """Last stage; attach a sink to it when it is not one already."""
        return self.stages[-1]

    @property
    def in_type(self) -> Capability:
        """What the head consumes."""
        return self.metas[0].in_type

    @property
    def out_type(self) -> Capability | None:
        """What the tail produces, or None if the tail is a sink."""
        return self.metas[-1].out_type

    def set_receiver(self, receiver: Any) -> Any:
        """Attach a receiver to the tail.

        Args:
            receiver (Any): Downstream receiver.

        Returns:
            Any: ``receiver``.

        Raises:
            ConfigurationError: If the tail is a sink.
        """
        if self.out_type is None:
            raise ConfigurationError(f"Command '{self.metas[-1].name}' is a sink")
        return self.tail.set_receiver(receiver)

    def process(self, obj: Any) -> None:
        """Send one object to the head stage."""
        self.head.process(obj)

    def reset_stream(self) -> None:
        self.head.reset_stream()

    def close_stream(self) -> None:
        self.head.close_stream()


def _split_step(step: StepLike) -> tuple[str, Mapping[str, Any]]:
    if isinstance(step, str):
        return step, {}
    return step


def build_flow(steps: Sequence[StepLike]) -> Flow:
    """Instantiate and chain registered commands.

    Args:
        steps (Sequence[StepLike]): Command names, optionally paired with their
            keyword options, in flow order.

    Returns:
        Flow: The chained flow.

    Raises:
        ConfigurationError: If the flow is empty, a command is unknown, an option
            is invalid, or two neighbours are incompatible.
    """
    if not steps:
        raise ConfigurationError("A flow needs at least one command")

    specs: list[tuple[CommandSpec, Mapping[str, Any]]] = []
    for step in steps:
        name, options = _split_step(step)
        specs.append((CommandRegistry.require(name), options))

    for (left, _), (right, _) in zip(specs, specs[1:]):
        if left.meta.out_type is None:
            raise ConfigurationError(
                f"Command '{left.meta.name}' is a sink and cannot feed '{right.meta.name}'"
            )
        if left.meta.out_type is not right.meta.in_type:
            raise ConfigurationError(
                f"Command '{left.meta.name}' produces {left.meta.out_type.value} "
                f"but '{right.meta.name}' expects {right.meta.in_type.value}"
            )

    stages: list[Any] = [spec.create(**options) for spec, options in specs]
    for upstream, downstream in zip(stages, stages[1:]):
        upstream.set_receiver(downstream)

    logger.debug("Built flow: %s", " | ".join(spec.meta.name for spec, _ in specs))
    return Flow(metas=tuple(spec.meta for spec, _ in specs), stages=tuple(stages))
