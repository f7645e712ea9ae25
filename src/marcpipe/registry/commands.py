# topmark:header:start
#
#   project      : MarcPipe
#   file         : commands.py
#   file_relpath : src/marcpipe/registry/commands.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Startup-time registry of pipeline commands.

A *command* is a named factory that builds one pipeline stage. Each command
declares the capability it consumes (``in_type``) and produces
(``out_type``) plus the keyword options its factory accepts. Registration
validates these declarations once, so flows can be checked for compatibility
before any data moves.

Built-in commands register themselves with the `register_command` decorator
when their modules are imported; `register_all_commands` imports every
module of `marcpipe.pipeline` (idempotent).

Notes:
    * Public views (`as_mapping()`, `names()`, `get()`) are exposed as
      `MappingProxyType` / tuples and must not be mutated.
    * `register()` / `unregister()` mutate process-global state. In tests,
      wrap them in try/finally.
"""

from __future__ import annotations

import importlib
import pkgutil
import re
from dataclasses import dataclass, field
from enum import Enum
from threading import RLock
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Final, Iterator, Mapping, TypeVar

from marcpipe.config.logging import get_logger
from marcpipe.core.errors import ConfigurationError, RegistryError

if TYPE_CHECKING:
    from marcpipe.config.logging import MarcpipeLogger

logger: MarcpipeLogger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_NAME_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$")

_TRUE_WORDS: Final[frozenset[str]] = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS: Final[frozenset[str]] = frozenset({"false", "no", "off", "0"})


class Capability(str, Enum):
    """What a command consumes or produces."""

    PATH = "path"
    READER = "reader"
    TEXT = "text"
    STREAM = "stream"


@dataclass(frozen=True)
class CommandMeta:
    """Stable, serializable metadata about a registered command."""

    name: str
    description: str
    in_type: Capability
    out_type: Capability | None
    options: tuple[str, ...] = ()
    factory: str = ""

    @property
    def signature(self) -> str:
        """Human-readable ``in -> out`` signature."""
        out: str = self.out_type.value if self.out_type is not None else "(sink)"
        return f"{self.in_type.value} -> {out}"


@dataclass(frozen=True)
class CommandSpec:
    """A registered command: metadata plus factory and typed options."""

    meta: CommandMeta
    factory: Callable[..., Any]
    option_types: Mapping[str, type] = field(default_factory=dict)

    def create(self, **options: Any) -> Any:
        """Instantiate the stage, coercing string option values.

        Args:
            **options (Any): Factory keyword options; strings are converted to the
                declared option type.

        Returns:
            Any: The new pipeline stage.

        Raises:
            ConfigurationError: If an option is unknown or cannot be converted.
        """
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            kind: type | None = self.option_types.get(key)
            if kind is None:
                known: str = ", ".join(sorted(self.option_types)) or "none"
                raise ConfigurationError(
                    f"Unknown option '{key}' for command '{self.meta.name}' (known: {known})",
                    key=key,
                )
            kwargs[key] = _coerce(key, kind, value)
        logger.debug("Creating command %s with options %s", self.meta.name, kwargs)
        return self.factory(**kwargs)


def _coerce(key: str, kind: type, value: Any) -> Any:
    if not isinstance(value, str) or kind is str:
        return value
    if kind is bool:
        word: str = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise ConfigurationError(f"Option '{key}' expects a boolean, got {value!r}", key=key)
    try:
        if issubclass(kind, Enum):
            return kind(value.strip().lower())
        return kind(value.strip())
    except ValueError as exc:
        raise ConfigurationError(
            f"Option '{key}' expects {kind.__name__}, got {value!r}", key=key
        ) from exc


class CommandRegistry:
    """Process-global registry of pipeline commands."""

    _lock = RLock()
    _commands: dict[str, CommandSpec] = {}

    @classmethod
    def names(cls) -> tuple[str, ...]:
        """Return all registered command names (sorted).

        Returns:
            tuple[str, ...]: Sorted command names.
        """
        register_all_commands()
        with cls._lock:
            return tuple(sorted(cls._commands))

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Return True if a command is registered under ``name``."""
        register_all_commands()
        with cls._lock:
            return name in cls._commands

    @classmethod
    def get(cls, name: str) -> CommandSpec | None:
        """Return a command by name.

        Args:
            name (str): Registered command name.

        Returns:
            CommandSpec | None: The command if found, else None.
        """
        register_all_commands()
        with cls._lock:
            return cls._commands.get(name)

    @classmethod
    def require(cls, name: str) -> CommandSpec:
        """Return a command by name or fail.

        Args:
            name (str): Registered command name.

        Returns:
            CommandSpec: The command.

        Raises:
            RegistryError: If no command is registered under ``name``.
        """
        spec: CommandSpec | None = cls.get(name)
        if spec is None:
            raise RegistryError(f"Unknown command: {name}")
        return spec

    @classmethod
    def as_mapping(cls) -> Mapping[str, CommandSpec]:
        """Return a read-only mapping of commands.

        Returns:
            Mapping[str, CommandSpec]: Name -> CommandSpec mapping (`MappingProxyType`).
        """
        register_all_commands()
        with cls._lock:
            return MappingProxyType(dict(cls._commands))

    @classmethod
    def iter_meta(cls) -> Iterator[CommandMeta]:
        """Iterate over metadata of registered commands, sorted by name.

        Yields:
            CommandMeta: Serializable metadata about each command.
        """
        for name in cls.names():
            yield cls._commands[name].meta

    @classmethod
    def create(cls, name: str, **options: Any) -> Any:
        """Instantiate a registered command.

        Args:
            name (str): Registered command name.
            **options (Any): Factory options.

        Returns:
            Any: The new pipeline stage.
        """
        return cls.require(name).create(**options)

    @classmethod
    def register(cls, spec: CommandSpec) -> None:
        """Register a command.

        Args:
            spec (CommandSpec): The command to add.

        Raises:
            RegistryError: If the declaration is invalid or the name is taken.
        """
        meta: CommandMeta = spec.meta
        if not _NAME_RE.match(meta.name):
            raise RegistryError(f"Invalid command name: {meta.name!r}")
        if not isinstance(meta.in_type, Capability):
            raise RegistryError(f"Command '{meta.name}' declares an invalid input capability")
        if meta.out_type is not None and not isinstance(meta.out_type, Capability):
            raise RegistryError(f"Command '{meta.name}' declares an invalid output capability")
        if not callable(spec.factory):
            raise RegistryError(f"Command '{meta.name}' has no callable factory")
        with cls._lock:
            if meta.name in cls._commands:
                raise RegistryError(f"Command '{meta.name}' is already registered.")
            logger.debug("Registering command %s (%s)", meta.name, meta.signature)
            cls._commands[meta.name] = spec

    @classmethod
    def unregister(cls, name: str) -> bool:
        """Unregister a command by name.

        Args:
            name (str): Registered command name.

        Returns:
            bool: True if removed, else False.
        """
        with cls._lock:
            return cls._commands.pop(name, None) is not None


def register_command(
    *,
    name: str,
    description: str,
    in_type: Capability,
    out_type: Capability | None,
    options: Mapping[str, type] | None = None,
) -> Callable[[F], F]:
    """Decorator registering a stage class or factory function as a command.

    Args:
        name (str): Command name (lowercase, dash-separated).
        description (str): One-line description shown by ``marcpipe commands``.
        in_type (Capability): What the stage consumes.
        out_type (Capability | None): What the stage produces; None for sinks.
        options (Mapping[str, type] | None): Keyword options accepted by the factory
            and their types.

    Returns:
        Callable[[F], F]: A decorator returning the factory unchanged.
    """
    option_types: dict[str, type] = dict(options or {})

    def decorator(factory: F) -> F:
        meta = CommandMeta(
            name=name,
            description=description,
            in_type=in_type,
            out_type=out_type,
            options=tuple(sorted(option_types)),
            factory=f"{factory.__module__}.{factory.__qualname__}",
        )
        CommandRegistry.register(CommandSpec(meta=meta, factory=factory, option_types=option_types))
        return factory

    return decorator


_registered_all: bool = False


def register_all_commands() -> None:
    """Import every module of `marcpipe.pipeline` so built-in commands register."""
    global _registered_all
    if _registered_all:
        return
    package = importlib.import_module("marcpipe.pipeline")
    for module_info in pkgutil.walk_packages(package.__path__, prefix=f"{package.__name__}."):
        importlib.import_module(module_info.name)
    # only after every import succeeded, so a failed import is retried
    _registered_all = True
