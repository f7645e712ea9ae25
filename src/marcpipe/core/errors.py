# topmark:header:start
#
#   project      : MarcPipe
#   file         : errors.py
#   file_relpath : src/marcpipe/core/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Domain exceptions raised by MarcPipe stages.

These exceptions are framework-agnostic: pipeline stages raise them and never
swallow them. The CLI translates them into Click exceptions with exit codes
(see `marcpipe.cli.errors`).

Taxonomy:
    - `FormatError`: malformed structural input (wrong-length entity name,
      ``None`` where a raw value is required, unbalanced events, broken XML).
      Fatal to the current record; recovery is a caller policy.
    - `ConfigurationError`: invalid option value, detected before processing.
    - `RegistryError`: invalid command registration or lookup.
    - `StreamClosedError`: an event arrived after ``close_stream()``.
"""

from __future__ import annotations


class MarcpipeError(Exception):
    """Base class for all MarcPipe errors."""


class FormatError(MarcpipeError):
    """Malformed structural input.

    Attributes:
        name (str | None): Offending event name (entity or literal), if any.
        value (str | None): Offending value, if any.
    """

    def __init__(self, message: str, *, name: str | None = None, value: str | None = None) -> None:
        super().__init__(message)
        self.name = name
        self.value = value


class ConfigurationError(MarcpipeError):
    """Invalid configuration value (raised before any processing starts).

    Attributes:
        key (str | None): The option key that failed validation, if known.
    """

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class RegistryError(ConfigurationError):
    """Invalid command registration, lookup or flow composition."""


class StreamClosedError(MarcpipeError):
    """An event was received after the stream was closed."""
