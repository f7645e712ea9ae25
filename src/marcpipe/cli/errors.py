# topmark:header:start
#
#   project      : MarcPipe
#   file         : errors.py
#   file_relpath : src/marcpipe/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the MarcPipe CLI.

Commands raise these (or let `to_cli_error` translate domain errors into
them) so Click prints a single message and exits with a standardized code.
Messages are shown through the project console when one is present.
"""

from __future__ import annotations

from typing import IO, Any

import click

from marcpipe.cli.console import get_console
from marcpipe.cli.exit_codes import ExitCode
from marcpipe.config.logging import get_logger
from marcpipe.core.errors import (
    ConfigurationError,
    FormatError,
    MarcpipeError,
    StreamClosedError,
)

logger = get_logger(__name__)


class MarcpipeCliError(click.ClickException):
    """Base class for all MarcPipe CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:
        """Return the plain error message text (styling is applied in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:
        """Display the error through the project console."""
        console = get_console()
        console.error(console.styled(f"Error: {self.format_message()}", fg="bright_red"))


class MarcpipeUsageError(MarcpipeCliError):
    """Invalid flags or arguments."""

    exit_code = ExitCode.USAGE_ERROR


class MarcpipeFormatError(MarcpipeCliError):
    """Malformed input records or XML."""

    exit_code = ExitCode.FORMAT_ERROR


class MarcpipeFileNotFoundError(MarcpipeCliError):
    """Input path does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class MarcpipePipelineError(MarcpipeCliError):
    """Internal pipeline failure (stage contract violation)."""

    exit_code = ExitCode.PIPELINE_ERROR


class MarcpipeIOError(MarcpipeCliError):
    """I/O error reading or writing a file."""

    exit_code = ExitCode.IO_ERROR


class MarcpipeConfigError(MarcpipeCliError):
    """Missing, invalid or malformed configuration."""

    exit_code = ExitCode.CONFIG_ERROR


def to_cli_error(exc: Exception) -> MarcpipeCliError:
    """Translate a domain or OS error into the matching CLI error.

    Args:
        exc (Exception): The error raised while building or running a flow.

    Returns:
        MarcpipeCliError: The CLI error carrying the exit code.
    """
    logger.debug("Translating %s: %s", type(exc).__name__, exc)
    if isinstance(exc, ConfigurationError):
        suffix: str = f" (key: {exc.key})" if exc.key else ""
        return MarcpipeConfigError(f"{exc}{suffix}")
    if isinstance(exc, FormatError):
        return MarcpipeFormatError(str(exc))
    if isinstance(exc, StreamClosedError):
        return MarcpipePipelineError(str(exc))
    if isinstance(exc, MarcpipeError):
        return MarcpipePipelineError(str(exc))
    if isinstance(exc, (FileNotFoundError, IsADirectoryError)):
        return MarcpipeFileNotFoundError(f"No such file: {exc.filename}")
    if isinstance(exc, UnicodeError):
        return MarcpipeFormatError(f"Cannot decode input: {exc}")
    if isinstance(exc, OSError):
        return MarcpipeIOError(str(exc))
    return MarcpipeCliError(str(exc))
