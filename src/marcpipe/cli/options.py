# topmark:header:start
#
#   project      : MarcPipe
#   file         : options.py
#   file_relpath : src/marcpipe/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common CLI options and their resolution logic.

Group-level options (verbosity, color) are declared here so the group and
individual commands stay thin.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Callable, ParamSpec, TypeVar

import click

from marcpipe.cli.errors import MarcpipeUsageError
from marcpipe.config.logging import TRACE_LEVEL

P = ParamSpec("P")
R = TypeVar("R")


class OutputFormat(str, Enum):
    """Output format for listings.

    Members:
      DEFAULT: Human-friendly text output; may include ANSI color if enabled.
      JSON: A single JSON document (machine-readable).
      NDJSON: One JSON object per line (machine-readable).
      MARKDOWN: GitHub-flavoured Markdown, for documentation.
    """

    DEFAULT = "default"
    JSON = "json"
    NDJSON = "ndjson"
    MARKDOWN = "markdown"


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Return the program-output verbosity (positive: verbose, negative: quiet).

    Args:
        verbose_count (int): Number of ``-v`` flags.
        quiet_count (int): Number of ``-q`` flags.

    Returns:
        int: ``verbose_count`` or ``-quiet_count``.

    Raises:
        MarcpipeUsageError: If both flags are used.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise MarcpipeUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")
    return verbose_count if verbose_count else -quiet_count


def verbosity_to_log_level(verbosity: int) -> int:
    """Map program verbosity to a logging level.

    ``-vvv`` is TRACE, ``-vv`` DEBUG, ``-v`` INFO (batch progress), none is
    WARNING and ``-q`` is ERROR.

    Args:
        verbosity (int): Value returned by `resolve_verbosity`.

    Returns:
        int: The logging level.
    """
    if verbosity >= 3:
        return TRACE_LEVEL
    if verbosity == 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    if verbosity < 0:
        return logging.ERROR
    return logging.WARNING


def resolve_color(*, no_color: bool, output_format: OutputFormat | None = None) -> bool:
    """Decide whether program output is colorized.

    Args:
        no_color (bool): ``--no-color`` was passed.
        output_format (OutputFormat | None): Machine formats are never colorized.

    Returns:
        bool: True if ANSI styles should be emitted.
    """
    if no_color or os.getenv("NO_COLOR") is not None:
        return False
    if output_format in (OutputFormat.JSON, OutputFormat.NDJSON):
        return False
    return True


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``-v/--verbose`` and ``-q/--quiet`` counting options."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity (-v progress, -vv debug, -vvv trace).",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Only report errors.",
    )(f)
    return f


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add the ``--no-color`` flag."""
    return click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output.",
    )(f)
