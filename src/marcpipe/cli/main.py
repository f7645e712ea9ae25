# topmark:header:start
#
#   project      : MarcPipe
#   file         : main.py
#   file_relpath : src/marcpipe/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""MarcPipe command-line entry point.

Group-level options are initialized once and placed into ``ctx.obj``:

- ``verbosity_level``: program-output verbosity (see `resolve_verbosity`);
- ``log_level``: internal logging level (``MARCPIPE_LOG_LEVEL`` wins over ``-v``);
- ``color_enabled`` and ``console``: user-facing output settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from marcpipe.cli.commands.commands import commands_command
from marcpipe.cli.commands.convert import convert_command
from marcpipe.cli.commands.version import version_command
from marcpipe.cli.console import ClickConsole
from marcpipe.cli.options import (
    common_color_options,
    common_verbose_options,
    resolve_color,
    resolve_verbosity,
    verbosity_to_log_level,
)
from marcpipe.config.logging import get_logger, resolve_env_log_level, setup_logging
from marcpipe.registry.commands import register_all_commands

if TYPE_CHECKING:
    from marcpipe.cli.console import ConsoleLike

logger = get_logger(__name__)

register_all_commands()


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity, logging, color) on the Click context.

    Args:
        ctx (click.Context): Current Click context; ``obj`` and ``color`` are set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        no_color (bool): Whether ``--no-color`` was passed.
    """
    ctx.obj = ctx.obj or {}

    verbosity: int = resolve_verbosity(verbose, quiet)
    ctx.obj["verbosity_level"] = verbosity

    level_env: int | None = resolve_env_log_level()
    log_level: int = level_env if level_env is not None else verbosity_to_log_level(verbosity)
    ctx.obj["log_level"] = log_level
    setup_logging(level=log_level)

    enable_color: bool = resolve_color(no_color=no_color)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color
    ctx.obj["console"] = ClickConsole(enable_color=enable_color)


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="MarcPipe: streaming MARC 21 record pipelines.",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(ctx: click.Context, verbose: int, quiet: int, no_color: bool) -> None:
    """Entry point for the MarcPipe CLI."""
    init_common_state(ctx, verbose=verbose, quiet=quiet, no_color=no_color)
    console: ConsoleLike = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'marcpipe convert INPUT' to re-encode a MARCXML file.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(version_command)

cli.add_command(commands_command)

cli.add_command(convert_command)

if __name__ == "__main__":
    cli()
