# topmark:header:start
#
#   project      : MarcPipe
#   file         : version.py
#   file_relpath : src/marcpipe/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""MarcPipe `version` command.

Prints the MarcPipe version as installed in the active Python environment.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from marcpipe.cli.cli_types import EnumChoiceParam
from marcpipe.cli.options import OutputFormat
from marcpipe.constants import MARCPIPE_VERSION

if TYPE_CHECKING:
    from marcpipe.cli.console import ConsoleLike


@click.command(
    name="version",
    help="Show the current version of MarcPipe.",
)
@click.option(
    "--format",
    "output_format",
    type=EnumChoiceParam(OutputFormat),
    default=None,
    help=f"Output format ({', '.join(v.value for v in OutputFormat)}).",
)
def version_command(*, output_format: OutputFormat | None = None) -> None:
    """Show the current version of MarcPipe.

    Args:
        output_format (OutputFormat | None): Optional output format.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    vlevel: int = int(ctx.obj.get("verbosity_level", 0))

    fmt: OutputFormat = output_format or OutputFormat.DEFAULT
    if fmt in (OutputFormat.JSON, OutputFormat.NDJSON):
        console.print(json.dumps({"version": MARCPIPE_VERSION}))
    elif fmt == OutputFormat.MARKDOWN:
        console.print("# MarcPipe Version\n")
        console.print(f"**MarcPipe version: {MARCPIPE_VERSION}**")
    elif vlevel > 0:
        console.print(console.styled("MarcPipe version:\n", bold=True, underline=True))
        console.print(f"    {console.styled(MARCPIPE_VERSION, bold=True)}")
    else:
        console.print(console.styled(MARCPIPE_VERSION, bold=True))
