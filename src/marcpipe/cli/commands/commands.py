# topmark:header:start
#
#   project      : MarcPipe
#   file         : commands.py
#   file_relpath : src/marcpipe/cli/commands/commands.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI command to list registered pipeline commands.

For each command the listing shows its description, its keyword options and
its signature (what it consumes and what it produces). Supports a default
human-readable format plus JSON, NDJSON and Markdown.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import TYPE_CHECKING, Any

import click

from marcpipe.cli.cli_types import EnumChoiceParam
from marcpipe.cli.markdown import render_markdown_table
from marcpipe.cli.options import OutputFormat
from marcpipe.constants import MARCPIPE_VERSION
from marcpipe.registry.commands import CommandRegistry

if TYPE_CHECKING:
    from marcpipe.cli.console import ConsoleLike
    from marcpipe.registry.commands import CommandSpec


def describe_option_type(kind: type) -> str:
    """Return a short description of an option type.

    Enum options list their values, e.g. ``[auto, none, gzip, bzip2, xz]``;
    other types show their name in parentheses, e.g. ``(int)``.
    """
    if issubclass(kind, Enum):
        return "[" + ", ".join(str(member.value) for member in kind) + "]"
    return f"({kind.__name__})"


def build_payload(*, show_details: bool) -> list[dict[str, Any]]:
    """Build the listing payload shared by all output formats.

    Args:
        show_details (bool): Include option types and the factory path.

    Returns:
        list[dict[str, Any]]: One entry per command, sorted by name.
    """
    specs = CommandRegistry.as_mapping()
    entries: list[dict[str, Any]] = []
    for meta in CommandRegistry.iter_meta():
        spec: CommandSpec = specs[meta.name]
        entry: dict[str, Any] = {
            "name": meta.name,
            "description": meta.description,
            "in": meta.in_type.value,
            "out": meta.out_type.value if meta.out_type is not None else None,
            "options": list(meta.options),
        }
        if show_details:
            entry["options"] = [
                {"name": name, "type": describe_option_type(spec.option_types[name])}
                for name in meta.options
            ]
            entry["factory"] = meta.factory
        entries.append(entry)
    return entries


@click.command(
    name="commands",
    help="List registered pipeline commands.",
    epilog="""
Lists every pipeline command known to MarcPipe with its description, options and
signature (input -> output).""",
)
@click.option(
    "--output-format",
    "output_format",
    type=EnumChoiceParam(OutputFormat),
    default=None,
    help=f"Output format ({', '.join(v.value for v in OutputFormat)}).",
)
@click.option(
    "--long",
    "show_details",
    is_flag=True,
    help="Show option types and the implementing factory.",
)
def commands_command(
    *,
    show_details: bool = False,
    output_format: OutputFormat | None = None,
) -> None:
    """List registered pipeline commands.

    Args:
        show_details (bool): Include option types and the implementing factory.
        output_format (OutputFormat | None): Output format; ``None`` means default.
    """
    ctx: click.Context = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    fmt: OutputFormat = output_format or OutputFormat.DEFAULT

    entries: list[dict[str, Any]] = build_payload(show_details=show_details)

    if fmt == OutputFormat.JSON:
        console.print(json.dumps({"commands": entries}, indent=2))
        return

    if fmt == OutputFormat.NDJSON:
        for entry in entries:
            console.print(json.dumps({"command": entry}))
        return

    if fmt == OutputFormat.MARKDOWN:
        console.print(f"# MarcPipe {MARCPIPE_VERSION} commands\n")
        headers: list[str] = ["Command", "Description", "Options", "Signature"]
        rows: list[list[str]] = []
        for entry in entries:
            options: str = ", ".join(
                f"`{o['name']} {o['type']}`" if show_details else f"`{o}`"
                for o in entry["options"]
            )
            rows.append(
                [f"`{entry['name']}`", entry["description"], options, _signature(entry)]
            )
        console.print(render_markdown_table(headers, rows))
        return

    for entry in entries:
        name: str = entry["name"]
        console.print(console.styled(name, bold=True))
        console.print("-" * len(name))
        console.print(f"- description:\t{entry['description']}")
        if entry["options"]:
            if show_details:
                options = ", ".join(f"{o['name']} {o['type']}" for o in entry["options"])
            else:
                options = ", ".join(entry["options"])
            console.print(f"- options:\t{options}")
        console.print(f"- signature:\t{_signature(entry)}")
        if show_details:
            console.print(f"- factory:\t{console.styled(entry['factory'], dim=True)}")
        console.print()


def _signature(entry: dict[str, Any]) -> str:
    return f"{entry['in']} -> {entry['out'] or '(sink)'}"
