# topmark:header:start
#
#   project      : MarcPipe
#   file         : convert.py
#   file_relpath : src/marcpipe/cli/commands/convert.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""MarcPipe `convert` command.

Re-encodes a MARCXML file, e.g. to add or drop the ``marc:`` namespace or to
switch between pretty and compact output. The command builds the flow

    open-file | decode-marcxml | batch-log | encode-marcxml

from the command registry and attaches a text sink (stdout or a file).
Options come from the runtime defaults, then the config file, then the flags.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from marcpipe.cli.cli_types import EnumChoiceParam
from marcpipe.cli.errors import MarcpipeFileNotFoundError, to_cli_error
from marcpipe.config.io import discover_config_file
from marcpipe.config.logging import get_logger
from marcpipe.config.model import MutableConfig
from marcpipe.config.types import FileCompression
from marcpipe.core.errors import MarcpipeError
from marcpipe.pipeline.sinks import FileWriter, TextWriter
from marcpipe.registry.flows import build_flow

if TYPE_CHECKING:
    from marcpipe.cli.console import ConsoleLike
    from marcpipe.config.model import Config
    from marcpipe.pipeline.base import DefaultObjectReceiver
    from marcpipe.pipeline.batcher import StreamBatchLogger
    from marcpipe.registry.flows import Flow, StepLike

logger = get_logger(__name__)

STDIO_DASH = "-"


def resolve_config(config_path: Path | None, overrides: dict[str, Any]) -> Config:
    """Merge defaults, the config file and CLI overrides into a `Config`.

    Without ``--config``, ``marcpipe.toml`` (or a ``pyproject.toml`` with a
    ``[tool.marcpipe]`` table) in the working directory is used if present.

    Args:
        config_path (Path | None): Explicit config file.
        overrides (dict[str, Any]): CLI values; ``None`` means "inherit".

    Returns:
        Config: The frozen configuration.
    """
    if config_path is None:
        config_path = discover_config_file(Path.cwd())
    if config_path is not None:
        logger.info("Using config file %s", config_path)
    return MutableConfig.load_merged(config_path).apply_overrides(overrides).freeze()


def build_convert_steps(config: Config, *, from_stdin: bool) -> list[StepLike]:
    """Return the flow steps for a conversion.

    Args:
        config (Config): Effective configuration.
        from_stdin (bool): The input is an already open text stream.

    Returns:
        list[StepLike]: Command names with their options.
    """
    steps: list[StepLike] = []
    if not from_stdin:
        steps.append(
            ("open-file", {"compression": config.compression, "encoding": config.input_encoding})
        )
    steps.append("decode-marcxml")
    steps.append(("batch-log", {"batch_size": config.batch_size}))
    steps.append(("encode-marcxml", dataclasses.asdict(config.marcxml)))
    return steps


@click.command(
    name="convert",
    help="Re-encode a MARCXML file (use '-' for STDIN).",
)
@click.argument("input_path", metavar="INPUT", type=str)
@click.option(
    "-o",
    "--output",
    "output_path",
    type=str,
    default=None,
    help="Output file ('-' or omitted: STDOUT). Compression follows the suffix.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML config file (marcpipe.toml or pyproject.toml).",
)
@click.option(
    "--namespace/--no-namespace",
    "emit_namespace",
    default=None,
    help="Prefix elements with 'marc:' and declare the schema location.",
)
@click.option(
    "--omit-xml-declaration/--xml-declaration",
    "omit_xml_declaration",
    default=None,
    help="Skip or write the <?xml ...?> declaration.",
)
@click.option(
    "--pretty/--compact",
    "pretty_print",
    default=None,
    help="Indent with tabs and break lines, or write everything on one line.",
)
@click.option("--xml-version", "xml_version", default=None, help="XML version (1.0 or 1.1).")
@click.option("--xml-encoding", "xml_encoding", default=None, help="Output encoding label.")
@click.option(
    "--compression",
    "compression",
    type=EnumChoiceParam(FileCompression),
    default=None,
    help=f"Input compression ({', '.join(v.value for v in FileCompression)}).",
)
@click.option(
    "--batch-size",
    "batch_size",
    type=int,
    default=None,
    help="Records per progress message (shown with -v).",
)
def convert_command(
    *,
    input_path: str,
    output_path: str | None,
    config_path: Path | None,
    emit_namespace: bool | None,
    omit_xml_declaration: bool | None,
    pretty_print: bool | None,
    xml_version: str | None,
    xml_encoding: str | None,
    compression: FileCompression | None,
    batch_size: int | None,
) -> None:
    """Re-encode a MARCXML file.

    Raises:
        MarcpipeCliError: Subclass matching the failure (config, format, I/O).
    """
    ctx: click.Context = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    vlevel: int = int(ctx.obj.get("verbosity_level", 0))

    from_stdin: bool = input_path == STDIO_DASH
    if not from_stdin and not Path(input_path).is_file():
        raise MarcpipeFileNotFoundError(f"No such file: {input_path}")

    try:
        config: Config = resolve_config(
            config_path,
            {
                "emit_namespace": emit_namespace,
                "omit_xml_declaration": omit_xml_declaration,
                "pretty_print": pretty_print,
                "xml_version": xml_version,
                "xml_encoding": xml_encoding,
                "compression": compression,
                "batch_size": batch_size,
            },
        )
        flow: Flow = build_flow(build_convert_steps(config, from_stdin=from_stdin))
    except MarcpipeError as exc:
        raise to_cli_error(exc) from exc

    sink: DefaultObjectReceiver[str]
    if output_path is None or output_path == STDIO_DASH:
        sink = TextWriter()
    else:
        sink = FileWriter(output_path, encoding=config.marcxml.xml_encoding)
    flow.set_receiver(sink)

    try:
        if from_stdin:
            flow.process(click.get_text_stream("stdin"))
        else:
            flow.process(input_path)
        flow.close_stream()
    except (MarcpipeError, OSError, UnicodeError) as exc:
        logger.error("Conversion of %s failed: %s", input_path, exc)
        raise to_cli_error(exc) from exc
    finally:
        sink.close_stream()

    batcher: StreamBatchLogger = flow.stages[-2]
    total: int = batcher.batch_count * batcher.batch_size + batcher.record_count
    logger.info("Converted %d record(s) from %s", total, input_path)
    if vlevel > 0 and output_path not in (None, STDIO_DASH):
        console.print(f"Wrote {total} record(s) to {output_path}")
