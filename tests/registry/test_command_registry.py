# topmark:header:start
#
#   project      : MarcPipe
#   file         : test_command_registry.py
#   file_relpath : tests/registry/test_command_registry.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the command registry and the `register_command` decorator."""

from __future__ import annotations

import importlib
from types import ModuleType

import pytest

from marcpipe.config.types import FileCompression
from marcpipe.core.errors import ConfigurationError, RegistryError
from marcpipe.pipeline.batcher import StreamBatchLogger
from marcpipe.pipeline.encoders.marcxml import MarcXmlEncoder
from marcpipe.pipeline.sources import FileOpener
import marcpipe.registry.commands as commands_module
from marcpipe.registry import (
    Capability,
    CommandMeta,
    CommandRegistry,
    CommandSpec,
    register_command,
)
from tests.conftest import parametrize

BUILTIN_COMMANDS = (
    "batch-log",
    "decode-marcxml",
    "encode-marcxml",
    "normalize-utf8",
    "open-file",
    "read-lines",
    "record-lines",
    "write-text",
)


def test_builtin_commands_are_registered() -> None:
    for name in BUILTIN_COMMANDS:
        assert CommandRegistry.is_registered(name), name
    assert set(BUILTIN_COMMANDS) <= set(CommandRegistry.names())
    assert list(CommandRegistry.names()) == sorted(CommandRegistry.names())


def test_metadata_of_encoder() -> None:
    spec: CommandSpec = CommandRegistry.require("encode-marcxml")
    meta: CommandMeta = spec.meta

    assert meta.in_type is Capability.STREAM
    assert meta.out_type is Capability.TEXT
    assert meta.signature == "stream -> text"
    assert "emit_namespace" in meta.options
    assert meta.factory.endswith("create_marcxml_encoder")


def test_sink_signature() -> None:
    assert CommandRegistry.require("write-text").meta.signature == "text -> (sink)"


def test_mapping_is_read_only() -> None:
    mapping = CommandRegistry.as_mapping()
    with pytest.raises(TypeError):
        mapping["x"] = mapping["write-text"]  # type: ignore[index]


def test_unknown_command() -> None:
    assert CommandRegistry.get("no-such-command") is None
    with pytest.raises(RegistryError, match="Unknown command: no-such-command"):
        CommandRegistry.require("no-such-command")


def test_create_coerces_string_options() -> None:
    encoder = CommandRegistry.create("encode-marcxml", emit_namespace="no", pretty_print="Off")
    assert isinstance(encoder, MarcXmlEncoder)
    assert encoder.options.emit_namespace is False
    assert encoder.options.pretty_print is False

    batcher = CommandRegistry.create("batch-log", batch_size="25")
    assert isinstance(batcher, StreamBatchLogger)
    assert batcher.batch_size == 25

    opener = CommandRegistry.create("open-file", compression="GZIP")
    assert isinstance(opener, FileOpener)
    assert opener.compression is FileCompression.GZIP


def test_create_passes_typed_values_through() -> None:
    batcher = CommandRegistry.create("batch-log", batch_size=3)
    assert batcher.batch_size == 3


@parametrize(
    "name, options",
    [
        ("encode-marcxml", {"emit_namespace": "maybe"}),
        ("batch-log", {"batch_size": "ten"}),
        ("open-file", {"compression": "zip"}),
        ("encode-marcxml", {"indent": "2"}),
    ],
)
def test_invalid_options_raise(name: str, options: dict[str, str]) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        CommandRegistry.create(name, **options)
    assert exc_info.value.key == next(iter(options))


def test_register_and_unregister_custom_command() -> None:
    @register_command(
        name="test-identity",
        description="Passes text through.",
        in_type=Capability.TEXT,
        out_type=Capability.TEXT,
        options={"label": str},
    )
    def make_identity(label: str = "") -> object:
        return label

    try:
        assert CommandRegistry.is_registered("test-identity")
        assert CommandRegistry.create("test-identity", label="x") == "x"
        with pytest.raises(RegistryError, match="already registered"):
            register_command(
                name="test-identity",
                description="Duplicate.",
                in_type=Capability.TEXT,
                out_type=None,
            )(make_identity)
    finally:
        assert CommandRegistry.unregister("test-identity")
    assert not CommandRegistry.unregister("test-identity")
    assert not CommandRegistry.is_registered("test-identity")


@parametrize("name", ["", "Upper", "1abc", "dash-", "under_score", "two--dashes"])
def test_invalid_names_are_rejected(name: str) -> None:
    meta = CommandMeta(name=name, description="", in_type=Capability.TEXT, out_type=None)
    with pytest.raises(RegistryError, match="Invalid command name"):
        CommandRegistry.register(CommandSpec(meta=meta, factory=object))


def test_invalid_capability_is_rejected() -> None:
    meta = CommandMeta(name="bad-cap", description="", in_type="text", out_type=None)  # type: ignore[arg-type]
    with pytest.raises(RegistryError, match="input capability"):
        CommandRegistry.register(CommandSpec(meta=meta, factory=object))
    assert not CommandRegistry.is_registered("bad-cap")


def test_failed_import_leaves_registration_retryable(monkeypatch: pytest.MonkeyPatch) -> None:
    real_import = importlib.import_module

    def failing_import(name: str, package: str | None = None) -> ModuleType:
        if name == "marcpipe.pipeline.strings":
            raise ImportError(f"cannot import {name}")
        return real_import(name, package)

    monkeypatch.setattr(commands_module, "_registered_all", False)
    monkeypatch.setattr(commands_module.importlib, "import_module", failing_import)
    with pytest.raises(ImportError):
        commands_module.register_all_commands()
    assert commands_module._registered_all is False

    monkeypatch.setattr(commands_module.importlib, "import_module", real_import)
    commands_module.register_all_commands()
    assert commands_module._registered_all is True
