# topmark:header:start
#
#   project      : MarcPipe
#   file         : model.py
#   file_relpath : src/marcpipe/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration model and merge policy.

This module defines:
    - `Config`: an immutable, runtime snapshot handed to pipeline builders.
    - `MutableConfig`: a mutable builder used while merging defaults, a config
      file and CLI overrides; it is frozen into `Config` and can be thawed back.

Precedence (lowest to highest): runtime defaults, config file, CLI overrides.
``None`` in an override layer means "inherit".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from marcpipe.config.io import (
    get_bool_value_or_none,
    get_int_value_or_none,
    get_string_value_or_none,
    get_table_value,
    load_defaults_dict,
    load_toml_dict,
)
from marcpipe.config.keys import Toml
from marcpipe.config.logging import get_logger
from marcpipe.config.options import MarcXmlOptions
from marcpipe.config.types import FileCompression
from marcpipe.core.errors import ConfigurationError

if TYPE_CHECKING:
    from marcpipe.config.logging import MarcpipeLogger
    from marcpipe.config.types import ArgsLike, TomlTable

logger: MarcpipeLogger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable runtime configuration for MarcPipe.

    Attributes:
        marcxml (MarcXmlOptions): Encoder output options.
        batch_size (int): Records per batch for progress logging.
        compression (FileCompression): Input compression.
        input_encoding (str): Text encoding of input files.
        config_files (tuple[Path | str, ...]): Sources merged into this snapshot.
    """

    marcxml: MarcXmlOptions
    batch_size: int
    compression: FileCompression
    input_encoding: str
    config_files: tuple[Path | str, ...]

    def thaw(self) -> MutableConfig:
        """Return a mutable copy of this configuration.

        Returns:
            MutableConfig: A builder initialized from this snapshot.
        """
        return MutableConfig(
            emit_namespace=self.marcxml.emit_namespace,
            omit_xml_declaration=self.marcxml.omit_xml_declaration,
            xml_version=self.marcxml.xml_version,
            xml_encoding=self.marcxml.xml_encoding,
            pretty_print=self.marcxml.pretty_print,
            batch_size=self.batch_size,
            compression=self.compression,
            input_encoding=self.input_encoding,
            config_files=list(self.config_files),
        )


@dataclass
class MutableConfig:
    """Mutable configuration builder.

    Every field may be ``None`` while layers are merged; `freeze` fills the
    remaining gaps from the runtime defaults and validates the result.
    """

    emit_namespace: bool | None = None
    omit_xml_declaration: bool | None = None
    xml_version: str | None = None
    xml_encoding: str | None = None
    pretty_print: bool | None = None
    batch_size: int | None = None
    compression: FileCompression | None = None
    input_encoding: str | None = None
    config_files: list[Path | str] = field(default_factory=list)

    @classmethod
    def from_toml_dict(cls, data: TomlTable, *, source: Path | str) -> MutableConfig:
        """Build a layer from a parsed TOML table.

        Args:
            data (TomlTable): Parsed configuration.
            source (Path | str): Provenance recorded in ``config_files``.

        Returns:
            MutableConfig: The configuration layer.

        Raises:
            ConfigurationError: If the compression name is unknown.
        """
        marcxml: TomlTable = get_table_value(data, Toml.SECTION_MARCXML)
        batch: TomlTable = get_table_value(data, Toml.SECTION_BATCH)
        input_table: TomlTable = get_table_value(data, Toml.SECTION_INPUT)

        compression_name: str | None = get_string_value_or_none(
            input_table, Toml.KEY_COMPRESSION
        )
        compression: FileCompression | None = FileCompression.from_name(compression_name)
        if compression_name is not None and compression is None:
            raise ConfigurationError(
                f"Unknown compression {compression_name!r} in {source}",
                key=Toml.KEY_COMPRESSION,
            )

        return cls(
            emit_namespace=get_bool_value_or_none(marcxml, Toml.KEY_EMIT_NAMESPACE),
            omit_xml_declaration=get_bool_value_or_none(marcxml, Toml.KEY_OMIT_XML_DECLARATION),
            xml_version=get_string_value_or_none(marcxml, Toml.KEY_XML_VERSION),
            xml_encoding=get_string_value_or_none(marcxml, Toml.KEY_XML_ENCODING),
            pretty_print=get_bool_value_or_none(marcxml, Toml.KEY_PRETTY_PRINT),
            batch_size=get_int_value_or_none(batch, Toml.KEY_BATCH_SIZE),
            compression=compression,
            input_encoding=get_string_value_or_none(input_table, Toml.KEY_ENCODING),
            config_files=[source],
        )

    @classmethod
    def from_defaults(cls) -> MutableConfig:
        """Return a builder holding the runtime defaults.

        Returns:
            MutableConfig: The defaults layer.
        """
        return cls.from_toml_dict(load_defaults_dict(), source="<defaults>")

    @classmethod
    def from_file(cls, path: Path) -> MutableConfig:
        """Return a builder for one TOML config file.

        Args:
            path (Path): ``marcpipe.toml`` or ``pyproject.toml``.

        Returns:
            MutableConfig: The file layer.
        """
        return cls.from_toml_dict(load_toml_dict(path), source=path)

    @classmethod
    def load_merged(cls, config_path: Path | None = None) -> MutableConfig:
        """Return defaults merged with an optional config file.

        Args:
            config_path (Path | None): Config file to merge over the defaults.

        Returns:
            MutableConfig: The merged builder.
        """
        merged: MutableConfig = cls.from_defaults()
        if config_path is not None:
            merged = merged.merge_with(cls.from_file(config_path))
        return merged

    def merge_with(self, other: MutableConfig) -> MutableConfig:
        """Return a new builder where set values of ``other`` win.

        Args:
            other (MutableConfig): Higher-precedence layer.

        Returns:
            MutableConfig: The merged builder (``self`` is not modified).
        """
        return MutableConfig(
            emit_namespace=_pick(other.emit_namespace, self.emit_namespace),
            omit_xml_declaration=_pick(other.omit_xml_declaration, self.omit_xml_declaration),
            xml_version=_pick(other.xml_version, self.xml_version),
            xml_encoding=_pick(other.xml_encoding, self.xml_encoding),
            pretty_print=_pick(other.pretty_print, self.pretty_print),
            batch_size=_pick(other.batch_size, self.batch_size),
            compression=_pick(other.compression, self.compression),
            input_encoding=_pick(other.input_encoding, self.input_encoding),
            config_files=[*self.config_files, *other.config_files],
        )

    def apply_overrides(self, args: ArgsLike) -> MutableConfig:
        """Apply CLI/API overrides in place.

        Keys match the attribute names; missing keys and ``None`` values inherit.

        Args:
            args (ArgsLike): Mapping of override values.

        Returns:
            MutableConfig: ``self``, for chaining.
        """
        for name in (
            "emit_namespace",
            "omit_xml_declaration",
            "xml_version",
            "xml_encoding",
            "pretty_print",
            "batch_size",
            "compression",
            "input_encoding",
        ):
            value = args.get(name)
            if value is not None:
                logger.debug("Override %s=%r", name, value)
                setattr(self, name, value)
        return self

    def freeze(self) -> Config:
        """Validate and return an immutable snapshot.

        Returns:
            Config: The runtime configuration.

        Raises:
            ConfigurationError: If a value is invalid.
        """
        defaults: MutableConfig = MutableConfig.from_defaults()
        batch_size: int = _pick(self.batch_size, defaults.batch_size) or 0
        if batch_size <= 0:
            raise ConfigurationError(
                f"Batch size must be a positive integer (got {batch_size})",
                key=Toml.KEY_BATCH_SIZE,
            )
        marcxml = MarcXmlOptions(
            emit_namespace=bool(_pick(self.emit_namespace, defaults.emit_namespace)),
            omit_xml_declaration=bool(
                _pick(self.omit_xml_declaration, defaults.omit_xml_declaration)
            ),
            xml_version=str(_pick(self.xml_version, defaults.xml_version)),
            xml_encoding=str(_pick(self.xml_encoding, defaults.xml_encoding)),
            pretty_print=bool(_pick(self.pretty_print, defaults.pretty_print)),
        )
        return Config(
            marcxml=marcxml,
            batch_size=batch_size,
            compression=_pick(self.compression, defaults.compression) or FileCompression.AUTO,
            input_encoding=str(_pick(self.input_encoding, defaults.input_encoding)),
            config_files=tuple(self.config_files),
        )


def _pick(preferred: T | None, fallback: T | None) -> T | None:
    return fallback if preferred is None else preferred
