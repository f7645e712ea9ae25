# topmark:header:start
#
#   project      : MarcPipe
#   file         : io.py
#   file_relpath : src/marcpipe/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load TOML configuration sources and extract typed values.

Parsing is done with `tomlkit` and returned as plain `dict` structures, so the
rest of the config layer never sees tomlkit container types.

Two families of getters exist:
- *Unchecked* getters return defaults and only emit **debug** logs.
- `warn_unknown_keys` logs a **warning** for keys outside the known schema so
  typos are surfaced without failing the run.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from marcpipe.config.keys import Toml
from marcpipe.config.logging import get_logger
from marcpipe.constants import DEFAULT_TOML_CONFIG_NAME, PYPROJECT_TOML_NAME
from marcpipe.core.errors import ConfigurationError

if TYPE_CHECKING:
    from marcpipe.config.logging import MarcpipeLogger
    from marcpipe.config.types import TomlTable

logger: MarcpipeLogger = get_logger(__name__)


def load_defaults_dict() -> TomlTable:
    """Return MarcPipe's **runtime defaults** as a Python dict.

    This function performs no I/O. The returned value is a new dict so callers
    can mutate it safely.

    Returns:
        TomlTable: A TOML-table-compatible dict containing the runtime defaults.
    """
    return {
        Toml.SECTION_MARCXML: {
            Toml.KEY_EMIT_NAMESPACE: True,
            Toml.KEY_OMIT_XML_DECLARATION: False,
            Toml.KEY_XML_VERSION: "1.0",
            Toml.KEY_XML_ENCODING: "UTF-8",
            Toml.KEY_PRETTY_PRINT: True,
        },
        Toml.SECTION_BATCH: {
            Toml.KEY_BATCH_SIZE: 1000,
        },
        Toml.SECTION_INPUT: {
            Toml.KEY_COMPRESSION: "auto",
            Toml.KEY_ENCODING: "utf-8",
        },
    }


def load_toml_dict(path: Path) -> TomlTable:
    """Parse a TOML file into a plain dict.

    For ``pyproject.toml`` files only the ``[tool.marcpipe]`` table is returned
    (an empty dict when absent).

    Args:
        path (Path): Path to a ``marcpipe.toml`` or ``pyproject.toml`` file.

    Returns:
        TomlTable: The parsed (and, for pyproject files, unwrapped) table.

    Raises:
        ConfigurationError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc

    try:
        data: dict[str, Any] = tomlkit.parse(text).unwrap()
    except TomlkitParseError as exc:
        raise ConfigurationError(f"Invalid TOML in {path}: {exc}") from exc

    if path.name == PYPROJECT_TOML_NAME:
        tool = data.get(Toml.SECTION_TOOL, {})
        section = tool.get(Toml.SECTION_TOOL_MARCPIPE, {}) if isinstance(tool, dict) else {}
        if not isinstance(section, dict):
            raise ConfigurationError(
                f"[{Toml.SECTION_TOOL}.{Toml.SECTION_TOOL_MARCPIPE}] in {path} is not a table"
            )
        data = section

    logger.debug("Loaded config from %s: %s", path, data)
    warn_unknown_keys(data, source=str(path))
    return data


def discover_config_file(start: Path) -> Path | None:
    """Return the local config file for a working directory, if any.

    ``marcpipe.toml`` wins over a ``pyproject.toml`` that carries a
    ``[tool.marcpipe]`` table. Parent directories are not searched.

    Args:
        start (Path): Directory to look in.

    Returns:
        Path | None: The config file path, or None when nothing applies.
    """
    candidate: Path = start / DEFAULT_TOML_CONFIG_NAME
    if candidate.is_file():
        return candidate
    pyproject: Path = start / PYPROJECT_TOML_NAME
    if pyproject.is_file():
        try:
            doc = tomlkit.parse(pyproject.read_text(encoding="utf-8"))
        except (OSError, TomlkitParseError) as exc:
            logger.debug("Ignoring unreadable %s: %s", pyproject, exc)
            return None
        tool = doc.get(Toml.SECTION_TOOL)
        if tool is not None and Toml.SECTION_TOOL_MARCPIPE in tool:
            return pyproject
    return None


def warn_unknown_keys(data: TomlTable, *, source: str) -> None:
    """Log a warning for every section or key outside the known schema.

    Args:
        data (TomlTable): Parsed configuration table.
        source (str): Human-readable origin used in the warning.
    """
    for section, table in data.items():
        known: frozenset[str] | None = Toml.KNOWN_KEYS.get(section)
        if known is None:
            logger.warning("Unknown config section [%s] in %s", section, source)
            continue
        if not isinstance(table, dict):
            logger.warning("Config section [%s] in %s is not a table", section, source)
            continue
        for key in table:
            if key not in known:
                logger.warning("Unknown config key '%s' in [%s] (%s)", key, section, source)


def get_table_value(table: TomlTable, key: str) -> TomlTable:
    """Extract a sub-table from a TOML table.

    Args:
        table (TomlTable): Table to query.
        key (str): Key of the sub-table.

    Returns:
        TomlTable: The sub-table, or an empty dict if missing or not a table.
    """
    value: Any | None = table.get(key)
    if isinstance(value, dict):
        return value
    if value is not None:
        logger.debug("Value for '%s' is not a table (%r), ignoring", key, value)
    return {}


def get_string_value_or_none(table: TomlTable, key: str) -> str | None:
    """Extract an optional string value from a TOML table.

    Scalars (``int``, ``float``, ``bool``) are coerced with ``str(...)``.

    Args:
        table (TomlTable): Table to query.
        key (str): Key to extract.

    Returns:
        str | None: The extracted or coerced string, or None when absent or not coercible.
    """
    value: Any | None = table.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)):
        return str(value)
    logger.debug("Cannot coerce %r to string, returning None", value)
    return None


def get_bool_value_or_none(table: TomlTable, key: str) -> bool | None:
    """Extract an optional boolean value from a TOML table.

    Args:
        table (TomlTable): Table to query.
        key (str): Key to extract.

    Returns:
        bool | None: The boolean, ``bool(value)`` for integers, or None when absent or
            not coercible.
    """
    value: Any | None = table.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    logger.debug("Cannot coerce %r to bool, returning None", value)
    return None


def get_int_value_or_none(table: TomlTable, key: str) -> int | None:
    """Extract an optional integer value from a TOML table.

    Args:
        table (TomlTable): Table to query.
        key (str): Key to extract.

    Returns:
        int | None: The integer, or None when absent or not an integer.
    """
    value: Any | None = table.get(key)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    logger.debug("Cannot coerce %r to int, returning None", value)
    return None
