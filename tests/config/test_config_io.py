# topmark:header:start
#
#   project      : MarcPipe
#   file         : test_config_io.py
#   file_relpath : tests/config/test_config_io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for TOML loading, discovery and typed getters."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from marcpipe.config.io import (
    discover_config_file,
    get_bool_value_or_none,
    get_int_value_or_none,
    get_string_value_or_none,
    get_table_value,
    load_defaults_dict,
    load_toml_dict,
)
from marcpipe.config.keys import Toml
from marcpipe.core.errors import ConfigurationError
from tests.conftest import parametrize


def test_defaults_are_fresh_copies() -> None:
    first = load_defaults_dict()
    first[Toml.SECTION_MARCXML][Toml.KEY_PRETTY_PRINT] = False
    assert load_defaults_dict()[Toml.SECTION_MARCXML][Toml.KEY_PRETTY_PRINT] is True


def test_load_marcpipe_toml(tmp_path: Path) -> None:
    path: Path = tmp_path / "marcpipe.toml"
    path.write_text('[marcxml]\nemit_namespace = false\n\n[batch]\nsize = 10\n', encoding="utf-8")

    data = load_toml_dict(path)

    assert data == {"marcxml": {"emit_namespace": False}, "batch": {"size": 10}}
    assert type(data["marcxml"]) is dict


def test_pyproject_is_unwrapped(tmp_path: Path) -> None:
    path: Path = tmp_path / "pyproject.toml"
    path.write_text(
        '[project]\nname = "x"\n\n[tool.marcpipe.marcxml]\npretty_print = false\n',
        encoding="utf-8",
    )

    assert load_toml_dict(path) == {"marcxml": {"pretty_print": False}}


def test_pyproject_without_tool_table_is_empty(tmp_path: Path) -> None:
    path: Path = tmp_path / "pyproject.toml"
    path.write_text('[project]\nname = "x"\n', encoding="utf-8")
    assert load_toml_dict(path) == {}


def test_invalid_toml_raises(tmp_path: Path) -> None:
    path: Path = tmp_path / "marcpipe.toml"
    path.write_text("[marcxml\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Invalid TOML"):
        load_toml_dict(path)


def test_unreadable_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Cannot read"):
        load_toml_dict(tmp_path / "absent.toml")


def test_unknown_keys_warn(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path: Path = tmp_path / "marcpipe.toml"
    path.write_text("[marcxml]\npretty = true\n\n[output]\nx = 1\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        load_toml_dict(path)

    messages: str = caplog.text
    assert "Unknown config key 'pretty' in [marcxml]" in messages
    assert "Unknown config section [output]" in messages


def test_discovery_prefers_marcpipe_toml(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.marcpipe]\n", encoding="utf-8")
    assert discover_config_file(tmp_path) == tmp_path / "pyproject.toml"

    (tmp_path / "marcpipe.toml").write_text("", encoding="utf-8")
    assert discover_config_file(tmp_path) == tmp_path / "marcpipe.toml"


def test_discovery_ignores_unrelated_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.black]\n", encoding="utf-8")
    assert discover_config_file(tmp_path) is None


def test_discovery_in_empty_directory(tmp_path: Path) -> None:
    assert discover_config_file(tmp_path) is None


@parametrize(
    "value, expected",
    [("x", "x"), (1, "1"), (1.5, "1.5"), (None, None), ([1], None)],
)
def test_get_string_value_or_none(value: object, expected: str | None) -> None:
    assert get_string_value_or_none({"k": value}, "k") == expected


@parametrize("value, expected", [(True, True), (0, False), ("yes", None), (None, None)])
def test_get_bool_value_or_none(value: object, expected: bool | None) -> None:
    assert get_bool_value_or_none({"k": value}, "k") is expected


@parametrize("value, expected", [(5, 5), (" 12 ", 12), (True, None), ("x", None)])
def test_get_int_value_or_none(value: object, expected: int | None) -> None:
    assert get_int_value_or_none({"k": value}, "k") == expected


def test_get_table_value_ignores_scalars() -> None:
    assert get_table_value({"t": 1}, "t") == {}
    assert get_table_value({"t": {"a": 1}}, "t") == {"a": 1}
    assert get_table_value({}, "t") == {}
