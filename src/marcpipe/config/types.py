# topmark:header:start
#
#   project      : MarcPipe
#   file         : types.py
#   file_relpath : src/marcpipe/config/types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Lightweight config types and aliases.

Kept free of MarcPipe imports beyond logging so that low-level modules
(sources, sinks) can depend on it without import cycles.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

# Generic mapping accepted by config loaders (CLI namespaces and API dicts alike).
ArgsLike = Mapping[str, Any]

# Plain-Python shape of a parsed TOML table.
TomlTable = dict[str, Any]


class FileCompression(str, Enum):
    """Compression applied to input and output files."""

    AUTO = "auto"
    NONE = "none"
    GZIP = "gzip"
    BZIP2 = "bzip2"
    XZ = "xz"

    @classmethod
    def from_name(cls, key_name: str | None) -> FileCompression | None:
        """Find the FileCompression member by its case-insensitive name or value.

        Args:
            key_name (str | None): The member name or value (e.g. "gzip") or None.

        Returns:
            FileCompression | None: The matching member or None if the key is None or unmatched.
        """
        if key_name is None:
            return None
        member: FileCompression | None = cls.__members__.get(key_name.upper())
        if member is not None:
            return member
        for candidate in cls:
            if candidate.value == key_name.lower():
                return candidate
        return None
