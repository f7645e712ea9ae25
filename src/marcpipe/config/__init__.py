# topmark:header:start
#
#   project      : MarcPipe
#   file         : __init__.py
#   file_relpath : src/marcpipe/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration layer: options, TOML loading, merge policy and logging.

Public re-exports:
    - `Config` / `MutableConfig`: immutable snapshot and its builder.
    - `MarcXmlOptions`: encoder output options.
    - `FileCompression`: input/output compression selector.
"""

from __future__ import annotations

from marcpipe.config.model import Config, MutableConfig
from marcpipe.config.options import MarcXmlOptions
from marcpipe.config.types import FileCompression

__all__ = [
    "Config",
    "FileCompression",
    "MarcXmlOptions",
    "MutableConfig",
]
