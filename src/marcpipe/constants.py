# topmark:header:start
#
#   project      : MarcPipe
#   file         : constants.py
#   file_relpath : src/marcpipe/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""MarcPipe Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version
from typing import Final

MARCPIPE_VERSION: str = get_version("marcpipe")

# Local configuration file looked up in the working directory:
DEFAULT_TOML_CONFIG_NAME: Final[str] = "marcpipe.toml"
PYPROJECT_TOML_NAME: Final[str] = "pyproject.toml"

# Environment variable consulted for the internal log level:
LOG_LEVEL_ENV_VAR: Final[str] = "MARCPIPE_LOG_LEVEL"
