# topmark:header:start
#
#   project      : MarcPipe
#   file         : __init__.py
#   file_relpath : src/marcpipe/registry/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Registry of named pipeline commands and the flow builder.

Typical usage:
    ```python
    from marcpipe.registry import CommandRegistry, build_flow

    for meta in CommandRegistry.iter_meta():
        print(meta.name, meta.signature)

    flow = build_flow([("decode-marcxml", {}), ("encode-marcxml", {"pretty_print": "false"})])
    ```
"""

from __future__ import annotations

from marcpipe.registry.commands import (
    Capability,
    CommandMeta,
    CommandRegistry,
    CommandSpec,
    register_all_commands,
    register_command,
)
from marcpipe.registry.flows import Flow, build_flow

__all__ = [
    "Capability",
    "CommandMeta",
    "CommandRegistry",
    "CommandSpec",
    "Flow",
    "build_flow",
    "register_all_commands",
    "register_command",
]
