# topmark:header:start
#
#   project      : MarcPipe
#   file         : __init__.py
#   file_relpath : src/marcpipe/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Subcommands of the MarcPipe CLI."""
