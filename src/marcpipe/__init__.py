# topmark:header:start
#
#   project      : MarcPipe
#   file         : __init__.py
#   file_relpath : src/marcpipe/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""MarcPipe package.

MarcPipe is a push-based streaming pipeline for bibliographic records. Stages
exchange structural events (record, entity, literal) and the MARCXML encoder
turns them into well-formed, optionally pretty-printed MARCXML. A small CLI
and a command registry make the stages composable from the shell.
"""

from __future__ import annotations
