# topmark:header:start
#
#   project      : MarcPipe
#   file         : __init__.py
#   file_relpath : src/marcpipe/core/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Core, dependency-free building blocks (errors and MARC 21 event names)."""
