# topmark:header:start
#
#   project      : MarcPipe
#   file         : __main__.py
#   file_relpath : src/marcpipe/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running MarcPipe via ``python -m marcpipe``.

Delegates to :func:`marcpipe.cli.main.cli`, the same entry point used by the
``marcpipe`` console script.

Examples:
    Re-encode a MARCXML file without the namespace prefix::

        python -m marcpipe convert records.xml --no-namespace
"""

from __future__ import annotations

from marcpipe.cli.main import cli

if __name__ == "__main__":
    cli()
