# topmark:header:start
#
#   project      : MarcPipe
#   file         : markdown.py
#   file_relpath : src/marcpipe/cli/markdown.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Markdown rendering helpers (Click-free)."""

from __future__ import annotations

from typing import Sequence


def render_markdown_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Render a GitHub-flavoured Markdown table with left-aligned, padded columns.

    Args:
        headers (Sequence[str]): Column headers.
        rows (Sequence[Sequence[str]]): Rows, each as long as ``headers``.

    Returns:
        str: The table, ending with a newline (empty when there are no headers).

    Raises:
        ValueError: If a row length differs from the number of headers.
    """
    if not headers:
        return ""
    if any(len(row) != len(headers) for row in rows):
        raise ValueError("All rows must have the same number of columns as headers")

    widths: list[int] = [
        max([len(header), *(len(str(row[i])) for row in rows)]) for i, header in enumerate(headers)
    ]

    def _line(cells: Sequence[str]) -> str:
        return "| " + " | ".join(f"{cell:<{widths[i]}}" for i, cell in enumerate(cells)) + " |"

    lines: list[str] = [
        _line(headers),
        _line(["-" * width for width in widths]),
        *(_line([str(cell) for cell in row]) for row in rows),
    ]
    return "\n".join(lines) + "\n"
