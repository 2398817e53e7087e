"""Format documentation text as rustdoc comment blocks."""

from __future__ import annotations

import textwrap

ITEM_MARKER = "///"
PARENT_MARKER = "//!"


def _comment_block(documentation: str, line_width: int, marker: str) -> str:
    # one extra column for the space after the marker
    text_width = line_width - len(marker) - 1
    if text_width <= 0:
        raise ValueError(f"line width {line_width} leaves no room for documentation")

    lines: list[str] = []
    for paragraph in documentation.strip().split("\n"):
        wrapped = textwrap.wrap(
            paragraph,
            width=text_width,
            break_long_words=False,
            break_on_hyphens=False,
        )
        if not wrapped:
            lines.append(marker)
            continue
        lines.extend(f"{marker} {line.rstrip()}" for line in wrapped)
    return "\n".join(lines)


def into_docstring(documentation: str, line_width: int) -> str:
    """Break documentation into a ``///`` comment block no wider than *line_width*."""
    return _comment_block(documentation, line_width, ITEM_MARKER)


def into_parent_docstring(documentation: str, line_width: int) -> str:
    """Break documentation into a ``//!`` block documenting the enclosing item."""
    return _comment_block(documentation, line_width, PARENT_MARKER)
