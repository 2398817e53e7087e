"""Text-level finishing passes over fully rendered code.

Each pass is total and idempotent: running it on its own output changes
nothing, so passes can be combined and re-applied freely.
"""

from __future__ import annotations

import textwrap

from yang.config import CodegenConfig

AUTOGENERATION_MARKER = "// AUTOGENERATED CODE -- DO NOT EDIT"
FMT_SKIP_MARKER = "#![rustfmt::skip]\n#![allow(unused_attributes)]"
INDENT_UNIT = 4


# ---------------------------------------------------------------------------
# Indentation
# ---------------------------------------------------------------------------


def count_indent(line: str) -> int:
    """Number of leading spaces on *line*."""
    return len(line) - len(line.lstrip(" "))


def add_indent(indent: int, line: str) -> str:
    """Indent a single line, leaving blank lines empty."""
    if not line.strip():
        return ""
    return " " * indent + line


def reindent(text: str, depth: int, unit: int = INDENT_UNIT) -> str:
    """Strip the common leading whitespace of *text* and indent it *depth* levels.

    Used when a block authored at one nesting level is spliced into a deeper
    one.
    """
    dedented = textwrap.dedent(text)
    return "\n".join(add_indent(depth * unit, line) for line in dedented.split("\n"))


# ---------------------------------------------------------------------------
# Autogeneration marking
# ---------------------------------------------------------------------------


def _is_unmarked_line(stripped: str) -> bool:
    # comments (the marker included) and attributes are left alone
    return not stripped or stripped.startswith("//") or stripped.startswith("#")


def add_autogeneration_comments(code: str) -> str:
    """Mark every generated line of code as autogenerated.

    Closing-brace lines get the marker as a trailing comment.  Every other
    line of code gets a marker line above it at the same indentation.  Blank
    lines, comments and attributes are kept as they are.
    """
    result: list[str] = []
    for line in code.split("\n"):
        stripped = line.strip()
        if _is_unmarked_line(stripped) or stripped.endswith(AUTOGENERATION_MARKER):
            result.append(line)
            continue
        if stripped.startswith("}"):
            result.append(f"{line} {AUTOGENERATION_MARKER}")
            continue
        marker_line = " " * count_indent(line) + AUTOGENERATION_MARKER
        if not result or result[-1] != marker_line:
            result.append(marker_line)
        result.append(line)
    return "\n".join(result)


# ---------------------------------------------------------------------------
# Formatter skips
# ---------------------------------------------------------------------------


def add_fmt_skips(code: str) -> str:
    """Prefix non-empty code with the rustfmt skip directives and a blank line."""
    if not code.strip() or code.startswith(FMT_SKIP_MARKER):
        return code
    return f"{FMT_SKIP_MARKER}\n\n{code}"


def post_process_generation(code: str, options: CodegenConfig) -> str:
    """Apply the finishing passes selected by *options*.

    Release builds are left untouched.  Formatter skips are only added to code
    that is also marked as autogenerated.
    """
    if options.release:
        return code
    formatted = code
    if options.comment_autogen and options.add_fmt_skips:
        formatted = add_fmt_skips(formatted)
    if options.comment_autogen:
        formatted = add_autogeneration_comments(formatted)
    return formatted
