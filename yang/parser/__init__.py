"""Yang input parser.

Reads concept definitions from YAML files or from ``yaml`` blocks inside
Markdown documents.

Usage::

    from yang.parser import find_input, load_requests

    requests = load_requests(find_input())
"""

from yang.parser.loader import (
    SUPPORTED_EXTENSIONS,
    find_input,
    load_requests,
    parse_markdown,
    parse_yaml,
)

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "find_input",
    "load_requests",
    "parse_markdown",
    "parse_yaml",
]
