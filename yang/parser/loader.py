"""Front-end: turn human-authored YAML or Markdown into planning requests.

YAML input is a list of concept mappings, or a mapping with a ``concepts``
list.  Markdown input is prose with fenced ``yaml`` blocks; every such block
is parsed as YAML and the results are concatenated in document order.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from yang.codegen.planning.models import PlanningRequest
from yang.errors import MalformedInputError, UnsupportedExtensionError
from yang.utils import console


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SUPPORTED_EXTENSIONS: tuple[str, ...] = (".md", ".yml", ".yaml")
DEFAULT_INPUT_STEM = "yin"

_YAML_FENCE_PATTERN = re.compile(
    r"^```ya?ml[ \t]*\n(.*?)^```[ \t]*$", re.MULTILINE | re.DOTALL
)

# input keys that differ from the request field names
_FIELD_ALIASES = {"id": "numeric_id", "scope": "target_scope"}


# ---------------------------------------------------------------------------
# Input discovery
# ---------------------------------------------------------------------------


def find_input(specified: Optional[str | Path] = None, search_dir: Path = Path(".")) -> Path:
    """Locate the input file.

    An explicitly specified file must exist.  Otherwise ``yin.md``,
    ``yin.yml`` and ``yin.yaml`` are tried in that order inside *search_dir*.

    Raises:
        FileNotFoundError: No usable input file was found.
    """
    if specified is not None:
        path = Path(specified)
        if not path.is_file():
            raise FileNotFoundError(f"Specified input file was not found at {path}")
        console.print(f"Using specified input file at {path}")
        return path

    for extension in SUPPORTED_EXTENSIONS:
        candidate = search_dir / f"{DEFAULT_INPUT_STEM}{extension}"
        if candidate.is_file():
            console.print(f"Using default input file at {candidate}")
            return candidate
    raise FileNotFoundError(
        f"No input file was specified, and no default inputs were found in {search_dir.resolve()}"
    )


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _to_request(entry: Any, position: int) -> PlanningRequest:
    if not isinstance(entry, dict):
        raise MalformedInputError(f"Concept #{position} is not a mapping: {entry!r}")
    if not entry.get("name"):
        raise MalformedInputError(f"Concept #{position} has no name")
    fields = {_FIELD_ALIASES.get(key, key): value for key, value in entry.items()}
    try:
        return PlanningRequest(**fields)
    except ValidationError as exc:
        raise MalformedInputError(f"Concept {entry['name']!r} is invalid: {exc}") from exc


def parse_yaml(text: str) -> list[PlanningRequest]:
    """Parse a YAML document into planning requests."""
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise MalformedInputError(f"Invalid YAML: {exc}") from exc

    if document is None:
        return []
    if isinstance(document, dict):
        document = document.get("concepts") or []
    if not isinstance(document, list):
        raise MalformedInputError("Expected a list of concepts")
    return [_to_request(entry, position) for position, entry in enumerate(document, start=1)]


def parse_markdown(text: str) -> list[PlanningRequest]:
    """Parse every fenced ``yaml`` block in a Markdown document."""
    requests: list[PlanningRequest] = []
    for block in _YAML_FENCE_PATTERN.findall(text):
        requests.extend(parse_yaml(block))
    return requests


def load_requests(path: str | Path) -> list[PlanningRequest]:
    """Read and parse an input file, dispatching on its extension.

    Raises:
        UnsupportedExtensionError: The file is neither Markdown nor YAML.
        MalformedInputError: The file is not UTF-8, or a concept entry is
            missing its name or is invalid.
    """
    path = Path(path)
    extension = path.suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedExtensionError(str(path), SUPPORTED_EXTENSIONS)

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedInputError(f"Input is not valid UTF-8 ({path}): {exc}") from exc
    if extension == ".md":
        return parse_markdown(text)
    return parse_yaml(text)
