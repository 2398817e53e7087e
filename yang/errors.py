"""Exceptions raised by the yang code generator.

Every error aborts generation for the current run.  Nothing here is retried:
planning and rendering are deterministic, so re-running only helps after the
input has been fixed.
"""

from __future__ import annotations


class YangError(Exception):
    """Base class for all code generation failures."""


class MalformedInputError(YangError):
    """A planning request is missing a required field, such as its name."""


class UnsupportedExtensionError(YangError):
    """An input file has a type the front-end cannot parse."""

    def __init__(self, path: str, supported: tuple[str, ...]) -> None:
        self.path = path
        self.supported = supported
        super().__init__(
            f"Cannot parse {path}: expected one of {', '.join(supported)}"
        )


class IdentifierExhaustionError(YangError):
    """The concept id counter would overflow its integer width."""


class RenderInconsistencyError(YangError):
    """A composite fragment was asked to render with no usable width left."""

    def __init__(self, fragment: str, width: int) -> None:
        self.fragment = fragment
        self.width = width
        super().__init__(
            f"{fragment} has an effective width of {width} after indentation"
        )
