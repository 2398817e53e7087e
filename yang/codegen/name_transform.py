"""Conversions between the casing conventions used in generated code.

A concept name is stored once as a list of words and rendered as a type name
(``DNSResolver``), a display name (``dns-resolver``) or a file/module name
(``dns_resolver``) depending on where it ends up.
"""

from __future__ import annotations

from dataclasses import dataclass, field


def _case_change(text: str) -> int:
    """Index of the first character whose case differs from the first one."""
    if len(text) < 2:
        return len(text)
    initial_lower = text[0].islower()
    for index, char in enumerate(text[1:], start=1):
        if char.islower() != initial_lower:
            return index
    return len(text)


@dataclass
class NameTransform:
    """A name split into its component words."""

    words: list[str] = field(default_factory=list)

    # -- Parsing -----------------------------------------------------------

    @classmethod
    def from_camel_case(cls, name: str) -> "NameTransform":
        """Split a capitalized-concatenation name at uppercase boundaries.

        A run of uppercase letters is kept together as an acronym, except for
        its last letter when that letter starts the next word::

            NameTransform.from_camel_case("DNSResolver").words -> ["DNS", "Resolver"]
            NameTransform.from_camel_case("aRealVariable").words -> ["a", "Real", "Variable"]
        """
        words: list[str] = []
        remainder = name
        starting_lowercase = bool(name) and name[0].islower()
        while remainder:
            boundary = _case_change(remainder)
            if starting_lowercase:
                # leading lowercase word goes in as a single unit
                starting_lowercase = False
            elif boundary == len(remainder):
                pass
            elif boundary > 1:
                # last capital of an acronym belongs to the next word
                boundary -= 1
            elif boundary == 1:
                boundary += _case_change(remainder[1:])
            words.append(remainder[:boundary])
            remainder = remainder[boundary:]
        return cls(words=words)

    @classmethod
    def from_snake_case(cls, name: str) -> "NameTransform":
        return cls(words=[word for word in name.split("_") if word])

    @classmethod
    def from_kebab_case(cls, name: str) -> "NameTransform":
        return cls(words=[word for word in name.split("-") if word])

    @classmethod
    def parse(cls, name: str) -> "NameTransform":
        """Guess the casing of *name* and parse it accordingly."""
        if "_" in name:
            return cls.from_snake_case(name)
        if "-" in name:
            return cls.from_kebab_case(name)
        return cls.from_camel_case(name)

    # -- Rendering ---------------------------------------------------------

    def to_camel_case(self) -> str:
        """Type-name form: every word capitalized, acronyms preserved."""
        return "".join(word[:1].upper() + word[1:] for word in self.words)

    def to_snake_case(self) -> str:
        """File/module form: lowercase words joined by underscores."""
        return "_".join(word.lower() for word in self.words)

    def to_kebab_case(self) -> str:
        """Display form: lowercase words joined by hyphens."""
        return "-".join(word.lower() for word in self.words)


def to_type_name(name: str) -> str:
    return NameTransform.parse(name).to_camel_case()


def to_display_name(name: str) -> str:
    return NameTransform.parse(name).to_kebab_case()


def to_file_name(name: str) -> str:
    return NameTransform.parse(name).to_snake_case()
