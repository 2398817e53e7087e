"""Read interface onto the concept graph, plus an in-memory implementation.

The planner asks the graph about a concept's parents and flags, which
attributes it introduces or inherits, and which owner, value and primitive
types it carries.  Anything satisfying :class:`KnowledgeBase` can be
planned against.

Properties other than flags are inherited: a concept that does not set one
takes it from its nearest ancestor that does.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional, Protocol, runtime_checkable

# ---------------------------------------------------------------------------
# Flags
# ---------------------------------------------------------------------------

NEWLY_DEFINED = "newly-defined"
ATTRIBUTE_LOGIC = "attribute-logic"
ROOT_NODE_LOGIC = "root-node-logic"
OWN_MODULE = "own-module"

ROOT_CONCEPT = "Tao"
FORM_CONCEPT = "Form"
DATA_CONCEPT = "Data"
ATTRIBUTE_CONCEPT = "Attribute"


@runtime_checkable
class KnowledgeBase(Protocol):
    """Queries the planning layer makes against the concept graph."""

    def knows(self, name: str) -> bool: ...

    def parents(self, name: str) -> list[str]: ...

    def ancestors(self, name: str) -> list[str]: ...

    def has_flag(self, name: str, flag: str) -> bool: ...

    def is_attribute(self, name: str) -> bool: ...

    def module_path(self, name: str) -> Optional[str]: ...

    def introduced_attributes(self, name: str) -> list[str]: ...

    def attributes(self, name: str) -> list[str]: ...

    def owner_archetype(self, name: str) -> Optional[str]: ...

    def value_archetype(self, name: str) -> Optional[str]: ...

    def rust_primitive(self, name: str) -> Optional[str]: ...

    def default_value(self, name: str) -> Optional[str]: ...


@dataclass
class ConceptNode:
    name: str
    parents: list[str] = field(default_factory=list)
    flags: set[str] = field(default_factory=set)
    # path inside the base library crate, e.g. "tao::form::Form"
    module_path: Optional[str] = None
    # attributes this concept introduces, in declaration order
    attributes: list[str] = field(default_factory=list)
    owner_archetype: Optional[str] = None
    value_archetype: Optional[str] = None
    rust_primitive: Optional[str] = None
    default_value: Optional[str] = None


# (name, parent, module path inside zamm_yin)
_BASE_CONCEPTS = (
    (ROOT_CONCEPT, None, "tao::Tao"),
    (FORM_CONCEPT, ROOT_CONCEPT, "tao::form::Form"),
    (DATA_CONCEPT, FORM_CONCEPT, "tao::form::data::Data"),
    ("StringConcept", DATA_CONCEPT, "tao::form::data::StringConcept"),
    ("Number", DATA_CONCEPT, "tao::form::data::Number"),
    ("Relation", ROOT_CONCEPT, "tao::relation::Relation"),
    ("Flag", "Relation", "tao::relation::flag::Flag"),
    (ATTRIBUTE_CONCEPT, "Relation", "tao::relation::attribute::Attribute"),
    ("Owner", ATTRIBUTE_CONCEPT, "tao::relation::attribute::Owner"),
    ("Value", ATTRIBUTE_CONCEPT, "tao::relation::attribute::Value"),
    ("OwnerArchetype", ATTRIBUTE_CONCEPT, "tao::relation::attribute::OwnerArchetype"),
    ("ValueArchetype", ATTRIBUTE_CONCEPT, "tao::relation::attribute::ValueArchetype"),
    ("Inherits", ATTRIBUTE_CONCEPT, "tao::relation::attribute::Inherits"),
    ("HasFlag", ATTRIBUTE_CONCEPT, "tao::relation::attribute::has_property::HasFlag"),
    (
        "HasAttribute",
        ATTRIBUTE_CONCEPT,
        "tao::relation::attribute::has_property::HasAttribute",
    ),
)


class InMemoryKnowledgeBase:
    """Dictionary-backed concept graph preloaded with the base library concepts."""

    def __init__(self, *, preload: bool = True) -> None:
        self._nodes: dict[str, ConceptNode] = {}
        if preload:
            self._preload()

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def _preload(self) -> None:
        for name, parent, module_path in _BASE_CONCEPTS:
            self.add_concept(name, parent, module_path=module_path)
        self.set_flag(ROOT_CONCEPT, ROOT_NODE_LOGIC)
        self.set_flag(ATTRIBUTE_CONCEPT, OWN_MODULE)
        self.add_attributes(ATTRIBUTE_CONCEPT, ["Owner", "Value"])
        self.set_attribute_types(ATTRIBUTE_CONCEPT, owner=ROOT_CONCEPT, value=ROOT_CONCEPT)
        self.set_data_type("StringConcept", "String", "String::new()")
        self.set_data_type("Number", "usize", "0")

    # -- Mutation ----------------------------------------------------------

    def add_concept(
        self,
        name: str,
        parent: Optional[str] = ROOT_CONCEPT,
        *,
        flags: tuple[str, ...] = (),
        module_path: Optional[str] = None,
    ) -> ConceptNode:
        """Insert or replace a concept node."""
        if parent is not None and parent not in self._nodes:
            raise KeyError(f"Unknown parent concept: {parent}")
        node = ConceptNode(
            name=name,
            parents=[parent] if parent is not None else [],
            flags=set(flags),
            module_path=module_path,
        )
        self._nodes[name] = node
        return node

    def individuate(self, name: str, parent: str = ROOT_CONCEPT) -> ConceptNode:
        """Create a concept that is defined by the code being generated.

        Individuating a concept twice keeps the existing node.
        """
        if name in self._nodes:
            return self._nodes[name]
        return self.add_concept(name, parent, flags=(NEWLY_DEFINED,))

    def set_flag(self, name: str, flag: str) -> None:
        self._node(name).flags.add(flag)

    def add_attributes(self, name: str, attributes: Iterable[str]) -> None:
        """Record attributes introduced by *name*, skipping ones already recorded."""
        introduced = self._node(name).attributes
        for attribute in attributes:
            if attribute not in introduced:
                introduced.append(attribute)

    def set_attribute_types(
        self, name: str, *, owner: Optional[str] = None, value: Optional[str] = None
    ) -> None:
        node = self._node(name)
        if owner is not None:
            node.owner_archetype = owner
        if value is not None:
            node.value_archetype = value

    def set_data_type(
        self, name: str, rust_primitive: Optional[str], default_value: Optional[str] = None
    ) -> None:
        node = self._node(name)
        if rust_primitive is not None:
            node.rust_primitive = rust_primitive
        if default_value is not None:
            node.default_value = default_value

    # -- KnowledgeBase queries ---------------------------------------------

    def knows(self, name: str) -> bool:
        return name in self._nodes

    def parents(self, name: str) -> list[str]:
        return list(self._node(name).parents)

    def has_flag(self, name: str, flag: str) -> bool:
        return flag in self._node(name).flags

    def module_path(self, name: str) -> Optional[str]:
        return self._node(name).module_path

    def ancestors(self, name: str) -> list[str]:
        """All ancestors of *name*, nearest first."""
        seen: list[str] = []
        frontier = self.parents(name)
        while frontier:
            current = frontier.pop(0)
            if current in seen:
                continue
            seen.append(current)
            frontier.extend(self.parents(current))
        return seen

    def is_attribute(self, name: str) -> bool:
        if name == ATTRIBUTE_CONCEPT or self.has_flag(name, ATTRIBUTE_LOGIC):
            return True
        return ATTRIBUTE_CONCEPT in self.ancestors(name)

    def introduced_attributes(self, name: str) -> list[str]:
        return list(self._node(name).attributes)

    def attributes(self, name: str) -> list[str]:
        """Attributes of *name*, inherited ones first, from the root down."""
        collected: list[str] = []
        for concept in reversed([name, *self.ancestors(name)]):
            for attribute in self._node(concept).attributes:
                if attribute not in collected:
                    collected.append(attribute)
        return collected

    def owner_archetype(self, name: str) -> Optional[str]:
        return self._inherited(name, "owner_archetype")

    def value_archetype(self, name: str) -> Optional[str]:
        return self._inherited(name, "value_archetype")

    def rust_primitive(self, name: str) -> Optional[str]:
        return self._inherited(name, "rust_primitive")

    def default_value(self, name: str) -> Optional[str]:
        return self._inherited(name, "default_value")

    def _inherited(self, name: str, prop: str) -> Optional[str]:
        for concept in [name, *self.ancestors(name)]:
            value = getattr(self._node(concept), prop)
            if value is not None:
                return value
        return None

    def _node(self, name: str) -> ConceptNode:
        try:
            return self._nodes[name]
        except KeyError:
            raise KeyError(f"Unknown concept: {name}") from None
