"""Code fragment model.

A generated Rust file is assembled from a tree of fragments.  The set of
fragment variants is closed: every class listed in ``FRAGMENT_TYPES`` has a
layout rule in :mod:`yang.codegen.render`, and nothing else may appear in a
tree.

Fragments are plain mutable objects and may be shared between several parents
(a single ``initialize_kb()`` call reused by multiple test functions, for
example).  Mutating a shared fragment after attaching it is visible through
every parent, so finish building a subtree before handing it out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from yang.codegen.planning.models import StructConfig

RUST_INDENTATION = 4


class Fragment:
    """Common interface shared by every fragment variant."""

    def body(self, max_width: int) -> str:
        """Render this fragment, keeping lines within *max_width* where possible."""
        from yang.codegen.render import render

        return render(self, max_width)

    def imports(self) -> list[str]:
        """Import paths needed by this fragment, depth-first and not deduplicated."""
        from yang.codegen.render import collect_imports

        return collect_imports(self)


# ---------------------------------------------------------------------------
# Leaves and plain composites
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class AtomicFragment(Fragment):
    """Code that cannot be broken down any further."""

    atom: str = ""
    import_paths: list[str] = field(default_factory=list)


@dataclass(eq=False)
class AppendedFragment(Fragment):
    """Fragments rendered one after another.

    Think function bodies or class bodies: more lines can always be appended.
    """

    appendages: list[Fragment] = field(default_factory=list)
    separator: str = "\n\n"

    def append(self, fragment: Fragment) -> Fragment:
        self.appendages.append(fragment)
        return fragment

    def prepend(self, fragment: Fragment) -> Fragment:
        self.appendages.insert(0, fragment)
        return fragment

    def is_empty(self) -> bool:
        return not self.appendages


@dataclass(eq=False)
class NestedFragment(Fragment):
    """A header, indented children and a closing delimiter.

    The children are inlined after the header when everything fits on one
    line.  Otherwise each child goes on its own line, one indent level deeper.
    ``nesting_postfix`` is appended to the last child in the multi-line form,
    which gives the trailing comma on multi-line argument lists.
    """

    preamble: AtomicFragment = field(default_factory=AtomicFragment)
    postamble: str = ""
    nesting: list[Fragment] = field(default_factory=list)
    separator: str = ""
    nesting_postfix: Optional[str] = None
    indent: int = RUST_INDENTATION

    def append(self, fragment: Fragment) -> Fragment:
        self.nesting.append(fragment)
        return fragment


# ---------------------------------------------------------------------------
# Item declarations
# ---------------------------------------------------------------------------


@dataclass
class ItemDeclaration:
    """Modifiers shared by every declared item."""

    doc: Optional[str] = None
    public: bool = False
    attributes: list[str] = field(default_factory=list)
    implemented: bool = True


class Declarable:
    """Mixin exposing the :class:`ItemDeclaration` API on a fragment."""

    declaration: ItemDeclaration

    def mark_as_public(self) -> None:
        self.declaration.public = True

    def is_public(self) -> bool:
        return self.declaration.public

    def document(self, documentation: str) -> None:
        self.declaration.doc = documentation

    def add_attribute(self, attribute: str) -> None:
        self.declaration.attributes.append(attribute)

    def mark_as_declare_only(self) -> None:
        self.declaration.implemented = False

    def mark_for_full_implementation(self) -> None:
        self.declaration.implemented = True


class SelfReference(str, Enum):
    """How a method refers to its receiver."""
    NONE = ""
    IMMUTABLE = "&self"
    MUTABLE = "&mut self"


@dataclass(eq=False)
class FunctionFragment(Declarable, Fragment):
    """A named function wrapping a body of statements."""

    name: str = ""
    self_reference: SelfReference = SelfReference.NONE
    args: list[tuple[str, str]] = field(default_factory=list)
    return_type: Optional[str] = None
    import_paths: list[str] = field(default_factory=list)
    content: AppendedFragment = field(default_factory=lambda: AppendedFragment(separator="\n"))
    declaration: ItemDeclaration = field(default_factory=ItemDeclaration)

    def mark_as_test(self) -> None:
        self.add_attribute("test")

    def add_arg(self, name: str, arg_type: str) -> None:
        self.args.append((name, arg_type))

    def add_import(self, import_path: str) -> None:
        self.import_paths.append(import_path)

    def append(self, fragment: Fragment) -> Fragment:
        return self.content.append(fragment)


@dataclass(eq=False)
class ModuleFragment(Declarable, Fragment):
    """A module declaration, inline or spanning an entire file.

    Imports used inside a module are emitted inside it and never bubble up to
    the enclosing scope.
    """

    name: Optional[str] = None
    test: bool = False
    uses_entire_file: bool = False
    re_exports: list[str] = field(default_factory=list)
    submodules: list["ModuleFragment"] = field(default_factory=list)
    content: AppendedFragment = field(default_factory=AppendedFragment)
    current_crate: Optional[str] = None
    declaration: ItemDeclaration = field(default_factory=ItemDeclaration)

    @classmethod
    def new_test_module(cls) -> "ModuleFragment":
        module = cls(name="tests")
        module.mark_as_test()
        return module

    @classmethod
    def new_file_module(cls) -> "ModuleFragment":
        return cls(uses_entire_file=True)

    def mark_as_test(self) -> None:
        self.add_attribute("cfg(test)")
        self.test = True

    def add_submodule(self, name: str) -> "ModuleFragment":
        """Add a submodule, declare-only until marked for implementation."""
        submodule = ModuleFragment(name=name)
        submodule.mark_as_declare_only()
        self.submodules.append(submodule)
        return submodule

    def re_export(self, import_path: str) -> None:
        self.re_exports.append(import_path)

    def append(self, fragment: Fragment) -> Fragment:
        return self.content.append(fragment)


@dataclass(eq=False)
class TypeFragment(Fragment):
    """A type name with optional trait bounds, joined by ``+``."""

    name: str = ""
    import_path: Optional[str] = None
    required_traits: list[Fragment] = field(default_factory=list)

    def add_required_trait(self, required_trait: Fragment) -> None:
        self.required_traits.append(required_trait)


@dataclass(eq=False)
class TraitFragment(Declarable, Fragment):
    """An interface declaration."""

    trait_type: TypeFragment = field(default_factory=TypeFragment)
    content: AppendedFragment = field(default_factory=AppendedFragment)
    declaration: ItemDeclaration = field(default_factory=ItemDeclaration)

    def add_required_trait(self, required_trait: Fragment) -> None:
        self.trait_type.add_required_trait(required_trait)

    def append(self, fragment: Fragment) -> Fragment:
        return self.content.append(fragment)


@dataclass(eq=False)
class ImplementationFragment(Declarable, Fragment):
    """Implementation block for a struct, optionally of a trait."""

    struct_cfg: StructConfig = field(default_factory=StructConfig)
    trait_cfg: Optional[StructConfig] = None
    lifetimes: list[str] = field(default_factory=list)
    same_file_as_trait: bool = False
    same_file_as_struct: bool = False
    content: AppendedFragment = field(default_factory=AppendedFragment)
    declaration: ItemDeclaration = field(default_factory=ItemDeclaration)

    def add_lifetime(self, lifetime: str) -> None:
        self.lifetimes.append(lifetime)

    def append(self, fragment: Fragment) -> Fragment:
        return self.content.append(fragment)


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class VecFragment(Fragment):
    """A ``vec![...]`` literal."""

    elements: list[Fragment] = field(default_factory=list)

    def add_element(self, element: Fragment) -> None:
        self.elements.append(element)

    def add_element_str(self, element: str) -> None:
        self.add_element(AtomicFragment(element))


@dataclass(eq=False)
class CallFragment(Fragment):
    """A function call, or a macro invocation when ``is_macro`` is set."""

    call: AtomicFragment = field(default_factory=AtomicFragment)
    arguments: list[Fragment] = field(default_factory=list)
    is_macro: bool = False

    def add_argument(self, argument: Fragment) -> None:
        self.arguments.append(argument)

    def add_argument_str(self, argument: str) -> None:
        self.add_argument(AtomicFragment(argument))


@dataclass(eq=False)
class AssertFragment(Fragment):
    """An ``assert_eq!`` invocation comparing two fragments."""

    lhs: Fragment = field(default_factory=AtomicFragment)
    rhs: Fragment = field(default_factory=AtomicFragment)

    def as_call(self) -> CallFragment:
        return CallFragment(
            call=AtomicFragment("assert_eq"),
            arguments=[self.lhs, self.rhs],
            is_macro=True,
        )


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class FileFragment(Fragment):
    """An entire code file.  Top-level only: never nest it inside another fragment."""

    preamble: Optional[AtomicFragment] = None
    contents: AppendedFragment = field(default_factory=AppendedFragment)
    tests: list[Fragment] = field(default_factory=list)
    self_import: Optional[str] = None
    current_crate: Optional[str] = None

    def append(self, fragment: Fragment) -> Fragment:
        return self.contents.append(fragment)

    def prepend(self, fragment: Fragment) -> Fragment:
        return self.contents.prepend(fragment)

    def append_test(self, test: Fragment) -> Fragment:
        self.tests.append(test)
        return test

    def is_empty(self) -> bool:
        return self.contents.is_empty()

    def generate_code(self, code_width: int = 80) -> str:
        return self.body(code_width)


FRAGMENT_TYPES: tuple[type[Fragment], ...] = (
    AtomicFragment,
    AppendedFragment,
    NestedFragment,
    FunctionFragment,
    ModuleFragment,
    TraitFragment,
    ImplementationFragment,
    TypeFragment,
    VecFragment,
    CallFragment,
    AssertFragment,
    FileFragment,
)
