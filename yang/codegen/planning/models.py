"""Pydantic v2 models for the planning layer.

A ``PlanningRequest`` describes one concept as authored by a human.  The
planner resolves it into a ``PlanningConfig`` holding every name, id and
import path the concept templates need.  ``StructConfig`` is the small
name-plus-import pair used wherever a Rust type is referenced.  ``ModuleConfig``
describes one generated ``mod.rs`` file.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from yang.codegen.imports import PATH_SEPARATOR

BASE_LIBRARY_CRATE = "zamm_yin"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Scope(str, Enum):
    """Id allocation scope: the base library itself, or code built on top of it."""
    BASE = "base"
    DERIVED = "derived"

    @property
    def crate(self) -> str:
        """Crate that base library paths resolve against in this scope."""
        return "crate" if self is Scope.BASE else BASE_LIBRARY_CRATE


# ---------------------------------------------------------------------------
# Struct references
# ---------------------------------------------------------------------------

class StructConfig(BaseModel):
    """A Rust type name together with the path it is imported from."""
    name: str = Field(default="Dummy", description="Type name as written in code")
    import_path: str = Field(
        default="zamm_yin::tao::Dummy", description="Fully-qualified import path"
    )

    @classmethod
    def from_import(cls, import_path: str) -> "StructConfig":
        """Build a config whose name is the last segment of *import_path*."""
        name = import_path.rsplit(PATH_SEPARATOR, 1)[-1]
        return cls(name=name, import_path=import_path)


class Link(BaseModel):
    """A binary relation between two concepts, added to the graph at init time."""
    source: StructConfig
    link_type: StructConfig
    target: StructConfig


# ---------------------------------------------------------------------------
# Requests & resolved configs
# ---------------------------------------------------------------------------

class PlanningRequest(BaseModel):
    """A concept to generate, as read from the front-end."""
    name: str = Field(..., description="Canonical concept name, e.g. 'MyConceptName'")
    parent: str = Field(default="Tao", description="Name of the parent concept")
    documentation: Optional[str] = Field(default=None, description="Rustdoc text")
    numeric_id: Optional[int] = Field(
        default=None, ge=0, description="Explicit id; allocated when absent"
    )
    target_scope: Optional[Scope] = Field(
        default=None, description="Allocation scope; taken from the run config when absent"
    )
    attribute: bool = Field(default=False, description="Force attribute-like handling")
    flags: list[str] = Field(default_factory=list, description="Flags added to this concept")
    attributes: list[str] = Field(
        default_factory=list, description="Attributes introduced by this concept"
    )
    owner_archetype: Optional[str] = Field(
        default=None, description="Type of the owner, for attribute concepts"
    )
    value_archetype: Optional[str] = Field(
        default=None, description="Type of the value, for attribute concepts"
    )
    rust_primitive: Optional[str] = Field(
        default=None, description="Rust type wrapped by a data concept, e.g. 'String'"
    )
    default_value: Optional[str] = Field(
        default=None, description="Rust expression for a sample value of the primitive"
    )
    root_node: bool = Field(default=False, description="Instances use Form as their form type")
    own_module: bool = Field(
        default=False, description="Put the concept and its children in their own module"
    )
    module_documentation: Optional[str] = Field(
        default=None, description="Module-level docs for an own-module concept"
    )


class AttributeConfig(BaseModel):
    """Owner and value types of an attribute concept."""
    owner_type: StructConfig
    owner_form: StructConfig
    value_type: StructConfig
    value_form: StructConfig


class DataConfig(BaseModel):
    """Primitive wrapped by a data concept."""
    rust_primitive: str
    default_value: str


class PlanningConfig(BaseModel):
    """Resolved values for a single concept, consumed by the concept templates."""
    this: StructConfig = Field(..., description="The concept's own struct")
    form: StructConfig = Field(..., description="Form type of the concept")
    parent: StructConfig = Field(..., description="Struct of the parent concept")
    ancestors: list[StructConfig] = Field(
        default_factory=list, description="All ancestors, nearest first"
    )
    internal_name: str = Field(..., description="Display name stored in the graph")
    archetype_name: str = Field(default="Archetype", description="Archetype wrapper type")
    doc: str = Field(default="", description="Documentation, already wrapped as a comment block")
    numeric_id: int = Field(..., ge=0, description="Resolved concept id")
    id_expr: str = Field(..., description="Rust expression for TYPE_ID")
    scope: Scope = Field(default=Scope.DERIVED)
    imports: list[str] = Field(default_factory=list, description="Extra imports for the body")
    mode_imports: dict[Scope, str] = Field(
        default_factory=dict,
        description="Import path of the concept when building the base library vs. on top of it",
    )
    introduced_attributes: list[StructConfig] = Field(default_factory=list)
    all_attributes: list[StructConfig] = Field(default_factory=list)
    links: list[Link] = Field(default_factory=list, description="Edges added at init time")
    root_node: bool = Field(default=False, description="No FormTrait impl is generated")
    attribute: Optional[AttributeConfig] = None
    data: Optional[DataConfig] = None
    file_path: str = Field(..., description="Output path relative to the crate root")
    module: list[str] = Field(
        default_factory=lambda: ["tao"], description="Module segments below src/"
    )
    module_owner: str = Field(default="Tao", description="Concept whose module holds the file")
    module_doc: Optional[str] = Field(default=None, description="Docs for an owned module")


class ModuleConfig(BaseModel):
    """Resolved contents of one generated ``mod.rs`` file."""
    file_path: str = Field(..., description="Output path relative to the crate root")
    doc: Optional[str] = None
    private_submodules: list[str] = Field(default_factory=list)
    public_submodules: list[str] = Field(default_factory=list)
    re_exports: list[str] = Field(default_factory=list)
