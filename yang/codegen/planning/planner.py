"""Resolve planning requests into concrete template configuration.

The planner decides, for every concept:

* the type name, display name, module and output file path,
* the numeric id, taken from the request or from the :class:`IdAllocator`,
* where the concept, its ancestors and its attributes are imported from,
  which depends on whether the base library itself is being built,
* which archetype type wraps it, and whether it is an attribute or a data
  concept.

It also groups planned concepts into the ``mod.rs`` files that declare them.

It only reads from the knowledge base.  Registering new concepts is the
caller's job.
"""

from __future__ import annotations

import re
from typing import Callable, Optional

from yang.codegen.docstring import into_docstring
from yang.codegen.imports import PATH_SEPARATOR
from yang.codegen.name_transform import to_display_name, to_file_name, to_type_name
from yang.codegen.planning.ids import IdAllocator
from yang.codegen.planning.knowledge_base import (
    ATTRIBUTE_CONCEPT,
    ATTRIBUTE_LOGIC,
    DATA_CONCEPT,
    FORM_CONCEPT,
    NEWLY_DEFINED,
    OWN_MODULE,
    ROOT_CONCEPT,
    ROOT_NODE_LOGIC,
    KnowledgeBase,
)
from yang.codegen.planning.models import (
    BASE_LIBRARY_CRATE,
    AttributeConfig,
    DataConfig,
    Link,
    ModuleConfig,
    PlanningConfig,
    PlanningRequest,
    Scope,
    StructConfig,
)
from yang.config import CodegenConfig
from yang.errors import MalformedInputError

MAX_ID_CONSTANT = "YIN_MAX_ID"
MAX_ID_IMPORT = f"{BASE_LIBRARY_CRATE}::tao::{MAX_ID_CONSTANT}"
ROOT_MODULE = "tao"
# sample value used by data concept tests when none is configured
FALLBACK_DEFAULT_VALUE = "Default::default()"

_TYPE_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")


class Planner:
    """Turns :class:`PlanningRequest` objects into :class:`PlanningConfig` objects.

    Args:
        config: Options for the current run.  ``config.yin`` picks the default
            scope for requests that do not name one.
        knowledge_base: Read access to the concept graph.
        allocator: Id counters for this run.  A fresh allocator is created
            when none is supplied.
    """

    def __init__(
        self,
        config: CodegenConfig,
        knowledge_base: KnowledgeBase,
        allocator: Optional[IdAllocator] = None,
    ) -> None:
        self.config = config
        self.knowledge_base = knowledge_base
        self.allocator = allocator if allocator is not None else IdAllocator()

    # -- Public API --------------------------------------------------------

    def plan(self, request: PlanningRequest) -> PlanningConfig:
        """Resolve a single request.

        Raises:
            MalformedInputError: The request has no usable name, refers to a
                concept the knowledge base does not know about, or describes a
                data concept without a Rust primitive.
        """
        type_name = self._validate(request)
        scope = self.scope_for(request)
        is_base = scope is Scope.BASE

        numeric_id = request.numeric_id
        if numeric_id is None:
            numeric_id = self.allocator.next_id(is_base)
        else:
            self.allocator.reserve(numeric_id, is_base)
        id_expr = str(numeric_id) if is_base else f"{MAX_ID_CONSTANT} + {numeric_id}"

        attribute_like = self.is_attribute_like(request)
        module, module_owner = self.locate(
            request.name,
            request.parent,
            attribute=attribute_like,
            own_module=request.own_module or self._flagged(request.name, OWN_MODULE),
        )
        this = self.struct_for(request.name, scope, module=module)
        parent = self.struct_for(request.parent, scope)
        ancestors = [parent] + [
            self.struct_for(name, scope) for name in self.knowledge_base.ancestors(request.parent)
        ]
        root_node = request.root_node or self._flagged(request.name, ROOT_NODE_LOGIC)

        doc = ""
        if request.documentation and request.documentation.strip():
            doc = into_docstring(request.documentation, self.config.code_width)

        introduced_names, all_names = self.attribute_names(request)
        introduced = [self.struct_for(name, scope) for name in introduced_names]

        attribute = self.attribute_config(request, scope) if attribute_like else None
        data = None if attribute_like else self.data_config(request)

        return PlanningConfig(
            this=this,
            form=self.struct_for(FORM_CONCEPT, scope) if root_node else this,
            parent=parent,
            ancestors=ancestors,
            internal_name=to_display_name(type_name),
            archetype_name="AttributeArchetype" if attribute_like else "Archetype",
            doc=doc,
            numeric_id=numeric_id,
            id_expr=id_expr,
            scope=scope,
            imports=[] if is_base else [MAX_ID_IMPORT],
            mode_imports={
                Scope.BASE: self.import_path(request.name, Scope.BASE, module=module),
                Scope.DERIVED: self.import_path(request.name, Scope.DERIVED, module=module),
            },
            introduced_attributes=introduced,
            all_attributes=[self.struct_for(name, scope) for name in all_names],
            links=self.links_for(request, this, introduced, scope),
            root_node=root_node,
            attribute=attribute,
            data=data,
            file_path=self.file_path(request.name, module),
            module=module,
            module_owner=module_owner,
            module_doc=request.module_documentation if module_owner == request.name else None,
        )

    def plan_all(self, requests: list[PlanningRequest]) -> list[PlanningConfig]:
        return [self.plan(request) for request in requests]

    def plan_modules(self, configs: list[PlanningConfig]) -> list[ModuleConfig]:
        """Group planned concepts into the ``mod.rs`` files that declare them.

        The root ``tao`` module is left alone.  Every other module lists its
        concept files as private submodules, re-exports their structs and
        declares nested generated modules as public submodules.  A module
        owned by a base library concept also re-exports that concept's
        siblings from the base library.
        """
        grouped: dict[tuple[str, ...], list[PlanningConfig]] = {}
        for cfg in configs:
            if len(cfg.module) > 1:
                grouped.setdefault(tuple(cfg.module), []).append(cfg)

        modules = []
        for segments, members in grouped.items():
            owner = members[0].module_owner
            re_exports = []
            base_path = self._base_library_path(owner)
            if base_path is not None and members[0].scope is Scope.DERIVED:
                module_path = base_path.rsplit(PATH_SEPARATOR, 1)[0]
                re_exports.append(f"{BASE_LIBRARY_CRATE}{PATH_SEPARATOR}{module_path}::*")

            private_submodules = []
            for cfg in members:
                submodule = cfg.file_path.rsplit("/", 1)[-1].removesuffix(".rs")
                private_submodules.append(submodule)
                re_exports.append(f"{submodule}{PATH_SEPARATOR}{cfg.this.name}")

            public_submodules = sorted(
                other[-1]
                for other in grouped
                if len(other) == len(segments) + 1 and other[: len(segments)] == segments
            )
            modules.append(
                ModuleConfig(
                    file_path=f"src/{'/'.join(segments)}/mod.rs",
                    doc=next((cfg.module_doc for cfg in members if cfg.module_doc), None),
                    private_submodules=private_submodules,
                    public_submodules=public_submodules,
                    re_exports=re_exports,
                )
            )
        return modules

    # -- Resolution helpers ------------------------------------------------

    def scope_for(self, request: PlanningRequest) -> Scope:
        if request.target_scope is not None:
            return request.target_scope
        return Scope.BASE if self.config.yin else Scope.DERIVED

    def is_attribute_like(self, request: PlanningRequest) -> bool:
        if request.attribute or request.name == ATTRIBUTE_CONCEPT:
            return True
        if self.knowledge_base.knows(request.name) and self.knowledge_base.is_attribute(
            request.name
        ):
            return True
        return self.knowledge_base.knows(request.parent) and self.knowledge_base.is_attribute(
            request.parent
        )

    def attribute_names(self, request: PlanningRequest) -> tuple[list[str], list[str]]:
        """Names of the attributes *request* introduces, and of all its attributes.

        Inherited attributes come first, from the root down, followed by the
        ones the concept introduces itself.
        """
        kb = self.knowledge_base
        introduced = list(request.attributes)
        if kb.knows(request.name):
            introduced = kb.introduced_attributes(request.name) + introduced
        introduced = list(dict.fromkeys(introduced))
        inherited = kb.attributes(request.parent)
        return introduced, list(dict.fromkeys(inherited + introduced))

    def attribute_config(self, request: PlanningRequest, scope: Scope) -> AttributeConfig:
        kb = self.knowledge_base
        owner = request.owner_archetype or self._inherited(request, kb.owner_archetype)
        value = request.value_archetype or self._inherited(request, kb.value_archetype)
        owner_type = self.struct_for(owner or ROOT_CONCEPT, scope)
        value_type = self.struct_for(value or ROOT_CONCEPT, scope)
        return AttributeConfig(
            owner_type=owner_type,
            owner_form=self._form_of(owner or ROOT_CONCEPT, owner_type, scope),
            value_type=value_type,
            value_form=self._form_of(value or ROOT_CONCEPT, value_type, scope),
        )

    def data_config(self, request: PlanningRequest) -> Optional[DataConfig]:
        """Primitive settings for a data concept, or ``None`` for other concepts."""
        kb = self.knowledge_base
        lineage = [request.parent, *kb.ancestors(request.parent)]
        if request.rust_primitive is None and DATA_CONCEPT not in lineage:
            return None
        primitive = request.rust_primitive or self._inherited(request, kb.rust_primitive)
        if primitive is None:
            raise MalformedInputError(
                f"Data concept {request.name!r} does not say which Rust primitive it wraps"
            )
        default_value = request.default_value or self._inherited(request, kb.default_value)
        return DataConfig(
            rust_primitive=primitive,
            default_value=default_value or FALLBACK_DEFAULT_VALUE,
        )

    def links_for(
        self,
        request: PlanningRequest,
        this: StructConfig,
        introduced: list[StructConfig],
        scope: Scope,
    ) -> list[Link]:
        """Edges the init file adds for *request*: flags, attributes, attribute types."""
        links = [
            Link(
                source=this,
                link_type=self.struct_for("HasFlag", scope),
                target=self.struct_for(flag, scope),
            )
            for flag in request.flags
        ]
        links.extend(
            Link(source=this, link_type=self.struct_for("HasAttribute", scope), target=attr)
            for attr in introduced
        )
        for link_type, archetype in (
            ("OwnerArchetype", request.owner_archetype),
            ("ValueArchetype", request.value_archetype),
        ):
            if archetype is not None:
                links.append(
                    Link(
                        source=this,
                        link_type=self.struct_for(link_type, scope),
                        target=self.struct_for(archetype, scope),
                    )
                )
        return links

    def locate(
        self, name: str, parent: str, *, attribute: bool = False, own_module: bool = False
    ) -> tuple[list[str], str]:
        """Module holding the file of concept *name*, and the concept owning that module.

        Attribute-like concepts that do not descend from ``Attribute`` still
        live in the attribute module.
        """
        if (
            attribute
            and name != ATTRIBUTE_CONCEPT
            and not self.knowledge_base.is_attribute(parent)
        ):
            parent = ATTRIBUTE_CONCEPT
        segments, owner = self.children_module(parent)
        if own_module:
            return segments + [to_file_name(to_type_name(name))], name
        return segments, owner

    def children_module(self, name: str) -> tuple[list[str], str]:
        """Module holding the files of *name*'s children, and its owner."""
        kb = self.knowledge_base
        parents = kb.parents(name)
        if not parents:
            return [ROOT_MODULE], name
        return self.locate(
            name,
            parents[0],
            attribute=kb.has_flag(name, ATTRIBUTE_LOGIC),
            own_module=kb.has_flag(name, OWN_MODULE),
        )

    def import_path(
        self, name: str, scope: Scope, *, module: Optional[list[str]] = None
    ) -> str:
        """Fully-qualified import path for concept *name*.

        Base library concepts live at their recorded module path inside
        ``zamm_yin``, or inside ``crate`` while the base library itself is
        being built.  Concepts defined by the code being generated always
        live in ``crate``, in *module* when given.
        """
        base_path = self._base_library_path(name)
        if base_path is not None:
            return f"{scope.crate}{PATH_SEPARATOR}{base_path}"

        if module is None:
            module = self._module_of(name)
        return PATH_SEPARATOR.join(["crate", *module, to_type_name(name)])

    def struct_for(
        self, name: str, scope: Scope, *, module: Optional[list[str]] = None
    ) -> StructConfig:
        return StructConfig.from_import(self.import_path(name, scope, module=module))

    def file_path(self, name: str, module: list[str]) -> str:
        """Output path of a concept file, relative to the crate root."""
        return f"src/{'/'.join(module)}/{to_file_name(to_type_name(name))}_form.rs"

    # -- Internals ---------------------------------------------------------

    def _validate(self, request: PlanningRequest) -> str:
        name = request.name.strip()
        if not name:
            raise MalformedInputError("Concept request has no name")
        type_name = to_type_name(name)
        if not _TYPE_NAME_PATTERN.match(type_name):
            raise MalformedInputError(
                f"Concept name {request.name!r} does not resolve to a valid type name"
            )
        if not self.knowledge_base.knows(request.parent):
            raise MalformedInputError(
                f"Concept {request.name!r} has unknown parent {request.parent!r}"
            )
        for role, archetype in (
            ("owner", request.owner_archetype),
            ("value", request.value_archetype),
        ):
            if archetype is not None and not self.knowledge_base.knows(archetype):
                raise MalformedInputError(
                    f"Concept {request.name!r} has unknown {role} archetype {archetype!r}"
                )
        return type_name

    def _flagged(self, name: str, flag: str) -> bool:
        kb = self.knowledge_base
        return kb.knows(name) and kb.has_flag(name, flag)

    def _inherited(
        self, request: PlanningRequest, lookup: Callable[[str], Optional[str]]
    ) -> Optional[str]:
        if self.knowledge_base.knows(request.name):
            return lookup(request.name)
        return lookup(request.parent)

    def _form_of(self, name: str, struct: StructConfig, scope: Scope) -> StructConfig:
        # instances of a root node concept are plain forms
        if self._flagged(name, ROOT_NODE_LOGIC):
            return self.struct_for(FORM_CONCEPT, scope)
        return struct

    def _base_library_path(self, name: str) -> Optional[str]:
        """Module path of *name* inside the base library, unless defined here."""
        kb = self.knowledge_base
        if not kb.knows(name) or kb.has_flag(name, NEWLY_DEFINED):
            return None
        return kb.module_path(name)

    def _module_of(self, name: str) -> list[str]:
        if not self.knowledge_base.knows(name):
            return [ROOT_MODULE]
        module, _ = self.children_module(name)
        return module
