"""Fragment builders for generated concept files.

Three kinds of file come out of a generation run:

* one concept file per planned concept, holding the struct, its trait
  implementations and a test module.  Attribute concepts also get an
  ``AttributeTrait`` implementation, and data concepts accessors for the
  primitive they wrap;
* one ``mod.rs`` file per generated module below the root one;
* one knowledge-base init file that registers every concept generated in the
  run with the graph.
"""

from __future__ import annotations

from typing import Optional

from yang.codegen.fragments import (
    AppendedFragment,
    AssertFragment,
    AtomicFragment,
    CallFragment,
    FileFragment,
    FunctionFragment,
    ImplementationFragment,
    ModuleFragment,
    VecFragment,
)
from yang.codegen.planning.models import (
    Link,
    ModuleConfig,
    PlanningConfig,
    Scope,
    StructConfig,
)
from yang.codegen.templates import TemplateRenderer

INIT_FILE_PATH = "src/tao/auto_init.rs"
INITIALIZE_KB_IMPORT = "crate::tao::initialize_kb"


# ---------------------------------------------------------------------------
# Concept file
# ---------------------------------------------------------------------------


def concept_fragment(cfg: PlanningConfig, renderer: TemplateRenderer) -> AtomicFragment:
    """The struct declaration and all of its trait implementations."""
    base = cfg.scope.crate
    imports = [
        "std::convert::TryFrom",
        "std::fmt",
        "std::fmt::Debug",
        "std::fmt::Formatter",
        cfg.form.import_path,
        cfg.parent.import_path,
        f"{base}::tao::archetype::ArchetypeTrait",
        f"{base}::tao::archetype::{cfg.archetype_name}",
        f"{base}::node_wrappers::debug_wrapper",
        f"{base}::Wrapper",
        f"{base}::node_wrappers::FinalNode",
        *cfg.imports,
    ]
    atom = renderer.render(
        "concept.rs.j2",
        {
            "doc": cfg.doc,
            "name": cfg.this.name,
            "archetype": cfg.archetype_name,
            "form": cfg.form.name,
            "id": cfg.id_expr,
            "internal_name": cfg.internal_name,
            "parent": cfg.parent.name,
        },
    )
    return AtomicFragment(atom, imports)


def form_fragments(cfg: PlanningConfig) -> list[ImplementationFragment]:
    """``FormTrait`` for the concept, plus a conversion into each ancestor."""
    name = cfg.this.name
    form_impl = ImplementationFragment(
        struct_cfg=cfg.this,
        trait_cfg=StructConfig.from_import(f"{cfg.scope.crate}::tao::form::FormTrait"),
        same_file_as_struct=True,
    )
    fragments = [form_impl]
    for ancestor in cfg.ancestors:
        conversion = ImplementationFragment(
            struct_cfg=ancestor,
            trait_cfg=StructConfig(name=f"From<{name}>", import_path="std::convert::From"),
            # From is in the prelude
            same_file_as_trait=True,
        )
        from_fn = FunctionFragment(name="from", return_type=ancestor.name)
        from_fn.add_arg("this", name)
        from_fn.append(AtomicFragment(f"{ancestor.name}::from(this.base)"))
        conversion.append(from_fn)
        fragments.append(conversion)
    return fragments


def attribute_fragment(cfg: PlanningConfig, renderer: TemplateRenderer) -> AtomicFragment:
    attribute = cfg.attribute
    atom = renderer.render(
        "attribute.rs.j2",
        {
            "name": cfg.this.name,
            "owner_form": attribute.owner_form.name,
            "value_form": attribute.value_form.name,
        },
    )
    return AtomicFragment(
        atom,
        [
            f"{cfg.scope.crate}::tao::relation::attribute::AttributeTrait",
            attribute.owner_form.import_path,
            attribute.value_form.import_path,
        ],
    )


def attribute_test_fragment(cfg: PlanningConfig, renderer: TemplateRenderer) -> AtomicFragment:
    """Tests checking the owner and value constraints of an attribute concept."""
    attribute = cfg.attribute
    base = cfg.scope.crate
    imports = [
        f"{base}::tao::archetype::ArchetypeFormTrait",
        f"{base}::tao::archetype::AttributeArchetypeFormTrait",
    ]
    # forms are already imported by the attribute impl
    if attribute.owner_type != attribute.owner_form:
        imports.append(attribute.owner_type.import_path)
    if attribute.value_type != attribute.value_form:
        imports.append(attribute.value_type.import_path)
    atom = renderer.render(
        "attribute_tests.rs.j2",
        {
            "name": cfg.this.name,
            "owner_type": attribute.owner_type.name,
            "value_type": attribute.value_type.name,
        },
    )
    return AtomicFragment(atom, imports)


def data_fragment(cfg: PlanningConfig, renderer: TemplateRenderer) -> AtomicFragment:
    base = cfg.scope.crate
    atom = renderer.render(
        "data.rs.j2", {"name": cfg.this.name, "primitive": cfg.data.rust_primitive}
    )
    return AtomicFragment(
        atom,
        [
            f"{base}::node_wrappers::BaseNodeTrait",
            f"{base}::graph::value_wrappers::StrongValue",
            f"{base}::graph::value_wrappers::unwrap_value",
            "std::rc::Rc",
        ],
    )


def data_test_fragment(cfg: PlanningConfig, renderer: TemplateRenderer) -> AtomicFragment:
    return AtomicFragment(
        renderer.render(
            "data_tests.rs.j2",
            {"name": cfg.this.name, "sample_value": cfg.data.default_value},
        )
    )


def _archetypes_vec(structs: list[StructConfig]) -> VecFragment:
    vec = VecFragment()
    for struct in structs:
        vec.add_element(AtomicFragment(f"{struct.name}::archetype()", [struct.import_path]))
    return vec


def _test_function(name: str, initialize_kb: CallFragment) -> FunctionFragment:
    function = FunctionFragment(name=name)
    function.mark_as_test()
    function.append(initialize_kb)
    return function


def concept_test_fragment(cfg: PlanningConfig, renderer: TemplateRenderer) -> AppendedFragment:
    """Tests checking that the concept is registered and behaves as a wrapper.

    Every test function starts with the same ``initialize_kb()`` call node.
    """
    base = cfg.scope.crate
    name = cfg.this.name
    initialize_kb = CallFragment(call=AtomicFragment("initialize_kb", [INITIALIZE_KB_IMPORT]))
    tests = AppendedFragment()

    check_type_created = _test_function("check_type_created", initialize_kb)
    check_type_created.append(
        AssertFragment(
            AtomicFragment(f"{name}::archetype().id()"),
            AtomicFragment(f"{name}::TYPE_ID"),
        )
    )
    check_type_created.append(
        AssertFragment(
            AtomicFragment(f"{name}::archetype().internal_name_str()"),
            AtomicFragment(f"Some(Rc::from({name}::TYPE_NAME))", ["std::rc::Rc"]),
        )
    )
    tests.append(check_type_created)

    check_type_attributes = _test_function("check_type_attributes", initialize_kb)
    check_type_attributes.add_import(f"{base}::tao::archetype::ArchetypeFormTrait")
    check_type_attributes.append(
        AssertFragment(
            AtomicFragment(f"{name}::archetype().added_attributes()"),
            _archetypes_vec(cfg.introduced_attributes),
        )
    )
    check_type_attributes.append(
        AssertFragment(
            AtomicFragment(f"{name}::archetype().attributes()"),
            _archetypes_vec(cfg.all_attributes),
        )
    )
    tests.append(check_type_attributes)

    tests.append(
        AtomicFragment(
            renderer.render("concept_tests.rs.j2", {"name": name}),
            [
                f"{base}::node_wrappers::CommonNodeTrait",
                f"{base}::tao::archetype::ArchetypeFormTrait",
            ],
        )
    )
    return tests


def concept_file_fragment(
    cfg: PlanningConfig,
    renderer: Optional[TemplateRenderer] = None,
    current_crate: Optional[str] = None,
) -> FileFragment:
    """Complete file for one concept.  The returned file may be appended to further."""
    renderer = renderer or TemplateRenderer()
    file = FileFragment(self_import=cfg.this.import_path, current_crate=current_crate)
    file.append(concept_fragment(cfg, renderer))
    if not cfg.root_node:
        for fragment in form_fragments(cfg):
            file.append(fragment)

    tests = concept_test_fragment(cfg, renderer)
    if cfg.attribute is not None:
        file.append(attribute_fragment(cfg, renderer))
        tests.append(attribute_test_fragment(cfg, renderer))
    elif cfg.data is not None:
        file.append(data_fragment(cfg, renderer))
        tests.append(data_test_fragment(cfg, renderer))
    file.append_test(tests)
    return file


# ---------------------------------------------------------------------------
# Module file
# ---------------------------------------------------------------------------


def module_file_fragment(
    module: ModuleConfig, current_crate: Optional[str] = None
) -> ModuleFragment:
    """``mod.rs`` declaring a module's concept files and re-exporting their structs."""
    fragment = ModuleFragment.new_file_module()
    fragment.current_crate = current_crate
    if module.doc:
        fragment.document(module.doc)
    for name in module.private_submodules:
        fragment.add_submodule(name)
    for name in module.public_submodules:
        fragment.add_submodule(name).mark_as_public()
    for import_path in module.re_exports:
        fragment.re_export(import_path)
    return fragment


# ---------------------------------------------------------------------------
# Knowledge-base init file
# ---------------------------------------------------------------------------


def _type_id(struct: StructConfig) -> AtomicFragment:
    return AtomicFragment(f"{struct.name}::TYPE_ID", [struct.import_path])


def init_types_fragment(
    concepts: list[StructConfig],
    links: list[Link],
    renderer: TemplateRenderer,
    scope: Scope = Scope.DERIVED,
) -> FunctionFragment:
    """The public ``initialize_types`` function.

    Callers still pick the graph binding and set up archetype relations
    themselves.
    """
    base = scope.crate
    init_fn = FunctionFragment(name="initialize_types")
    init_fn.mark_as_public()
    init_fn.document("Adds all concepts to knowledge graph.")
    for import_path in (
        f"{base}::graph::InjectionGraph",
        f"{base}::graph::Graph",
        f"{base}::initialize_type",
        f"{base}::tao::archetype::ArchetypeTrait",
    ):
        init_fn.add_import(import_path)
    for concept in concepts:
        init_fn.add_import(concept.import_path)

    init_fn.append(
        AtomicFragment(
            renderer.render(
                "initialize_types.rs.j2", {"concepts": [c.name for c in concepts]}
            )
        )
    )
    for link in links:
        add_edge = CallFragment(call=AtomicFragment("ig.add_edge"))
        add_edge.add_argument(_type_id(link.source))
        add_edge.add_argument(_type_id(link.link_type))
        add_edge.add_argument(_type_id(link.target))
        init_fn.append(add_edge)
    return init_fn


def max_id_fragment(max_id: int, renderer: TemplateRenderer, width: int) -> AtomicFragment:
    return AtomicFragment(renderer.render("max_id.rs.j2", {"max_id": max_id, "width": width}))


def init_file_fragment(
    configs: list[PlanningConfig],
    renderer: Optional[TemplateRenderer] = None,
    *,
    code_width: int = 80,
    current_crate: Optional[str] = None,
) -> FileFragment:
    """Init file registering every concept in *configs*.

    ``YIN_MAX_ID`` is always defined, even when nothing downstream uses it.
    """
    renderer = renderer or TemplateRenderer()
    scope = configs[0].scope if configs else Scope.DERIVED
    links = [link for cfg in configs for link in cfg.links]
    max_id = max((cfg.numeric_id for cfg in configs), default=0)

    file = FileFragment(current_crate=current_crate)
    file.append(max_id_fragment(max_id, renderer, code_width))
    file.append(init_types_fragment([cfg.this for cfg in configs], links, renderer, scope))
    return file
