"""Width-aware rendering of fragment trees.

Every fragment variant has exactly one layout rule in ``_RENDERERS`` and one
import rule in ``_IMPORTS``; the tables are checked against
``FRAGMENT_TYPES`` at import time so a new variant cannot be added without
deciding how it is laid out.

``NestedFragment`` is the only place where single-line versus multi-line
layout is decided.  Other composites either delegate to it or always put their
contents on separate lines.  ``max_width`` is advisory: a token longer than
the budget is still emitted in full.
"""

from __future__ import annotations

from typing import Callable

from yang.codegen.docstring import into_docstring, into_parent_docstring
from yang.codegen.fragments import (
    FRAGMENT_TYPES,
    AppendedFragment,
    AssertFragment,
    AtomicFragment,
    CallFragment,
    FileFragment,
    Fragment,
    FunctionFragment,
    ImplementationFragment,
    ItemDeclaration,
    ModuleFragment,
    NestedFragment,
    TraitFragment,
    TypeFragment,
    VecFragment,
)
from yang.codegen.imports import imports_as_str, re_exports_as_str
from yang.codegen.postprocessing import add_indent
from yang.errors import RenderInconsistencyError


def render(fragment: Fragment, max_width: int) -> str:
    """Render *fragment* as text, with no side effects on the tree."""
    renderer = _RENDERERS.get(type(fragment))
    if renderer is None:
        raise TypeError(f"Unknown fragment type: {type(fragment).__name__}")
    if max_width <= 0 and not isinstance(fragment, AtomicFragment):
        raise RenderInconsistencyError(type(fragment).__name__, max_width)
    return renderer(fragment, max_width)


def collect_imports(fragment: Fragment) -> list[str]:
    """Import paths of *fragment*, collected depth-first in child order."""
    collector = _IMPORTS.get(type(fragment))
    if collector is None:
        raise TypeError(f"Unknown fragment type: {type(fragment).__name__}")
    return collector(fragment)


def _last_line_length(text: str) -> int:
    return len(text.rsplit("\n", 1)[-1])


# ---------------------------------------------------------------------------
# Layout rules
# ---------------------------------------------------------------------------


def _render_atomic(fragment: AtomicFragment, max_width: int) -> str:
    return fragment.atom.strip()


def _render_appended(fragment: AppendedFragment, max_width: int) -> str:
    bodies = (render(child, max_width) for child in fragment.appendages)
    return fragment.separator.join(body for body in bodies if body)


def _render_nested(fragment: NestedFragment, max_width: int) -> str:
    preamble = render(fragment.preamble, max_width).strip()
    postamble = fragment.postamble.strip()
    inline = AppendedFragment(list(fragment.nesting), separator=fragment.separator)
    inlined = render(inline, max_width)
    if not inlined:
        return preamble + postamble

    opens_block = "{" in preamble
    if (
        "\n" not in inlined
        and not opens_block
        and _last_line_length(preamble) + len(inlined) + len(postamble) <= max_width
    ):
        return preamble + inlined + postamble

    inner_width = max_width - fragment.indent
    if inner_width <= 0:
        raise RenderInconsistencyError(type(fragment).__name__, inner_width)
    stacked = AppendedFragment(
        list(fragment.nesting), separator=fragment.separator.rstrip() + "\n"
    )
    lines = [add_indent(fragment.indent, line) for line in render(stacked, inner_width).split("\n")]
    if fragment.nesting_postfix:
        lines[-1] += fragment.nesting_postfix
    return "\n".join([preamble, *lines, postamble])


def _render_declaration(
    declaration: ItemDeclaration,
    definition: str,
    body: Fragment | None,
    max_width: int,
) -> str:
    """Render documentation, attributes, visibility and the item itself.

    Declare-only items end in ``;``.  Implemented items wrap *body* in a
    brace block.
    """
    parts: list[str] = []
    if declaration.doc:
        parts.append(into_docstring(declaration.doc, max_width))
    parts.extend(f"#[{attribute}]" for attribute in declaration.attributes)
    visibility = "pub " if declaration.public else ""
    parts.append(f"{visibility}{definition}")
    preamble = "\n".join(parts).strip()

    if not declaration.implemented or body is None:
        return f"{preamble};"
    block = NestedFragment(
        preamble=AtomicFragment(f"{preamble} {{"),
        postamble="}",
        nesting=[body],
    )
    return render(block, max_width)


def _render_function(fragment: FunctionFragment, max_width: int) -> str:
    args = [f"{name}: {arg_type}" for name, arg_type in fragment.args]
    if fragment.self_reference.value:
        args.insert(0, fragment.self_reference.value)
    return_type = f" -> {fragment.return_type}" if fragment.return_type else ""
    definition = f"fn {fragment.name}({', '.join(args)}){return_type}"
    return _render_declaration(fragment.declaration, definition, fragment.content, max_width)


def _submodules_by_publicity(fragment: ModuleFragment, public: bool) -> AppendedFragment:
    subset = sorted(
        (module for module in fragment.submodules if module.is_public() == public),
        key=lambda module: module.name or "",
    )
    return AppendedFragment(list(subset), separator="\n")


def _module_internals(fragment: ModuleFragment, with_imports: bool) -> AppendedFragment:
    imports = collect_imports(fragment.content) if with_imports else []
    if fragment.test:
        imports.append("super::*")

    internals = AppendedFragment()
    internals.append(
        AppendedFragment(
            [
                _submodules_by_publicity(fragment, True),
                _submodules_by_publicity(fragment, False),
            ],
            separator="\n",
        )
    )
    imports_str = imports_as_str(fragment.current_crate or "crate", imports)
    if imports_str:
        internals.append(AtomicFragment(imports_str))
    re_exports_str = re_exports_as_str(fragment.re_exports)
    if re_exports_str:
        internals.append(AtomicFragment(re_exports_str))
    internals.append(fragment.content)
    return internals


def _render_module(fragment: ModuleFragment, max_width: int) -> str:
    # a file module leaves its import block to the enclosing file
    internals = _module_internals(fragment, with_imports=not fragment.uses_entire_file)
    if fragment.uses_entire_file:
        file = FileFragment(current_crate=fragment.current_crate)
        if fragment.declaration.doc:
            doc = into_parent_docstring(fragment.declaration.doc, max_width)
            file.preamble = AtomicFragment(doc)
        file.append(internals)
        return render(file, max_width)
    if fragment.name is None:
        raise ValueError("Only file modules may be anonymous")
    return _render_declaration(
        fragment.declaration, f"mod {fragment.name}", internals, max_width
    )


def _render_type(fragment: TypeFragment, max_width: int) -> str:
    if not fragment.required_traits:
        return fragment.name
    bounds = " + ".join(render(bound, max_width) for bound in fragment.required_traits)
    return f"{fragment.name}: {bounds}"


def _render_trait(fragment: TraitFragment, max_width: int) -> str:
    declaration = ItemDeclaration(
        doc=fragment.declaration.doc,
        public=fragment.declaration.public,
        attributes=list(fragment.declaration.attributes),
    )
    definition = f"trait {render(fragment.trait_type, max_width)}"
    return _render_declaration(declaration, definition, fragment.content, max_width)


def _render_implementation(fragment: ImplementationFragment, max_width: int) -> str:
    declaration = ItemDeclaration(
        doc=fragment.declaration.doc,
        attributes=list(fragment.declaration.attributes),
    )
    if fragment.trait_cfg is None:
        definition = f"impl {fragment.struct_cfg.name}"
    else:
        lifetimes = ""
        if fragment.lifetimes:
            lifetimes = "<" + ", ".join(f"'{lifetime}" for lifetime in fragment.lifetimes) + ">"
        definition = f"impl{lifetimes} {fragment.trait_cfg.name} for {fragment.struct_cfg.name}"
    return _render_declaration(declaration, definition, fragment.content, max_width)


def _render_vec(fragment: VecFragment, max_width: int) -> str:
    nested = NestedFragment(
        preamble=AtomicFragment("vec!["),
        postamble="]",
        nesting=list(fragment.elements),
        separator=", ",
    )
    return render(nested, max_width)


def _render_call(fragment: CallFragment, max_width: int) -> str:
    bang = "!" if fragment.is_macro else ""
    nested = NestedFragment(
        preamble=AtomicFragment(f"{fragment.call.atom.strip()}{bang}("),
        postamble=");",
        nesting=list(fragment.arguments),
        separator=", ",
        nesting_postfix=None if fragment.is_macro else ",",
    )
    return render(nested, max_width)


def _render_assert(fragment: AssertFragment, max_width: int) -> str:
    return render(fragment.as_call(), max_width)


def _render_file(fragment: FileFragment, max_width: int) -> str:
    combined = AppendedFragment([fragment.contents])
    if fragment.tests:
        test_module = ModuleFragment.new_test_module()
        test_module.current_crate = fragment.current_crate
        for test in fragment.tests:
            test_module.append(test)
        combined.append(test_module)

    excluded = [fragment.self_import] if fragment.self_import else []
    imports = imports_as_str(
        fragment.current_crate or "crate", collect_imports(combined), excluded
    )
    body = render(combined, max_width)

    final_file = ""
    if fragment.preamble is not None:
        final_file += f"{render(fragment.preamble, max_width)}\n\n"
    if imports:
        final_file += f"{imports}\n\n"
    if body:
        final_file += f"{body}\n"
    return final_file


_RENDERERS: dict[type, Callable[..., str]] = {
    AtomicFragment: _render_atomic,
    AppendedFragment: _render_appended,
    NestedFragment: _render_nested,
    FunctionFragment: _render_function,
    ModuleFragment: _render_module,
    TraitFragment: _render_trait,
    ImplementationFragment: _render_implementation,
    TypeFragment: _render_type,
    VecFragment: _render_vec,
    CallFragment: _render_call,
    AssertFragment: _render_assert,
    FileFragment: _render_file,
}


# ---------------------------------------------------------------------------
# Import rules
# ---------------------------------------------------------------------------


def _children_imports(children: list[Fragment]) -> list[str]:
    imports: list[str] = []
    for child in children:
        imports.extend(collect_imports(child))
    return imports


def _implementation_imports(fragment: ImplementationFragment) -> list[str]:
    imports = collect_imports(fragment.content)
    if fragment.trait_cfg is not None and not fragment.same_file_as_trait:
        imports.append(fragment.trait_cfg.import_path)
    if not fragment.same_file_as_struct:
        imports.append(fragment.struct_cfg.import_path)
    return imports


def _type_imports(fragment: TypeFragment) -> list[str]:
    imports = [fragment.import_path] if fragment.import_path else []
    return imports + _children_imports(fragment.required_traits)


_IMPORTS: dict[type, Callable[..., list[str]]] = {
    AtomicFragment: lambda f: list(f.import_paths),
    AppendedFragment: lambda f: _children_imports(f.appendages),
    NestedFragment: lambda f: collect_imports(f.preamble) + _children_imports(f.nesting),
    FunctionFragment: lambda f: list(f.import_paths) + collect_imports(f.content),
    # module and file imports are emitted inside them and never leak out
    ModuleFragment: lambda f: [],
    TraitFragment: lambda f: collect_imports(f.trait_type) + collect_imports(f.content),
    ImplementationFragment: _implementation_imports,
    TypeFragment: _type_imports,
    VecFragment: lambda f: _children_imports(f.elements),
    CallFragment: lambda f: collect_imports(f.call) + _children_imports(f.arguments),
    AssertFragment: lambda f: collect_imports(f.lhs) + collect_imports(f.rhs),
    FileFragment: lambda f: [],
}


_missing = [
    variant.__name__
    for variant in FRAGMENT_TYPES
    if variant not in _RENDERERS or variant not in _IMPORTS
]
if _missing:
    raise RuntimeError(f"Fragment variants without layout rules: {', '.join(_missing)}")
