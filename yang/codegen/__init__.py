"""Yang code generation engine.

Builds trees of code fragments, renders them within a line width, finishes
the text with the postprocessing passes and keeps track of every file it
writes.

Quick usage::

    from yang.codegen import AtomicFragment, FileFragment

    file = FileFragment()
    file.append(AtomicFragment("pub struct Foo;", ["std::fmt"]))
    print(file.generate_code(80))
"""

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
    SelfReference,
    TraitFragment,
    TypeFragment,
    VecFragment,
)
from yang.codegen.generator import CodeGenerator, GeneratedFile
from yang.codegen.imports import render_imports
from yang.codegen.ledger import AutogenLedger, clean_autogen
from yang.codegen.name_transform import NameTransform
from yang.codegen.postprocessing import (
    add_autogeneration_comments,
    add_fmt_skips,
    post_process_generation,
    reindent,
)
from yang.codegen.render import collect_imports, render
from yang.codegen.templates import TemplateRenderer

__all__ = [
    "FRAGMENT_TYPES",
    "AppendedFragment",
    "AssertFragment",
    "AtomicFragment",
    "AutogenLedger",
    "CallFragment",
    "CodeGenerator",
    "FileFragment",
    "Fragment",
    "FunctionFragment",
    "GeneratedFile",
    "ImplementationFragment",
    "ItemDeclaration",
    "ModuleFragment",
    "NameTransform",
    "NestedFragment",
    "SelfReference",
    "TemplateRenderer",
    "TraitFragment",
    "TypeFragment",
    "VecFragment",
    "add_autogeneration_comments",
    "add_fmt_skips",
    "clean_autogen",
    "collect_imports",
    "post_process_generation",
    "reindent",
    "render",
    "render_imports",
]
