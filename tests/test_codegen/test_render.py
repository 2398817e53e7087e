"""Unit tests for the fragment renderer (yang.codegen.render).

Tests cover:
- Atomic, Appended, Nested layout rules (single line vs. one child per line)
- Call, Assert and Vec expressions
- Item declarations: functions, modules, traits, impl blocks, types
- File assembly: import block, self import exclusion, test module
- Import collection, module import containment
- Purity of rendering and shared child fragments
- Width errors and unknown fragment variants
"""

from __future__ import annotations

import pytest

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
    ModuleFragment,
    NestedFragment,
    SelfReference,
    TraitFragment,
    TypeFragment,
    VecFragment,
)
from yang.codegen.planning.models import StructConfig
from yang.codegen.render import _IMPORTS, _RENDERERS, collect_imports, render
from yang.errors import RenderInconsistencyError

pytestmark = pytest.mark.unit


def _call_args() -> NestedFragment:
    return NestedFragment(
        preamble=AtomicFragment("foo("),
        postamble=")",
        nesting=[AtomicFragment("alpha"), AtomicFragment("beta")],
        separator=", ",
    )


# ---------------------------------------------------------------------------
# Leaves & plain composites
# ---------------------------------------------------------------------------


class TestAtomic:
    def test_strips_surrounding_whitespace(self):
        assert AtomicFragment("  let x = 1;\n").body(80) == "let x = 1;"

    def test_long_token_not_truncated(self):
        token = "x" * 200
        assert AtomicFragment(token).body(10) == token

    def test_imports(self):
        assert AtomicFragment("a", ["std::fmt"]).imports() == ["std::fmt"]


class TestAppended:
    def test_empty(self):
        assert AppendedFragment().body(80) == ""

    def test_blank_line_between_children(self):
        appended = AppendedFragment([AtomicFragment("a"), AtomicFragment("b")])
        assert appended.body(80) == "a\n\nb"

    def test_empty_children_leave_no_stray_separators(self):
        appended = AppendedFragment(
            [AtomicFragment("a"), AtomicFragment(""), AppendedFragment(), AtomicFragment("b")]
        )
        assert appended.body(80) == "a\n\nb"

    def test_imports_in_child_order_with_duplicates(self):
        appended = AppendedFragment(
            [AtomicFragment("a", ["z::Z", "a::A"]), AtomicFragment("b", ["z::Z"])]
        )
        assert appended.imports() == ["z::Z", "a::A", "z::Z"]


class TestNested:
    def test_single_line_when_it_fits(self):
        body = _call_args().body(80)
        assert body == "foo(alpha, beta)"
        assert "\n" not in body

    def test_exact_fit_stays_on_one_line(self):
        assert _call_args().body(len("foo(alpha, beta)")) == "foo(alpha, beta)"

    def test_one_child_per_line_when_too_wide(self):
        assert _call_args().body(10) == "foo(\n    alpha,\n    beta\n)"

    def test_nesting_postfix_on_last_child(self):
        nested = _call_args()
        nested.nesting_postfix = ","
        assert nested.body(10) == "foo(\n    alpha,\n    beta,\n)"

    def test_block_preamble_always_multi_line(self):
        nested = NestedFragment(
            preamble=AtomicFragment("fn x() {"), postamble="}", nesting=[AtomicFragment("a")]
        )
        assert nested.body(80) == "fn x() {\n    a\n}"

    def test_brace_inside_preamble_never_inlined(self):
        nested = NestedFragment(
            preamble=AtomicFragment("Foo { x"), postamble="}", nesting=[AtomicFragment("a")]
        )
        assert nested.body(80) == "Foo { x\n    a\n}"

    def test_empty_nesting(self):
        nested = NestedFragment(preamble=AtomicFragment("fn x() {"), postamble="}")
        assert nested.body(80) == "fn x() {}"

    def test_children_get_reduced_width(self):
        inner = _call_args()
        outer = NestedFragment(
            preamble=AtomicFragment("fn x() {"), postamble="}", nesting=[inner]
        )
        # "foo(alpha, beta)" is 16 wide: fits in 20 - 4 but not in 19 - 4
        assert outer.body(20) == "fn x() {\n    foo(alpha, beta)\n}"
        assert outer.body(19) == "fn x() {\n    foo(\n        alpha,\n        beta\n    )\n}"

    def test_no_width_left_raises(self):
        nested = NestedFragment(
            preamble=AtomicFragment("foo("), postamble=")", nesting=[AtomicFragment("alpha")]
        )
        with pytest.raises(RenderInconsistencyError):
            nested.body(4)

    def test_zero_width_raises(self):
        with pytest.raises(RenderInconsistencyError):
            AppendedFragment([AtomicFragment("a")]).body(0)

    def test_imports(self):
        nested = NestedFragment(
            preamble=AtomicFragment("foo(", ["x::foo"]),
            nesting=[AtomicFragment("a", ["y::a"])],
        )
        assert nested.imports() == ["x::foo", "y::a"]


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


class TestExpressions:
    def test_call(self):
        call = CallFragment(AtomicFragment("foo"))
        call.add_argument_str("a")
        call.add_argument_str("b")
        assert call.body(80) == "foo(a, b);"

    def test_call_without_arguments(self):
        assert CallFragment(AtomicFragment("initialize_kb")).body(80) == "initialize_kb();"

    def test_macro_call(self):
        call = CallFragment(AtomicFragment("println"), [AtomicFragment('"hi"')], is_macro=True)
        assert call.body(80) == 'println!("hi");'

    def test_multi_line_call_has_trailing_comma(self):
        call = CallFragment(
            AtomicFragment("do_something"),
            [AtomicFragment("first_argument"), AtomicFragment("second_argument")],
        )
        assert call.body(30) == (
            "do_something(\n    first_argument,\n    second_argument,\n);"
        )

    def test_multi_line_macro_has_no_trailing_comma(self):
        call = AssertFragment(
            AtomicFragment("Target::archetype().internal_name_str()"),
            AtomicFragment("Some(Rc::from(Target::TYPE_NAME))"),
        )
        assert call.body(72) == (
            "assert_eq!(\n"
            "    Target::archetype().internal_name_str(),\n"
            "    Some(Rc::from(Target::TYPE_NAME))\n"
            ");"
        )

    def test_assert(self):
        assert AssertFragment(AtomicFragment("a"), AtomicFragment("b")).body(80) == (
            "assert_eq!(a, b);"
        )

    def test_assert_imports(self):
        assertion = AssertFragment(AtomicFragment("a", ["x::a"]), AtomicFragment("b", ["x::b"]))
        assert assertion.imports() == ["x::a", "x::b"]

    def test_empty_vec_ignores_width(self):
        assert VecFragment().body(80) == "vec![]"
        assert VecFragment().body(1) == "vec![]"

    def test_vec(self):
        vec = VecFragment()
        vec.add_element_str("1")
        vec.add_element_str("2")
        assert vec.body(80) == "vec![1, 2]"

    def test_vec_multi_line(self):
        vec = VecFragment([AtomicFragment("first"), AtomicFragment("second")])
        assert vec.body(12) == "vec![\n    first,\n    second\n]"


# ---------------------------------------------------------------------------
# Item declarations
# ---------------------------------------------------------------------------


class TestFunction:
    def test_simple(self):
        function = FunctionFragment(name="foo")
        function.append(AtomicFragment("bar();"))
        assert function.body(80) == "fn foo() {\n    bar();\n}"

    def test_empty_body(self):
        assert FunctionFragment(name="noop").body(80) == "fn noop() {}"

    def test_full_signature(self):
        function = FunctionFragment(
            name="is_big", self_reference=SelfReference.IMMUTABLE, return_type="bool"
        )
        function.add_arg("limit", "usize")
        function.mark_as_public()
        function.document("Whether this is big.")
        function.append(AtomicFragment("self.size > limit"))
        assert function.body(80) == (
            "/// Whether this is big.\n"
            "pub fn is_big(&self, limit: usize) -> bool {\n"
            "    self.size > limit\n"
            "}"
        )

    def test_mutable_self(self):
        function = FunctionFragment(name="grow", self_reference=SelfReference.MUTABLE)
        assert function.body(80) == "fn grow(&mut self) {}"

    def test_test_attribute(self):
        function = FunctionFragment(name="check")
        function.mark_as_test()
        function.append(AtomicFragment("assert!(true);"))
        assert function.body(80) == "#[test]\nfn check() {\n    assert!(true);\n}"

    def test_declare_only(self):
        function = FunctionFragment(name="area", self_reference=SelfReference.IMMUTABLE)
        function.mark_as_declare_only()
        assert function.body(80) == "fn area(&self);"
        function.mark_for_full_implementation()
        assert function.body(80) == "fn area(&self) {}"

    def test_imports(self):
        function = FunctionFragment(name="foo")
        function.add_import("std::fmt")
        function.append(AtomicFragment("x", ["x::y"]))
        assert function.imports() == ["std::fmt", "x::y"]


class TestModule:
    def test_imports_stay_inside(self):
        module = ModuleFragment(name="foo")
        module.append(AtomicFragment("struct A;", ["std::fmt"]))
        assert module.body(80) == "mod foo {\n    use std::fmt;\n\n    struct A;\n}"
        assert module.imports() == []

    def test_test_module(self):
        module = ModuleFragment.new_test_module()
        module.append(AtomicFragment("fn a() {}"))
        assert module.body(80) == (
            "#[cfg(test)]\nmod tests {\n    use super::*;\n\n    fn a() {}\n}"
        )

    def test_submodules_public_first_and_sorted(self):
        module = ModuleFragment(name="root")
        module.add_submodule("zeta").mark_as_public()
        module.add_submodule("beta")
        module.add_submodule("alpha").mark_as_public()
        assert module.body(80) == (
            "mod root {\n    pub mod alpha;\n    pub mod zeta;\n    mod beta;\n}"
        )

    def test_re_exports(self):
        module = ModuleFragment(name="root")
        module.mark_as_public()
        module.re_export("crate::a::A")
        assert module.body(80) == "pub mod root {\n    pub use crate::a::A;\n}"

    def test_empty(self):
        assert ModuleFragment(name="empty").body(80) == "mod empty {}"

    def test_file_module(self):
        module = ModuleFragment.new_file_module()
        module.document("Module docs.")
        module.append(AtomicFragment("pub struct A;", ["std::fmt"]))
        assert module.body(80) == "//! Module docs.\n\nuse std::fmt;\n\npub struct A;\n"

    def test_anonymous_inline_module_rejected(self):
        with pytest.raises(ValueError):
            ModuleFragment().body(80)


class TestTraitsAndImpls:
    def test_trait(self):
        trait = TraitFragment(
            trait_type=TypeFragment(
                name="Shape",
                required_traits=[TypeFragment(name="Debug", import_path="std::fmt::Debug")],
            )
        )
        trait.mark_as_public()
        area = FunctionFragment(
            name="area", self_reference=SelfReference.IMMUTABLE, return_type="f64"
        )
        area.mark_as_declare_only()
        trait.append(area)
        assert trait.body(80) == "pub trait Shape: Debug {\n    fn area(&self) -> f64;\n}"
        assert trait.imports() == ["std::fmt::Debug"]

    def test_trait_implementation(self):
        implementation = ImplementationFragment(
            struct_cfg=StructConfig(name="Circle", import_path="crate::shapes::Circle"),
            trait_cfg=StructConfig(name="Shape", import_path="crate::shapes::Shape"),
            same_file_as_struct=True,
        )
        area = FunctionFragment(
            name="area", self_reference=SelfReference.IMMUTABLE, return_type="f64"
        )
        area.append(AtomicFragment("3.14"))
        implementation.append(area)
        assert implementation.body(80) == (
            "impl Shape for Circle {\n"
            "    fn area(&self) -> f64 {\n"
            "        3.14\n"
            "    }\n"
            "}"
        )
        assert implementation.imports() == ["crate::shapes::Shape"]

    def test_inherent_implementation(self):
        implementation = ImplementationFragment(
            struct_cfg=StructConfig.from_import("crate::shapes::Circle")
        )
        assert implementation.body(80) == "impl Circle {}"
        assert implementation.imports() == ["crate::shapes::Circle"]

    def test_lifetimes(self):
        implementation = ImplementationFragment(
            struct_cfg=StructConfig.from_import("crate::Name"),
            trait_cfg=StructConfig.from_import("crate::Named"),
            same_file_as_struct=True,
            same_file_as_trait=True,
        )
        implementation.add_lifetime("a")
        assert implementation.body(80) == "impl<'a> Named for Name {}"
        assert implementation.imports() == []

    def test_type_bounds(self):
        bound = TypeFragment(name="T", required_traits=[AtomicFragment("Clone")])
        bound.add_required_trait(AtomicFragment("Debug", ["std::fmt::Debug"]))
        assert bound.body(80) == "T: Clone + Debug"
        assert bound.imports() == ["std::fmt::Debug"]

    def test_plain_type(self):
        assert TypeFragment(name="usize").body(80) == "usize"


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class TestFile:
    def test_layout(self):
        file = FileFragment(self_import="crate::a::A")
        file.append(AtomicFragment("pub struct A;", ["std::fmt::Debug", "crate::a::A"]))
        file.append_test(AtomicFragment("fn t() {}"))
        assert file.generate_code() == (
            "use std::fmt::Debug;\n"
            "\n"
            "pub struct A;\n"
            "\n"
            "#[cfg(test)]\n"
            "mod tests {\n"
            "    use super::*;\n"
            "\n"
            "    fn t() {}\n"
            "}\n"
        )

    def test_empty(self):
        file = FileFragment()
        assert file.is_empty()
        assert file.generate_code() == ""

    def test_current_crate_rewritten(self):
        file = FileFragment(current_crate="zamm_yin")
        file.append(AtomicFragment("x", ["zamm_yin::tao::Tao"]))
        assert file.generate_code().startswith("use crate::tao::Tao;\n\n")

    def test_preamble(self):
        file = FileFragment(preamble=AtomicFragment("//! Top."))
        file.append(AtomicFragment("x"))
        assert file.generate_code() == "//! Top.\n\nx\n"

    def test_prepend(self):
        file = FileFragment()
        file.append(AtomicFragment("b"))
        file.prepend(AtomicFragment("a"))
        assert file.generate_code() == "a\n\nb\n"

    def test_file_imports_never_leak(self):
        file = FileFragment()
        file.append(AtomicFragment("x", ["std::fmt"]))
        assert file.imports() == []


# ---------------------------------------------------------------------------
# Rendering invariants
# ---------------------------------------------------------------------------


class TestInvariants:
    def test_rendering_is_pure(self):
        file = FileFragment()
        function = FunctionFragment(name="f")
        function.append(_call_args())
        file.append(function)
        assert file.generate_code(12) == file.generate_code(12)

    def test_shared_child_visible_in_every_parent(self):
        shared = CallFragment(AtomicFragment("init"))
        first = FunctionFragment(name="first")
        second = FunctionFragment(name="second")
        first.append(shared)
        second.append(shared)
        shared.add_argument_str("x")
        assert "init(x);" in first.body(80)
        assert "init(x);" in second.body(80)

    def test_every_variant_has_rules(self):
        for variant in FRAGMENT_TYPES:
            assert variant in _RENDERERS
            assert variant in _IMPORTS

    def test_unknown_variant_rejected(self):
        class Rogue(Fragment):
            pass

        with pytest.raises(TypeError):
            render(Rogue(), 80)
        with pytest.raises(TypeError):
            collect_imports(Rogue())
