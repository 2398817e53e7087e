"""Unit tests for rustdoc comment formatting (yang.codegen.docstring)."""

from __future__ import annotations

import pytest

from yang.codegen.docstring import into_docstring, into_parent_docstring

pytestmark = pytest.mark.unit


class TestIntoDocstring:
    def test_short_line(self):
        assert (
            into_docstring("The target of an implement command.", 80)
            == "/// The target of an implement command."
        )

    def test_wraps_at_width(self):
        doc = into_docstring("one two three four five six", 20)
        assert doc == "/// one two three\n/// four five six"
        assert all(len(line) <= 20 for line in doc.split("\n"))

    def test_blank_paragraph_kept(self):
        assert into_docstring("First.\n\nSecond.", 80) == "/// First.\n///\n/// Second."

    def test_long_word_not_broken(self):
        word = "a" * 50
        assert into_docstring(word, 20) == f"/// {word}"

    def test_surrounding_whitespace_stripped(self):
        assert into_docstring("\n  Padded.  \n", 80) == "/// Padded."

    def test_no_room_for_text(self):
        with pytest.raises(ValueError):
            into_docstring("x", 4)


class TestIntoParentDocstring:
    def test_uses_parent_marker(self):
        assert into_parent_docstring("Module docs.", 80) == "//! Module docs."
