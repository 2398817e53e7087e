"""Unit tests for the autogeneration ledger (yang.codegen.ledger).

Tests cover:
- Tracking order and duplicate suppression
- Merging into an existing manifest
- read_manifest
- clean_autogen (existing files, missing files, no manifest)
"""

from __future__ import annotations

from pathlib import Path

import pytest

from yang.codegen.ledger import AutogenLedger, clean_autogen, read_manifest

pytestmark = pytest.mark.unit


class TestAutogenLedger:
    def test_starts_empty(self, tmp_path: Path):
        ledger = AutogenLedger(tmp_path / ".autogen.txt")
        assert len(ledger) == 0
        assert ledger.tracked() == []

    def test_tracks_in_order_without_duplicates(self, tmp_path: Path):
        ledger = AutogenLedger(tmp_path / ".autogen.txt")
        assert ledger.track("b.rs") is True
        assert ledger.track(Path("a.rs")) is True
        assert ledger.track("b.rs") is False
        assert ledger.tracked() == ["b.rs", "a.rs"]
        assert "a.rs" in ledger

    def test_save_writes_manifest(self, tmp_path: Path):
        tracker = tmp_path / ".autogen.txt"
        ledger = AutogenLedger(tracker)
        ledger.track("a.rs")
        ledger.track("b.rs")
        assert ledger.save() == tracker
        assert tracker.read_text(encoding="utf-8") == "a.rs\nb.rs\n"

    def test_save_merges_with_existing_manifest(self, tmp_path: Path):
        tracker = tmp_path / ".autogen.txt"
        tracker.write_text("old.rs\na.rs\n", encoding="utf-8")
        ledger = AutogenLedger(tracker)
        ledger.track("a.rs")
        ledger.track("new.rs")
        ledger.save()
        assert read_manifest(tracker) == ["old.rs", "a.rs", "new.rs"]

    def test_save_twice_is_stable(self, tmp_path: Path):
        ledger = AutogenLedger(tmp_path / ".autogen.txt")
        ledger.track("a.rs")
        ledger.save()
        ledger.save()
        assert read_manifest(ledger.tracker) == ["a.rs"]

    def test_reset(self, tmp_path: Path):
        ledger = AutogenLedger(tmp_path / ".autogen.txt")
        ledger.track("a.rs")
        ledger.reset()
        assert ledger.tracked() == []


class TestReadManifest:
    def test_missing(self, tmp_path: Path):
        assert read_manifest(tmp_path / "nope.txt") == []

    def test_skips_blank_lines(self, tmp_path: Path):
        tracker = tmp_path / ".autogen.txt"
        tracker.write_text("a.rs\n\n  b.rs  \n", encoding="utf-8")
        assert read_manifest(tracker) == ["a.rs", "b.rs"]


class TestCleanAutogen:
    def test_removes_listed_files_and_manifest(self, tmp_path: Path):
        generated = tmp_path / "generated.rs"
        generated.write_text("// generated", encoding="utf-8")
        handwritten = tmp_path / "main.rs"
        handwritten.write_text("fn main() {}", encoding="utf-8")
        tracker = tmp_path / ".autogen.txt"
        tracker.write_text(f"{generated}\n", encoding="utf-8")

        removed = clean_autogen(tracker)

        assert removed == [generated]
        assert not generated.exists()
        assert handwritten.exists()
        assert not tracker.exists()

    def test_missing_files_skipped(self, tmp_path: Path):
        tracker = tmp_path / ".autogen.txt"
        tracker.write_text(f"{tmp_path / 'gone.rs'}\n", encoding="utf-8")
        assert clean_autogen(tracker) == []
        assert not tracker.exists()

    def test_no_manifest(self, tmp_path: Path):
        assert clean_autogen(tmp_path / ".autogen.txt") == []
