"""Bookkeeping for generated files.

Every file written during a run is tracked in an :class:`AutogenLedger`.  At
the end of the run the ledger is merged into a manifest file (one path per
line), which :func:`clean_autogen` later uses to delete exactly the files
the generator is responsible for and nothing hand-authored.
"""

from __future__ import annotations

from pathlib import Path

from yang.utils import console, ensure_line, print_warning


class AutogenLedger:
    """Ordered, duplicate-free record of the files produced in one run.

    The ledger only ever grows.  Removing files is left to
    :func:`clean_autogen`.
    """

    def __init__(self, tracker: Path) -> None:
        self.tracker = Path(tracker)
        self._paths: list[str] = []

    def __len__(self) -> int:
        return len(self._paths)

    def __contains__(self, path: object) -> bool:
        return str(path) in self._paths

    def track(self, path: str | Path) -> bool:
        """Record *path*.  Returns ``False`` if it was already recorded."""
        entry = str(path)
        if entry in self._paths:
            return False
        self._paths.append(entry)
        return True

    def tracked(self) -> list[str]:
        """Recorded paths in the order they were first tracked."""
        return list(self._paths)

    def save(self) -> Path:
        """Merge the recorded paths into the manifest file.

        Paths already listed in the manifest are kept and not repeated.
        """
        for entry in self._paths:
            ensure_line(self.tracker, entry)
        return self.tracker

    def reset(self) -> None:
        self._paths.clear()


def read_manifest(tracker: Path) -> list[str]:
    """Paths listed in the manifest at *tracker*, or ``[]`` if there is none."""
    if not tracker.exists():
        return []
    lines = tracker.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip()]


def clean_autogen(tracker: Path) -> list[Path]:
    """Delete every file listed in the manifest, then the manifest itself.

    Files that no longer exist are skipped with a warning.

    Returns:
        The files that were actually removed.
    """
    if not tracker.exists():
        console.print("No autogenerated files to clean up.")
        return []

    removed: list[Path] = []
    for entry in read_manifest(tracker):
        path = Path(entry)
        if not path.is_file():
            print_warning(f"Skipping deletion of {entry}. It might not exist anymore.")
            continue
        path.unlink()
        removed.append(path)
    tracker.unlink()
    return removed
