"""Import block generation.

Fragments report the fully-qualified paths they need in the order they were
collected.  This module turns such a list into the final ``use`` block:
duplicates are collapsed, paths are grouped by their top-level namespace, groups
are ordered alphabetically and separated by a blank line.  The output depends
only on the set of paths, never on the order they were gathered in.
"""

from __future__ import annotations

from collections.abc import Iterable

PATH_SEPARATOR = "::"


def replace_current_crate(current_crate: str, import_path: str) -> str:
    """Rewrite ``<current_crate>::x`` as ``crate::x``."""
    prefix = f"{current_crate}{PATH_SEPARATOR}"
    if current_crate != "crate" and import_path.startswith(prefix):
        return f"crate{PATH_SEPARATOR}{import_path[len(prefix):]}"
    return import_path


def split_namespace(import_path: str) -> tuple[str, str]:
    """Split a path into its top-level namespace and the remainder."""
    namespace, _, remainder = import_path.partition(PATH_SEPARATOR)
    return namespace, remainder


def group_imports(paths: Iterable[str]) -> dict[str, list[str]]:
    """Deduplicate *paths* and group them by top-level namespace.

    Both the groups and the paths inside each group come back sorted.
    """
    groups: dict[str, set[str]] = {}
    for path in paths:
        if not path:
            continue
        namespace, _ = split_namespace(path)
        groups.setdefault(namespace, set()).add(path)
    return {namespace: sorted(groups[namespace]) for namespace in sorted(groups)}


def render_imports(paths: Iterable[str], *, public: bool = False) -> str:
    """Render an import block, one statement per line.

    Args:
        paths: Fully-qualified import paths, possibly repeated.
        public: Emit ``pub use`` re-exports instead of plain imports.

    Returns:
        The import block without a trailing newline, or ``""`` for no paths.
    """
    keyword = "pub use" if public else "use"
    blocks = [
        "\n".join(f"{keyword} {path};" for path in group)
        for group in group_imports(paths).values()
    ]
    return "\n\n".join(blocks)


def imports_as_str(
    current_crate: str,
    paths: Iterable[str],
    excluded: Iterable[str] = (),
) -> str:
    """Render the import block for a file or module.

    Paths inside *current_crate* are rewritten relative to ``crate`` and any
    path in *excluded* (usually the item the file itself defines) is dropped.
    """
    skip = set(excluded)
    resolved = [replace_current_crate(current_crate, path) for path in paths]
    return render_imports(path for path in resolved if path not in skip)


def re_exports_as_str(paths: Iterable[str]) -> str:
    return render_imports(paths, public=True)
