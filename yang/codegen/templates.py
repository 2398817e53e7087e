"""Jinja2 template rendering for fixed blocks of Rust code.

Large blocks of boilerplate (trait implementations, fixed tests) are kept as
``.rs.j2`` files under ``yang/codegen/templates/`` and rendered into atomic
fragments.  Anything whose layout depends on the line width is built from
fragments instead.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from yang.codegen.docstring import into_docstring


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders the Rust code templates shipped with yang.

    Undefined template variables raise instead of rendering as empty text, so
    a missing config value cannot silently produce code that does not
    compile.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["docstring"] = into_docstring

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"concept.rs.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template with surrounding blank lines stripped.
        """
        template = self.env.get_template(template_path)
        return template.render(**context).strip("\n")

